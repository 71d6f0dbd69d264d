"""Article lifecycle service."""

import logging
import uuid
from datetime import datetime, timezone

from community.exceptions import (
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from community.models.article import Article, ArticleStatus
from community.models.session import Session
from community.models.user import User, can_manage_articles, can_moderate
from community.providers.firestore_client import FirestoreClient
from community.services.article_editor import ArticleEditor

logger = logging.getLogger(__name__)


def can_edit_article(user: User | None, article: Article) -> bool:
    """Admins edit any article; approved volunteers edit their own."""
    if can_moderate(user):
        return True
    return can_manage_articles(user) and user.id == article.author_id


class ArticleService:
    """
    Service for article CRUD with visibility and edit permissions.

    Drafts are visible only to users who can manage articles. Publishing is
    one-way and stamps ``published_at`` once.
    """

    COLLECTION = FirestoreClient.ARTICLES_COLLECTION

    # Newest publication first; drafts (null published_at) sort last
    ORDERING = [("published_at", "desc"), ("created_at", "desc")]

    def __init__(self, firestore: FirestoreClient):
        """Initialize ArticleService."""
        self.firestore = firestore

    async def create_article(
        self,
        session: Session,
        title: str,
        content: str,
        tags: list[str] | None = None,
        status: ArticleStatus | str = ArticleStatus.DRAFT,
        read_time: int | None = None,
    ) -> Article:
        """
        Create an article authored by the session user.

        Args:
            session: Current session
            title: At least 5 characters
            content: At least 50 characters
            tags: Tag names
            status: Initial status
            read_time: Minutes; derived from content when omitted

        Raises:
            PermissionDeniedError: If the user cannot manage articles
            ValidationError: If a field is invalid
        """
        author = session.user
        if not can_manage_articles(author):
            raise PermissionDeniedError("You don't have permission to create articles")

        editor = ArticleEditor(
            title=title, content=content, tags=tags, status=status, read_time=read_time
        )
        form = editor.validate()

        now = datetime.now(timezone.utc)
        article = Article(
            id=str(uuid.uuid4()),
            **form.model_dump(),
            author_id=author.id,
            created_at=now,
            updated_at=now,
            published_at=now if form.status is ArticleStatus.PUBLISHED else None,
        )

        await self.firestore.set_document(self.COLLECTION, article.id, article.to_firestore())
        logger.info(f"User {author.id} created {article.status.value} article {article.id}")
        return article

    async def get_article(self, session: Session, article_id: str) -> Article:
        """
        Get an article by ID.

        Drafts are reported as missing to viewers who cannot manage articles.

        Raises:
            NotFoundError: If the article does not exist or is hidden
        """
        article = await self._load(article_id)
        if not article.is_published and not can_manage_articles(session.user):
            raise NotFoundError(f"Article {article_id} not found")
        return article

    async def list_articles(
        self,
        session: Session,
        page: int = 1,
        page_size: int = 6,
    ) -> tuple[list[Article], int]:
        """
        List articles visible to the session user.

        Args:
            session: Current session
            page: Page number (1-indexed)
            page_size: Items per page

        Returns:
            Tuple of (articles, total_count).
        """
        errors = {}
        if page < 1:
            errors["page"] = "Page must be at least 1"
        if page_size < 1:
            errors["page_size"] = "Page size must be at least 1"
        if errors:
            raise ValidationError(errors)

        filters = {}
        if not can_manage_articles(session.user):
            filters["status"] = ArticleStatus.PUBLISHED.value

        total = await self.firestore.count_documents(self.COLLECTION, filters)
        docs = await self.firestore.query_documents(
            self.COLLECTION,
            filters=filters,
            order_by=self.ORDERING,
            limit=page_size,
            offset=(page - 1) * page_size,
        )

        return [Article.from_firestore(doc_id, data) for doc_id, data in docs], total

    async def update_article(self, session: Session, article_id: str, fields: dict) -> Article:
        """
        Edit an article.

        Content changes recompute read_time unless ``fields`` also carries an
        explicit read_time. Publishing a draft stamps ``published_at`` if it
        was never set; a published article cannot return to draft.

        Raises:
            PermissionDeniedError: If the user is neither an admin nor the
                volunteer author
            NotFoundError: If the article does not exist
            ValidationError: If a field is invalid
            InvalidStateError: On published -> draft
        """
        actor = session.user
        if not can_manage_articles(actor):
            raise PermissionDeniedError("You don't have permission to edit articles")

        article = await self._load(article_id)
        if not can_edit_article(actor, article):
            raise PermissionDeniedError("You can only edit your own articles")

        editor = ArticleEditor.from_article(article)
        editor.apply(fields)
        form = editor.validate()

        if article.is_published and form.status is ArticleStatus.DRAFT:
            raise InvalidStateError("A published article cannot be returned to draft")

        now = datetime.now(timezone.utc)
        changes = {**form.model_dump(), "updated_at": now}
        if form.status is ArticleStatus.PUBLISHED and article.published_at is None:
            changes["published_at"] = now

        # Serialized through the model so timestamps match what create wrote
        updated = article.model_copy(update=changes)
        stored = updated.to_firestore()
        await self.firestore.update_document(
            self.COLLECTION, article_id, {field: stored[field] for field in changes}
        )

        if updated.is_published and not article.is_published:
            logger.info(f"User {actor.id} published article {article_id}")
        else:
            logger.info(f"User {actor.id} updated article {article_id}")
        return updated

    async def delete_article(self, session: Session, article_id: str) -> None:
        """
        Delete an article permanently.

        Raises:
            PermissionDeniedError: If the user is neither an admin nor the
                volunteer author
            NotFoundError: If the article does not exist
        """
        actor = session.user
        if not can_manage_articles(actor):
            raise PermissionDeniedError("You don't have permission to delete articles")

        article = await self._load(article_id)
        if not can_edit_article(actor, article):
            raise PermissionDeniedError("You can only delete your own articles")

        await self.firestore.delete_document(self.COLLECTION, article_id)
        logger.info(f"User {actor.id} deleted article {article_id}")

    async def _load(self, article_id: str) -> Article:
        data = await self.firestore.get_document(self.COLLECTION, article_id)
        if not data:
            raise NotFoundError(f"Article {article_id} not found")
        return Article.from_firestore(article_id, data)
