"""Domain services for the IDEA community backend."""

from community.services.account_service import AccountService
from community.services.article_editor import ArticleEditor
from community.services.article_service import ArticleService, can_edit_article
from community.services.image_service import ImageService
from community.services.profile_service import ProfileService
from community.services.session_store import SessionStore

__all__ = [
    "AccountService",
    "ArticleEditor",
    "ArticleService",
    "ImageService",
    "ProfileService",
    "SessionStore",
    "can_edit_article",
]
