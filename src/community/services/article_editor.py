"""Editing-session state for an article form."""

from pydantic import ValidationError as PydanticValidationError

from community.exceptions import ValidationError
from community.models.article import (
    Article,
    ArticleForm,
    ArticleStatus,
    compute_read_time,
    normalize_tags,
)

# Order in which ``apply`` assigns fields; read_time last so an explicit value
# wins over the one derived from content
EDITABLE_FIELDS = ("title", "content", "tags", "status", "read_time")


class ArticleEditor:
    """
    Form state for one create or edit session.

    Changing the content recomputes the read time. Setting the read time
    afterwards overrides it until the content changes again.
    """

    def __init__(
        self,
        title: str = "",
        content: str = "",
        tags: list[str] | None = None,
        status: ArticleStatus | str = ArticleStatus.DRAFT,
        read_time: int | None = None,
    ):
        self.title = title
        self.content = content
        self.tags = normalize_tags(tags)
        self.status = status
        self.read_time = compute_read_time(content) if read_time is None else read_time

    @classmethod
    def from_article(cls, article: Article) -> "ArticleEditor":
        return cls(
            title=article.title,
            content=article.content,
            tags=article.tags,
            status=article.status,
            read_time=article.read_time,
        )

    def set_content(self, content: str) -> None:
        if content == self.content:
            return
        self.content = content
        self.read_time = compute_read_time(content)

    def set_read_time(self, minutes: int) -> None:
        self.read_time = minutes

    def add_tag(self, tag: str) -> bool:
        """Add a tag. Returns False for blanks and duplicates."""
        tag = tag.strip()
        if not tag or tag in self.tags:
            return False
        self.tags.append(tag)
        return True

    def remove_tag(self, tag: str) -> None:
        self.tags = [t for t in self.tags if t != tag]

    def apply(self, fields: dict) -> None:
        """Assign a partial update, content before read_time. Nothing changes on error."""
        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError({name: "Field cannot be edited" for name in sorted(unknown)})

        nulls = sorted(name for name, value in fields.items() if value is None)
        if nulls:
            raise ValidationError({name: "Field cannot be null" for name in nulls})

        for name in EDITABLE_FIELDS:
            if name not in fields:
                continue
            value = fields[name]
            if name == "content":
                self.set_content(value)
            elif name == "read_time":
                self.set_read_time(value)
            elif name == "tags":
                self.tags = normalize_tags(value)
            else:
                setattr(self, name, value)

    def validate(self) -> ArticleForm:
        """
        Check every field.

        Raises:
            ValidationError: With one message per invalid field.
        """
        try:
            return ArticleForm(
                title=self.title,
                content=self.content,
                tags=self.tags,
                status=self.status,
                read_time=self.read_time,
            )
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e)
