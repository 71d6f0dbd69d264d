"""Article models."""

import math
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Average reading speed used for the derived read time
WORDS_PER_MINUTE = 200


class ArticleStatus(str, Enum):
    """Article visibility state. Published is terminal."""

    DRAFT = "draft"
    PUBLISHED = "published"


def compute_read_time(content: str) -> int:
    """Minutes to read ``content`` at WORDS_PER_MINUTE, never less than 1."""
    word_count = len(content.split())
    return max(1, math.ceil(word_count / WORDS_PER_MINUTE))


def normalize_tags(tags) -> list[str]:
    """Trim tags, drop blanks and duplicates, keep first-seen order."""
    seen: list[str] = []
    for tag in tags or []:
        tag = str(tag).strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


class ArticleForm(BaseModel):
    """Editable article fields with their form constraints."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=5, description="Article title")
    content: str = Field(..., min_length=50, description="Markdown body")
    tags: list[str] = Field(default_factory=list)
    status: ArticleStatus = Field(default=ArticleStatus.DRAFT)
    read_time: int = Field(..., ge=1, description="Reading time in minutes")

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: list[str]) -> list[str]:
        return normalize_tags(value)


class Article(BaseModel):
    """Community article."""

    id: str = Field(..., description="Firestore document ID")
    title: str
    content: str
    tags: list[str] = Field(default_factory=list)
    status: ArticleStatus = Field(default=ArticleStatus.DRAFT)
    read_time: int = Field(default=1, ge=1)
    author_id: str = Field(..., description="UID of the author")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    published_at: datetime | None = Field(None, description="Set once, on first publish")

    @property
    def is_published(self) -> bool:
        return self.status is ArticleStatus.PUBLISHED

    def to_firestore(self) -> dict:
        """Convert to Firestore document."""
        return self.model_dump(mode="json", exclude={"id"})

    @classmethod
    def from_firestore(cls, doc_id: str, data: dict) -> "Article":
        """Create from Firestore document."""
        data = dict(data)
        data["id"] = doc_id
        return cls.model_validate(data)
