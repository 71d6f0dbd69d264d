"""Profile and avatar settings models."""

from datetime import datetime, timezone
from typing import Literal, get_args

from pydantic import BaseModel, Field

BIOGRAPHY_MAX_LENGTH = 2000

SkinTone = Literal["light", "medium", "dark", "pale", "tan", "golden", "olive"]
Clothing = Literal["casual", "formal", "sporty", "business", "sleeveless", "hooded"]
Background = Literal[
    "blue", "green", "purple", "orange", "pink", "teal", "red", "yellow", "gray"
]
Gender = Literal["neutral", "male", "female"]
Hair = Literal["short", "long", "curly", "wavy", "bald", "buzz"]
Accessories = Literal["none", "glasses", "sunglasses", "earrings"]
FacialHair = Literal["none", "beard", "mustache", "goatee"]
Eyebrows = Literal["default", "raised", "angry", "concerned"]


class AvatarSettings(BaseModel):
    """Style parameters for the generated avatar."""

    skin: SkinTone = "medium"
    clothing: Clothing = "casual"
    background: Background = "blue"
    gender: Gender = "neutral"
    hair: Hair | None = None
    accessories: Accessories | None = None
    facial_hair: FacialHair | None = None
    eyebrows: Eyebrows | None = None


# Allowed values per avatar setting, in editor order
AVATAR_OPTIONS: dict[str, tuple[str, ...]] = {
    "skin": get_args(SkinTone),
    "clothing": get_args(Clothing),
    "background": get_args(Background),
    "gender": get_args(Gender),
    "hair": get_args(Hair),
    "accessories": get_args(Accessories),
    "facial_hair": get_args(FacialHair),
    "eyebrows": get_args(Eyebrows),
}


class Profile(BaseModel):
    """Public profile attached to a user (same document ID)."""

    id: str = Field(..., description="UID of the owning user")
    biography: str = Field(default="", max_length=BIOGRAPHY_MAX_LENGTH)
    avatar: AvatarSettings = Field(default_factory=AvatarSettings)
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    def to_firestore(self) -> dict:
        """Convert to Firestore document with flat ``avatar_*`` fields."""
        data = {
            "biography": self.biography,
            "updated_at": self.updated_at.isoformat(),
        }
        for name, value in self.avatar.model_dump().items():
            data[f"avatar_{name}"] = value
        return data

    @classmethod
    def from_firestore(cls, doc_id: str, data: dict) -> "Profile":
        """Create from Firestore document."""
        avatar = {
            name: data[f"avatar_{name}"]
            for name in AvatarSettings.model_fields
            if data.get(f"avatar_{name}") is not None
        }
        return cls.model_validate(
            {
                "id": doc_id,
                "biography": data.get("biography") or "",
                "avatar": avatar,
                "updated_at": data.get("updated_at") or datetime.now(timezone.utc),
            }
        )
