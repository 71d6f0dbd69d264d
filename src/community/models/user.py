"""User model and role-based authorization predicates."""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal, Union, assert_never

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StringConstraints


class RoleName(str, Enum):
    """Role names as stored in Firestore and accepted at registration."""

    VISITOR = "visitor"
    VOLUNTEER = "volunteer"
    ADMIN = "admin"


class Visitor(BaseModel):
    """Reader account. Always approved."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["visitor"] = "visitor"


class Volunteer(BaseModel):
    """Contributor account, gated by admin approval."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["volunteer"] = "volunteer"
    approved: bool = False


class Admin(BaseModel):
    """Moderator account. Only ever granted through an approved request."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["admin"] = "admin"


Role = Annotated[Union[Visitor, Volunteer, Admin], Field(discriminator="kind")]


def make_role(name: RoleName, approved: bool) -> Visitor | Volunteer | Admin:
    """
    Build the role variant for a stored (role, is_approved) pair.

    An unapproved admin cannot be represented; such a record maps to an
    unapproved volunteer, which carries the same (empty) capabilities.
    """
    name = RoleName(name)
    if name is RoleName.VISITOR:
        return Visitor()
    if name is RoleName.VOLUNTEER:
        return Volunteer(approved=approved)
    if name is RoleName.ADMIN:
        return Admin() if approved else Volunteer(approved=False)
    assert_never(name)


class User(BaseModel):
    """Community member account."""

    id: str = Field(..., description="Identity service UID")
    name: str = Field(..., description="Display name")
    email: EmailStr = Field(..., description="Unique email address")
    role: Role = Field(default_factory=Visitor)
    avatar_url: str | None = Field(None, description="Generated avatar image URL")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def role_name(self) -> RoleName:
        return RoleName(self.role.kind)

    @property
    def is_approved(self) -> bool:
        role = self.role
        if isinstance(role, Visitor):
            return True
        if isinstance(role, Volunteer):
            return role.approved
        if isinstance(role, Admin):
            return True
        assert_never(role)

    def to_firestore(self) -> dict:
        """Convert to Firestore document (id is the document key)."""
        data = self.model_dump(mode="json", exclude={"id", "name", "role"})
        data["full_name"] = self.name
        data["role"] = self.role_name.value
        data["is_approved"] = self.is_approved
        return data

    @classmethod
    def from_firestore(cls, uid: str, data: dict) -> "User":
        """Create from Firestore document."""
        return cls.model_validate(
            {
                "id": uid,
                "name": data.get("full_name") or "",
                "email": data["email"],
                "role": make_role(
                    data.get("role", RoleName.VISITOR), data.get("is_approved", False)
                ).model_dump(),
                "avatar_url": data.get("avatar_url"),
                "created_at": data.get("created_at") or datetime.now(timezone.utc),
                "updated_at": data.get("updated_at") or datetime.now(timezone.utc),
            }
        )


class RegistrationForm(BaseModel):
    """Sign-up fields with their form constraints."""

    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
    email: EmailStr
    password: str = Field(..., min_length=6)
    role: RoleName = RoleName.VISITOR


def can_manage_articles(user: User | None) -> bool:
    """Whether the user may create and edit articles and see drafts."""
    if user is None:
        return False
    role = user.role
    if isinstance(role, Visitor):
        return False
    if isinstance(role, Volunteer):
        return role.approved
    if isinstance(role, Admin):
        return True
    assert_never(role)


def can_moderate(user: User | None) -> bool:
    """Whether the user may decide approval requests and edit any article."""
    if user is None:
        return False
    role = user.role
    if isinstance(role, (Visitor, Volunteer)):
        return False
    if isinstance(role, Admin):
        return True
    assert_never(role)
