"""API request and response schemas."""

from pydantic import BaseModel, Field

from community.models.approval import ApprovalRequest
from community.models.article import Article, ArticleStatus
from community.models.profile import AvatarSettings, Profile
from community.models.session import Session
from community.models.user import RoleName, User


class RegisterRequest(BaseModel):
    """User registration request. Field rules are enforced by the service."""

    name: str
    email: str
    password: str
    role: RoleName = RoleName.VISITOR


class LoginRequest(BaseModel):
    """Email/password sign-in request."""

    email: str
    password: str


class UserResponse(BaseModel):
    """User information response."""

    id: str
    name: str
    email: str
    role: RoleName
    is_approved: bool
    avatar_url: str | None

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            role=user.role_name,
            is_approved=user.is_approved,
            avatar_url=user.avatar_url,
        )


class SessionResponse(BaseModel):
    """Issued session token and its user."""

    token: str
    user: UserResponse

    @classmethod
    def from_session(cls, session: Session) -> "SessionResponse":
        return cls(token=session.token, user=UserResponse.from_user(session.user))


class UserListResponse(BaseModel):
    """User list response."""

    users: list[UserResponse]
    total: int


class ApprovalRequestListResponse(BaseModel):
    """Approval request list response."""

    requests: list[ApprovalRequest]
    total: int


class ArticleCreateRequest(BaseModel):
    """New article fields."""

    title: str
    content: str
    tags: list[str] = Field(default_factory=list)
    status: ArticleStatus = ArticleStatus.DRAFT
    read_time: int | None = Field(None, description="Minutes; derived from content if omitted")


class ArticleUpdateRequest(BaseModel):
    """Partial article update; only fields sent are changed."""

    title: str | None = None
    content: str | None = None
    tags: list[str] | None = None
    status: ArticleStatus | None = None
    read_time: int | None = None


class ArticleListResponse(BaseModel):
    """Paginated article list."""

    articles: list[Article]
    total: int
    page: int = 1
    page_size: int = 6


class ProfileResponse(BaseModel):
    """Signed-in user's profile."""

    user: UserResponse
    biography: str
    avatar: AvatarSettings

    @classmethod
    def build(cls, user: User, profile: Profile) -> "ProfileResponse":
        return cls(
            user=UserResponse.from_user(user),
            biography=profile.biography,
            avatar=profile.avatar,
        )


class ProfileUpdateRequest(BaseModel):
    """Profile changes; omitted fields are kept."""

    full_name: str | None = None
    biography: str | None = None
    avatar: AvatarSettings | None = None


class AvatarPreviewResponse(BaseModel):
    """Avatar settings with their rendered URL."""

    avatar: AvatarSettings
    avatar_url: str
