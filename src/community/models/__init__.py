"""Data models for the IDEA community backend."""

from community.models.approval import ApprovalDecision, ApprovalRequest, ApprovalStatus
from community.models.article import Article, ArticleForm, ArticleStatus, compute_read_time
from community.models.profile import AVATAR_OPTIONS, AvatarSettings, Profile
from community.models.session import Session
from community.models.user import (
    Admin,
    RoleName,
    User,
    Visitor,
    Volunteer,
    can_manage_articles,
    can_moderate,
)

__all__ = [
    # User
    "User",
    "RoleName",
    "Visitor",
    "Volunteer",
    "Admin",
    "can_manage_articles",
    "can_moderate",
    # Approval
    "ApprovalRequest",
    "ApprovalStatus",
    "ApprovalDecision",
    # Article
    "Article",
    "ArticleForm",
    "ArticleStatus",
    "compute_read_time",
    # Profile
    "Profile",
    "AvatarSettings",
    "AVATAR_OPTIONS",
    # Session
    "Session",
]
