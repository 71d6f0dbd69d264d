"""Tests for data models."""

from datetime import datetime, timezone

import pytest

from community.models.approval import ApprovalDecision, ApprovalRequest, ApprovalStatus
from community.models.article import Article, ArticleStatus, compute_read_time, normalize_tags
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
    make_role,
)


class TestReadTime:
    """Tests for the derived reading time."""

    def test_four_hundred_words_take_two_minutes(self):
        assert compute_read_time(" ".join(["word"] * 400)) == 2

    def test_single_word_takes_one_minute(self):
        assert compute_read_time("hello") == 1

    def test_empty_content_still_one_minute(self):
        assert compute_read_time("") == 1

    def test_partial_minute_rounds_up(self):
        assert compute_read_time(" ".join(["word"] * 201)) == 2

    def test_whitespace_runs_count_once(self):
        assert compute_read_time("one\n\n two\tthree   four") == 1


class TestTags:
    """Tests for tag normalization."""

    def test_trims_and_drops_blanks(self):
        assert normalize_tags([" python ", "", "  "]) == ["python"]

    def test_removes_duplicates_keeping_first(self):
        assert normalize_tags(["b", "a", "b", " a"]) == ["b", "a"]

    def test_none_is_empty(self):
        assert normalize_tags(None) == []


class TestRoles:
    """Tests for role variants and authorization predicates."""

    def test_make_role_visitor(self):
        assert make_role(RoleName.VISITOR, approved=False) == Visitor()

    def test_make_role_volunteer_keeps_approval(self):
        assert make_role("volunteer", approved=False) == Volunteer(approved=False)
        assert make_role("volunteer", approved=True) == Volunteer(approved=True)

    def test_unapproved_admin_is_held_as_pending_volunteer(self):
        assert make_role(RoleName.ADMIN, approved=False) == Volunteer(approved=False)

    def test_unknown_role_name_rejected(self):
        with pytest.raises(ValueError):
            make_role("superuser", approved=True)

    @pytest.mark.parametrize(
        "role,manages,moderates",
        [
            (Visitor(), False, False),
            (Volunteer(approved=False), False, False),
            (Volunteer(approved=True), True, False),
            (Admin(), True, True),
        ],
    )
    def test_predicates(self, role, manages, moderates):
        user = User(id="u1", name="U", email="u1@example.com", role=role)
        assert can_manage_articles(user) is manages
        assert can_moderate(user) is moderates

    def test_predicates_without_user(self):
        assert can_manage_articles(None) is False
        assert can_moderate(None) is False

    def test_visitor_is_always_approved(self):
        user = User(id="u1", name="U", email="u1@example.com")
        assert user.role_name is RoleName.VISITOR
        assert user.is_approved is True


class TestUserModel:
    """Tests for User Firestore mapping."""

    def test_to_firestore_flattens_role(self):
        user = User(
            id="u1",
            name="Jane",
            email="jane@example.com",
            role=Volunteer(approved=True),
        )
        data = user.to_firestore()
        assert data["full_name"] == "Jane"
        assert data["role"] == "volunteer"
        assert data["is_approved"] is True
        assert "id" not in data

    def test_from_firestore(self):
        user = User.from_firestore(
            "u1",
            {
                "full_name": "Jane",
                "email": "jane@example.com",
                "role": "admin",
                "is_approved": True,
                "created_at": "2024-01-01T00:00:00+00:00",
            },
        )
        assert user.id == "u1"
        assert user.name == "Jane"
        assert user.role == Admin()
        assert user.created_at == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_from_firestore_defaults_to_unapproved(self):
        user = User.from_firestore("u1", {"email": "jane@example.com", "role": "volunteer"})
        assert user.role == Volunteer(approved=False)
        assert user.name == ""


class TestApprovalModels:
    """Tests for approval request models."""

    def test_decision_status(self):
        assert ApprovalDecision.APPROVE.resulting_status is ApprovalStatus.APPROVED
        assert ApprovalDecision.REJECT.resulting_status is ApprovalStatus.REJECTED

    def test_stored_with_role_field(self):
        request = ApprovalRequest(id="r1", user_id="u1", requested_role=RoleName.ADMIN)
        data = request.to_firestore()
        assert data["role"] == "admin"
        assert data["status"] == "pending"
        assert "requested_role" not in data

        restored = ApprovalRequest.from_firestore("r1", data)
        assert restored.requested_role is RoleName.ADMIN
        assert restored.is_pending


class TestArticleModel:
    """Tests for Article model."""

    def test_draft_defaults(self):
        article = Article(id="a1", title="Title", content="x", author_id="u1")
        assert article.status is ArticleStatus.DRAFT
        assert article.published_at is None
        assert not article.is_published

    def test_firestore_keeps_null_published_at(self):
        article = Article(id="a1", title="Title", content="x", author_id="u1")
        data = article.to_firestore()
        assert data["published_at"] is None
        assert Article.from_firestore("a1", data).published_at is None


class TestProfileModel:
    """Tests for Profile and avatar settings."""

    def test_avatar_stored_as_flat_fields(self):
        profile = Profile(id="u1", biography="Hi", avatar=AvatarSettings(hair="curly"))
        data = profile.to_firestore()
        assert data["avatar_hair"] == "curly"
        assert data["avatar_skin"] == "medium"
        assert "avatar" not in data

    def test_from_firestore_ignores_missing_avatar_fields(self):
        profile = Profile.from_firestore("u1", {"biography": "Hi", "avatar_background": "teal"})
        assert profile.avatar.background == "teal"
        assert profile.avatar.skin == "medium"
        assert profile.avatar.hair is None

    def test_options_cover_every_setting(self):
        assert set(AVATAR_OPTIONS) == set(AvatarSettings.model_fields)

    def test_invalid_option_rejected(self):
        with pytest.raises(ValueError):
            AvatarSettings(skin="green")


class TestSession:
    """Tests for Session."""

    def test_clear(self):
        session = Session(token="t", user=User(id="u1", name="U", email="u1@example.com"))
        assert session.is_authenticated
        session.clear()
        assert session.token is None
        assert not session.is_authenticated
