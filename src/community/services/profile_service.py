"""Profile management service."""

import logging
from datetime import datetime, timezone

from community.exceptions import AuthenticationError, NotFoundError, ValidationError
from community.models.profile import BIOGRAPHY_MAX_LENGTH, AvatarSettings, Profile
from community.models.session import Session
from community.models.user import User
from community.providers.firestore_client import FirestoreClient
from community.services.avatars import build_avatar_url

logger = logging.getLogger(__name__)


class ProfileService:
    """Reads and updates the signed-in user's name, biography and avatar."""

    def __init__(self, firestore: FirestoreClient):
        """Initialize ProfileService."""
        self.firestore = firestore

    async def get_profile(self, session: Session) -> tuple[User, Profile]:
        """Current user record and profile (defaults if none saved yet)."""
        user = await self._load_user(session)
        data = await self.firestore.get_document(FirestoreClient.PROFILES_COLLECTION, user.id)
        profile = Profile.from_firestore(user.id, data) if data else Profile(id=user.id)
        return user, profile

    async def update_profile(
        self,
        session: Session,
        full_name: str | None = None,
        biography: str | None = None,
        avatar: AvatarSettings | None = None,
    ) -> tuple[User, Profile]:
        """
        Update display name, biography and avatar settings.

        The profile document is upserted; the user's avatar URL is regenerated
        from the settings and the session's user is refreshed.
        """
        if biography is not None and len(biography) > BIOGRAPHY_MAX_LENGTH:
            raise ValidationError(
                {"biography": f"Biography must be at most {BIOGRAPHY_MAX_LENGTH} characters"}
            )

        user, current = await self.get_profile(session)
        now = datetime.now(timezone.utc)
        profile = Profile(
            id=user.id,
            biography=current.biography if biography is None else biography,
            avatar=current.avatar if avatar is None else avatar,
            updated_at=now,
        )

        user_updates = {
            "avatar_url": build_avatar_url(user.id, profile.avatar),
            "updated_at": now.isoformat(),
        }
        if full_name is not None and full_name.strip():
            user_updates["full_name"] = full_name.strip()

        await self.firestore.update_document(
            FirestoreClient.USERS_COLLECTION, user.id, user_updates
        )
        await self.firestore.set_document(
            FirestoreClient.PROFILES_COLLECTION, user.id, profile.to_firestore(), merge=True
        )

        user = User.from_firestore(user.id, {**user.to_firestore(), **user_updates})
        session.user = user
        logger.info(f"Updated profile for user {user.id}")
        return user, profile

    async def _load_user(self, session: Session) -> User:
        if not session.user:
            raise AuthenticationError("Sign in to view your profile")
        data = await self.firestore.get_document(FirestoreClient.USERS_COLLECTION, session.user.id)
        if not data:
            raise NotFoundError("User not found")
        return User.from_firestore(session.user.id, data)
