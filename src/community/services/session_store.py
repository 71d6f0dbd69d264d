"""Persistence of client sessions."""

import logging
import secrets
from datetime import datetime, timedelta, timezone

from community.exceptions import StoreError
from community.models.session import Session
from community.models.user import User
from community.providers.firestore_client import FirestoreClient

logger = logging.getLogger(__name__)


class SessionStore:
    """
    Saves sessions so they survive restarts.

    ``start`` populates a session at sign-in, ``restore`` rebuilds one from a
    token at startup or per request, and ``clear`` tears it down at sign-out.
    """

    def __init__(self, firestore: FirestoreClient, ttl_hours: int = 24 * 30):
        self.firestore = firestore
        self.collection = FirestoreClient.SESSIONS_COLLECTION
        self.ttl = timedelta(hours=ttl_hours)

    async def start(self, session: Session, user: User) -> Session:
        """
        Persist a new session for ``user`` and populate ``session`` with it.

        The session object is only modified after the record is written.
        Any session the object previously held is discarded.
        """
        token = secrets.token_urlsafe(32)
        now = datetime.now(timezone.utc)
        await self.firestore.set_document(
            self.collection, token, {"user_id": user.id, "created_at": now.isoformat()}
        )

        previous = session.token
        session.token = token
        session.user = user
        session.created_at = now

        if previous:
            await self._discard(previous)
        return session

    async def restore(self, token: str | None) -> Session:
        """
        Rebuild a session from its token.

        Returns an empty session when the token is missing, unknown, expired,
        or refers to a user that no longer exists. The user record is re-read,
        so role changes made since sign-in are picked up.
        """
        if not token:
            return Session()

        data = await self.firestore.get_document(self.collection, token)
        if not data:
            return Session()

        created_at = datetime.fromisoformat(data["created_at"])
        if datetime.now(timezone.utc) - created_at > self.ttl:
            logger.info("Discarding expired session")
            await self._discard(token)
            return Session()

        user_data = await self.firestore.get_document(
            FirestoreClient.USERS_COLLECTION, data["user_id"]
        )
        if not user_data:
            await self._discard(token)
            return Session()

        return Session(
            token=token,
            user=User.from_firestore(data["user_id"], user_data),
            created_at=created_at,
        )

    async def clear(self, session: Session) -> None:
        """Delete the persisted record and empty the session. Never raises."""
        if session.token:
            await self._discard(session.token)
        session.clear()

    async def _discard(self, token: str) -> None:
        try:
            await self.firestore.delete_document(self.collection, token)
        except StoreError:
            # The record expires through the TTL check
            logger.warning("Could not delete persisted session", exc_info=True)
