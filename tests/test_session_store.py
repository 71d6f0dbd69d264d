"""Tests for SessionStore."""

from datetime import datetime, timedelta, timezone

from community.exceptions import StoreError
from community.models.session import Session
from community.models.user import Volunteer
from community.providers.firestore_client import FirestoreClient

from conftest import make_user

SESSIONS = FirestoreClient.SESSIONS_COLLECTION
USERS = FirestoreClient.USERS_COLLECTION


class TestSessionStore:
    """Tests for session persistence and restoration."""

    async def test_start_persists_record(self, session_store, firestore):
        user = make_user("u1")
        session = await session_store.start(Session(), user)

        assert session.user == user
        assert session.token
        assert firestore.docs(SESSIONS)[session.token]["user_id"] == "u1"

    async def test_restore_rereads_user(self, session_store, firestore, sign_in):
        session = await sign_in("u1", Volunteer(approved=False))
        firestore.docs(USERS)["u1"]["is_approved"] = True

        restored = await session_store.restore(session.token)

        assert restored.token == session.token
        assert restored.user.role == Volunteer(approved=True)

    async def test_restore_without_token(self, session_store):
        assert not (await session_store.restore(None)).is_authenticated
        assert not (await session_store.restore("")).is_authenticated

    async def test_restore_unknown_token(self, session_store):
        restored = await session_store.restore("not-a-token")
        assert restored == Session()

    async def test_restore_expired(self, session_store, firestore, sign_in):
        session = await sign_in("u1")
        old = datetime.now(timezone.utc) - timedelta(hours=25)
        firestore.docs(SESSIONS)[session.token]["created_at"] = old.isoformat()

        restored = await session_store.restore(session.token)

        assert not restored.is_authenticated
        assert session.token not in firestore.docs(SESSIONS)

    async def test_restore_deleted_user(self, session_store, firestore, sign_in):
        session = await sign_in("u1")
        del firestore.docs(USERS)["u1"]

        restored = await session_store.restore(session.token)

        assert not restored.is_authenticated
        assert session.token not in firestore.docs(SESSIONS)

    async def test_new_sign_in_discards_previous_token(self, session_store, firestore, sign_in):
        session = await sign_in("u1")
        previous = session.token

        await session_store.start(session, make_user("u2"))

        assert session.token != previous
        assert session.user.id == "u2"
        assert previous not in firestore.docs(SESSIONS)

    async def test_clear_never_raises(self, session_store, firestore, sign_in, monkeypatch):
        session = await sign_in("u1")

        async def broken_delete(collection, doc_id):
            raise StoreError("Storage backend unavailable")

        monkeypatch.setattr(firestore, "delete_document", broken_delete)
        await session_store.clear(session)

        assert session == Session()

    async def test_clear_empty_session(self, session_store):
        session = Session()
        await session_store.clear(session)
        assert session == Session()
