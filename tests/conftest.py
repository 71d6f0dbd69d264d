"""Shared fixtures and in-memory stand-ins for the hosted services."""

import copy
import itertools
from datetime import datetime, timezone

import pytest

from community.exceptions import AuthenticationError, DuplicateEmailError, StoreError
from community.models.session import Session
from community.models.user import Admin, User, Visitor, Volunteer
from community.providers.firestore_client import FirestoreClient
from community.services.account_service import AccountService
from community.services.article_service import ArticleService
from community.services.image_service import ImageService
from community.services.profile_service import ProfileService
from community.services.session_store import SessionStore


class FakeFirestore:
    """Dict-backed replacement for FirestoreClient."""

    def __init__(self):
        self.collections: dict[str, dict[str, dict]] = {}
        self.fail_batches = False

    def docs(self, collection: str) -> dict[str, dict]:
        return self.collections.setdefault(collection, {})

    async def get_document(self, collection, doc_id):
        data = self.docs(collection).get(doc_id)
        return copy.deepcopy(data) if data is not None else None

    async def set_document(self, collection, doc_id, data, merge=False):
        existing = self.docs(collection).get(doc_id)
        if merge and existing is not None:
            existing.update(copy.deepcopy(data))
        else:
            self.docs(collection)[doc_id] = copy.deepcopy(data)
        return doc_id

    async def update_document(self, collection, doc_id, data):
        if doc_id not in self.docs(collection):
            raise StoreError(f"No document to update: {collection}/{doc_id}")
        self.docs(collection)[doc_id].update(copy.deepcopy(data))

    async def delete_document(self, collection, doc_id):
        self.docs(collection).pop(doc_id, None)

    def _matching(self, collection, filters):
        results = []
        for doc_id, data in self.docs(collection).items():
            matched = True
            for field, value in (filters or {}).items():
                if field.endswith("__in"):
                    matched = data.get(field.removesuffix("__in")) in value
                else:
                    matched = data.get(field) == value
                if not matched:
                    break
            if matched:
                results.append((doc_id, copy.deepcopy(data)))
        return results

    async def query_documents(self, collection, filters=None, order_by=None, limit=100, offset=0):
        docs = self._matching(collection, filters)
        # Stable sort from the last key to the first; nulls sort lowest
        for field, direction in reversed(order_by or []):
            present = [doc for doc in docs if doc[1].get(field) is not None]
            missing = [doc for doc in docs if doc[1].get(field) is None]
            present.sort(key=lambda doc: doc[1][field], reverse=direction == "desc")
            docs = present + missing if direction == "desc" else missing + present
        return docs[offset : offset + limit]

    async def count_documents(self, collection, filters=None):
        return len(self._matching(collection, filters))

    async def batch_write(self, sets=None, updates=None):
        if self.fail_batches:
            raise StoreError("Storage backend unavailable (batch write)")
        for collection, doc_id, _ in updates or []:
            if doc_id not in self.docs(collection):
                raise StoreError(f"No document to update: {collection}/{doc_id}")
        for collection, doc_id, data in sets or []:
            self.docs(collection)[doc_id] = copy.deepcopy(data)
        for collection, doc_id, data in updates or []:
            self.docs(collection)[doc_id].update(copy.deepcopy(data))


class FakeIdentity:
    """Credential store keyed by email."""

    def __init__(self):
        self.accounts: dict[str, tuple[str, str]] = {}
        self.deleted: list[str] = []
        self.create_calls = 0
        self._ids = itertools.count(1)

    def add_account(self, email: str, password: str, uid: str | None = None) -> str:
        uid = uid or f"uid-{next(self._ids)}"
        self.accounts[email] = (uid, password)
        return uid

    async def create_account(self, email, password, display_name):
        self.create_calls += 1
        if email in self.accounts:
            raise DuplicateEmailError(email)
        return self.add_account(email, password)

    async def delete_account(self, uid):
        self.deleted.append(uid)
        self.accounts = {
            email: entry for email, entry in self.accounts.items() if entry[0] != uid
        }

    async def verify_password(self, email, password):
        entry = self.accounts.get(email)
        if entry is None or entry[1] != password:
            raise AuthenticationError("Invalid credentials")
        return entry[0]


class FakeStorage:
    """Keeps uploaded objects in memory."""

    def __init__(self):
        self.objects: dict[str, tuple[bytes, str | None]] = {}

    async def upload_bytes(self, data, gcs_path, content_type=None):
        self.objects[gcs_path] = (data, content_type)
        return f"gs://test-bucket/{gcs_path}"

    def get_public_url(self, gcs_path):
        return f"https://storage.googleapis.com/test-bucket/{gcs_path}"


class RecordingNotifier:
    """Collects pending-registration notices instead of mailing them."""

    def __init__(self):
        self.notices = []

    async def notify_pending_registration(self, user, request):
        self.notices.append((user, request))


class FailingNotifier:
    """Notifier whose transport is down."""

    async def notify_pending_registration(self, user, request):
        raise ConnectionRefusedError("SMTP server unreachable")


@pytest.fixture
def firestore():
    return FakeFirestore()


@pytest.fixture
def identity():
    return FakeIdentity()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def failing_notifier():
    return FailingNotifier()


@pytest.fixture
def session_store(firestore):
    return SessionStore(firestore, ttl_hours=24)


@pytest.fixture
def account_service(firestore, identity, session_store, notifier):
    return AccountService(
        firestore=firestore,
        identity=identity,
        sessions=session_store,
        notifier=notifier,
    )


@pytest.fixture
def article_service(firestore):
    return ArticleService(firestore)


@pytest.fixture
def profile_service(firestore):
    return ProfileService(firestore)


@pytest.fixture
def image_service(storage):
    return ImageService(storage, prefix="article-images")


def make_user(uid: str, role=None, name: str | None = None) -> User:
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return User(
        id=uid,
        name=name or uid.title(),
        email=f"{uid}@example.com",
        role=role or Visitor(),
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def sign_in(firestore, session_store):
    """Store a user record and return a persisted session for it."""

    async def _sign_in(uid: str, role=None, name: str | None = None) -> Session:
        user = make_user(uid, role, name)
        await firestore.set_document(FirestoreClient.USERS_COLLECTION, uid, user.to_firestore())
        return await session_store.start(Session(), user)

    return _sign_in


@pytest.fixture
async def admin_session(sign_in):
    return await sign_in("admin", Admin())


@pytest.fixture
async def volunteer_session(sign_in):
    return await sign_in("vol", Volunteer(approved=True))


@pytest.fixture
async def other_volunteer_session(sign_in):
    return await sign_in("other", Volunteer(approved=True))


@pytest.fixture
async def pending_volunteer_session(sign_in):
    return await sign_in("pending", Volunteer(approved=False))


@pytest.fixture
async def visitor_session(sign_in):
    return await sign_in("reader", Visitor())
