"""Account, role and approval management service."""

import asyncio
import logging
import uuid
from datetime import datetime, timezone

from pydantic import ValidationError as PydanticValidationError

from community.exceptions import (
    AuthenticationError,
    DuplicateEmailError,
    InvalidStateError,
    NotFoundError,
    PermissionDeniedError,
    StoreError,
    ValidationError,
)
from community.models.approval import ApprovalDecision, ApprovalRequest, ApprovalStatus
from community.models.session import Session
from community.models.user import (
    RegistrationForm,
    RoleName,
    User,
    Visitor,
    Volunteer,
    can_moderate,
    make_role,
)
from community.providers.firestore_client import FirestoreClient
from community.providers.identity_client import IdentityClient
from community.providers.notifier import AdminNotifier
from community.services.avatars import build_avatar_url
from community.services.session_store import SessionStore

logger = logging.getLogger(__name__)


class AccountService:
    """Service for sign-in, registration and admin approval of elevated roles."""

    def __init__(
        self,
        firestore: FirestoreClient,
        identity: IdentityClient,
        sessions: SessionStore,
        notifier: AdminNotifier,
        background: set[asyncio.Task] | None = None,
    ):
        """
        Initialize AccountService.

        Args:
            firestore: Firestore client instance
            identity: Credential store client
            sessions: Session persistence
            notifier: Administrator notification channel
            background: Registry for fire-and-forget tasks (per instance if omitted)
        """
        self.firestore = firestore
        self.identity = identity
        self.sessions = sessions
        self.notifier = notifier
        self.users_collection = FirestoreClient.USERS_COLLECTION
        self.requests_collection = FirestoreClient.APPROVAL_REQUESTS_COLLECTION
        self._background = set() if background is None else background

    async def get_user(self, uid: str) -> User | None:
        """
        Get user by UID.

        Args:
            uid: Identity service UID

        Returns:
            User instance or None if not found
        """
        data = await self.firestore.get_document(self.users_collection, uid)
        if not data:
            return None
        return User.from_firestore(uid, data)

    async def find_user_by_email(self, email: str) -> User | None:
        docs = await self.firestore.query_documents(
            self.users_collection, filters={"email": email}, limit=1
        )
        for doc_id, data in docs:
            return User.from_firestore(doc_id, data)
        return None

    async def login(self, session: Session, email: str, password: str) -> User:
        """
        Sign in with email and password.

        Args:
            session: Session to populate on success
            email: Account email
            password: Account password

        Returns:
            The stored User

        Raises:
            AuthenticationError: If the credentials do not match. The session
                is left untouched.
        """
        uid = await self.identity.verify_password(email, password)

        user = await self.get_user(uid)
        if not user:
            # Credential exists without a user record
            logger.warning(f"Sign-in for {uid} has no user record")
            raise AuthenticationError("Invalid credentials")

        await self.sessions.start(session, user)
        logger.info(f"User {uid} signed in as {user.role_name.value}")
        return user

    async def register(
        self,
        session: Session,
        name: str,
        email: str,
        password: str,
        requested_role: RoleName | str = RoleName.VISITOR,
    ) -> User:
        """
        Create an account and sign it in.

        Visitors are approved immediately. Volunteer and admin applicants are
        created unapproved with one pending ApprovalRequest, and administrators
        are notified in the background.

        Raises:
            ValidationError: If a field is invalid (before any external call)
            DuplicateEmailError: If the email is already registered
        """
        try:
            form = RegistrationForm(name=name, email=email, password=password, role=requested_role)
        except PydanticValidationError as e:
            raise ValidationError.from_pydantic(e)

        if await self.find_user_by_email(form.email):
            raise DuplicateEmailError(form.email)

        uid = await self.identity.create_account(form.email, form.password, form.name)

        now = datetime.now(timezone.utc)
        elevated = form.role is not RoleName.VISITOR
        user = User(
            id=uid,
            name=form.name,
            email=form.email,
            role=Volunteer(approved=False) if elevated else Visitor(),
            avatar_url=build_avatar_url(uid),
            created_at=now,
            updated_at=now,
        )

        writes = [(self.users_collection, uid, user.to_firestore())]
        request = None
        if elevated:
            request = ApprovalRequest(
                id=str(uuid.uuid4()),
                user_id=uid,
                requested_role=form.role,
                created_at=now,
                updated_at=now,
            )
            writes.append((self.requests_collection, request.id, request.to_firestore()))

        try:
            await self.firestore.batch_write(sets=writes)
        except StoreError:
            await self._rollback_account(uid)
            raise

        await self.sessions.start(session, user)
        logger.info(f"Registered user {uid} requesting {form.role.value}")

        if request:
            self._dispatch_notification(user, request)

        return user

    async def logout(self, session: Session) -> None:
        """Sign out. Clears the session and its persisted record."""
        user_id = session.user.id if session.user else None
        await self.sessions.clear(session)
        if user_id:
            logger.info(f"User {user_id} signed out")

    async def decide_approval_request(
        self,
        session: Session,
        request_id: str,
        decision: ApprovalDecision | str,
    ) -> ApprovalRequest:
        """
        Approve or reject a pending request (admin only).

        Approval grants the requested role to the user. The request and user
        writes are committed together.

        Raises:
            PermissionDeniedError: If the session user is not an admin
            NotFoundError: If the request (or its user) does not exist
            InvalidStateError: If the request is not pending
        """
        admin = self._require_admin(session)
        try:
            decision = ApprovalDecision(decision)
        except ValueError:
            raise ValidationError({"decision": f"Unknown decision: {decision}"})

        data = await self.firestore.get_document(self.requests_collection, request_id)
        if not data:
            raise NotFoundError(f"Approval request {request_id} not found")
        request = ApprovalRequest.from_firestore(request_id, data)

        if not request.is_pending:
            raise InvalidStateError(
                f"Approval request {request_id} is already {request.status.value}"
            )

        user = await self.get_user(request.user_id)
        if not user:
            raise NotFoundError(f"User {request.user_id} not found")

        now = datetime.now(timezone.utc)
        request.status = decision.resulting_status
        request.updated_at = now
        request.decided_by = admin.id
        updates = [
            (
                self.requests_collection,
                request_id,
                {
                    "status": request.status.value,
                    "updated_at": now.isoformat(),
                    "decided_by": admin.id,
                },
            )
        ]

        if decision is ApprovalDecision.APPROVE:
            role = make_role(request.requested_role, approved=True)
            updates.append(
                (
                    self.users_collection,
                    user.id,
                    {"role": role.kind, "is_approved": True, "updated_at": now.isoformat()},
                )
            )

        await self.firestore.batch_write(updates=updates)
        logger.info(
            f"Admin {admin.id} {request.status.value} request {request_id} "
            f"({request.requested_role.value}) for user {user.id}"
        )
        return request

    async def list_approval_requests(
        self,
        session: Session,
        status_filter: ApprovalStatus | None = None,
        limit: int = 100,
    ) -> list[ApprovalRequest]:
        """Approval requests, newest first (admin only)."""
        self._require_admin(session)

        filters = {}
        if status_filter:
            filters["status"] = status_filter.value

        docs = await self.firestore.query_documents(
            self.requests_collection,
            filters=filters,
            order_by=[("created_at", "desc")],
            limit=limit,
        )
        return [ApprovalRequest.from_firestore(doc_id, data) for doc_id, data in docs]

    async def list_users(self, session: Session, limit: int = 100) -> list[User]:
        """All users, newest first (admin only)."""
        self._require_admin(session)

        docs = await self.firestore.query_documents(
            self.users_collection, order_by=[("created_at", "desc")], limit=limit
        )
        return [User.from_firestore(doc_id, data) for doc_id, data in docs]

    async def drain(self) -> None:
        """Wait for outstanding background notifications."""
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)

    def _require_admin(self, session: Session) -> User:
        if not can_moderate(session.user):
            raise PermissionDeniedError("Admin privileges required")
        return session.user

    def _dispatch_notification(self, user: User, request: ApprovalRequest) -> None:
        task = asyncio.create_task(self.notifier.notify_pending_registration(user, request))
        self._background.add(task)
        task.add_done_callback(self._notification_done)

    def _notification_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Admin notification failed", exc_info=exc)

    async def _rollback_account(self, uid: str) -> None:
        try:
            await self.identity.delete_account(uid)
        except StoreError:
            logger.error(f"Could not roll back credential record {uid}", exc_info=True)
