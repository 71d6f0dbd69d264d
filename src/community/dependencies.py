"""Dependency injection for FastAPI."""

import asyncio
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status

from community.auth import get_bearer_token
from community.config import Settings, get_settings
from community.models.session import Session
from community.providers.firestore_client import FirestoreClient
from community.providers.identity_client import IdentityClient
from community.providers.notifier import AdminNotifier
from community.providers.storage_client import StorageClient
from community.services.account_service import AccountService
from community.services.article_service import ArticleService
from community.services.image_service import ImageService
from community.services.profile_service import ProfileService
from community.services.session_store import SessionStore


@lru_cache
def get_firestore_client() -> FirestoreClient:
    """Get cached Firestore client."""
    settings = get_settings()
    return FirestoreClient(
        project_id=settings.gcp_project_id,
        use_emulator=settings.use_firebase_emulator,
        emulator_host=settings.firestore_emulator_host,
    )


@lru_cache
def get_storage_client() -> StorageClient:
    """Get cached Storage client."""
    settings = get_settings()
    return StorageClient(
        bucket_name=settings.gcs_bucket_name,
        use_emulator=settings.use_firebase_emulator,
        emulator_host=settings.storage_emulator_host,
    )


@lru_cache
def get_identity_client() -> IdentityClient:
    """Get cached Firebase Authentication client."""
    settings = get_settings()
    return IdentityClient(
        api_key=settings.firebase_api_key,
        use_emulator=settings.use_firebase_emulator,
        emulator_host=settings.firebase_auth_emulator_host,
    )


@lru_cache
def get_admin_notifier() -> AdminNotifier:
    """Get cached admin notifier."""
    settings = get_settings()
    return AdminNotifier(
        host=settings.smtp_host,
        port=settings.smtp_port,
        user=settings.smtp_user,
        password=settings.smtp_password,
        sender=settings.smtp_sender,
        recipients=settings.admin_notification_emails,
    )


@lru_cache
def get_background_tasks() -> set[asyncio.Task]:
    """Process-wide registry of fire-and-forget tasks, drained at shutdown."""
    return set()


def get_session_store(
    firestore: Annotated[FirestoreClient, Depends(get_firestore_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SessionStore:
    """Get SessionStore instance."""
    return SessionStore(firestore=firestore, ttl_hours=settings.session_ttl_hours)


def get_account_service(
    firestore: Annotated[FirestoreClient, Depends(get_firestore_client)],
    identity: Annotated[IdentityClient, Depends(get_identity_client)],
    sessions: Annotated[SessionStore, Depends(get_session_store)],
    notifier: Annotated[AdminNotifier, Depends(get_admin_notifier)],
    background: Annotated[set[asyncio.Task], Depends(get_background_tasks)],
) -> AccountService:
    """Get AccountService instance."""
    return AccountService(
        firestore=firestore,
        identity=identity,
        sessions=sessions,
        notifier=notifier,
        background=background,
    )


def get_article_service(
    firestore: Annotated[FirestoreClient, Depends(get_firestore_client)],
) -> ArticleService:
    """Get ArticleService instance."""
    return ArticleService(firestore=firestore)


def get_profile_service(
    firestore: Annotated[FirestoreClient, Depends(get_firestore_client)],
) -> ProfileService:
    """Get ProfileService instance."""
    return ProfileService(firestore=firestore)


def get_image_service(
    storage: Annotated[StorageClient, Depends(get_storage_client)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ImageService:
    """Get ImageService instance."""
    return ImageService(storage=storage, prefix=settings.article_images_prefix)


async def get_session(
    token: Annotated[str | None, Depends(get_bearer_token)],
    sessions: Annotated[SessionStore, Depends(get_session_store)],
) -> Session:
    """Restore the caller's session; empty for anonymous callers."""
    return await sessions.restore(token)


async def require_session(session: Annotated[Session, Depends(get_session)]) -> Session:
    """
    Require a signed-in user.

    Raises:
        HTTPException: 401 if the session is empty
    """
    if not session.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]
AccountServiceDep = Annotated[AccountService, Depends(get_account_service)]
ArticleServiceDep = Annotated[ArticleService, Depends(get_article_service)]
ProfileServiceDep = Annotated[ProfileService, Depends(get_profile_service)]
ImageServiceDep = Annotated[ImageService, Depends(get_image_service)]

# Session dependencies
SessionDep = Annotated[Session, Depends(get_session)]
AuthenticatedSessionDep = Annotated[Session, Depends(require_session)]
