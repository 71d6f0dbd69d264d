"""Clients for the hosted services the backend depends on."""

from community.providers.firestore_client import FirestoreClient
from community.providers.identity_client import IdentityClient
from community.providers.notifier import AdminNotifier
from community.providers.storage_client import StorageClient

__all__ = [
    "AdminNotifier",
    "FirestoreClient",
    "IdentityClient",
    "StorageClient",
]
