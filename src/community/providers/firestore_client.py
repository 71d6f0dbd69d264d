"""Firestore client wrapper for database operations."""

import logging
import os
from contextlib import contextmanager

from google.api_core.exceptions import GoogleAPIError
from google.cloud import firestore

from community.exceptions import StoreError

logger = logging.getLogger(__name__)

_DIRECTIONS = {
    "asc": firestore.Query.ASCENDING,
    "desc": firestore.Query.DESCENDING,
}


@contextmanager
def _store_errors(action: str, collection: str):
    """Re-raise backend failures as StoreError."""
    try:
        yield
    except GoogleAPIError as e:
        logger.error(f"Firestore {action} on {collection} failed: {e}")
        raise StoreError(f"Storage backend unavailable ({action} {collection})") from e


class FirestoreClient:
    """
    Wrapper for Firestore operations.

    Handles connection management, emulator support, and the generic
    collection operations the services depend on.
    """

    USERS_COLLECTION = "users"
    PROFILES_COLLECTION = "profiles"
    ARTICLES_COLLECTION = "articles"
    APPROVAL_REQUESTS_COLLECTION = "approval_requests"
    SESSIONS_COLLECTION = "sessions"

    def __init__(
        self,
        project_id: str,
        use_emulator: bool = False,
        emulator_host: str = "localhost:8080",
    ):
        """
        Initialize Firestore client.

        Args:
            project_id: GCP project ID.
            use_emulator: Whether to use Firebase Emulator.
            emulator_host: Emulator host:port.
        """
        self.project_id = project_id
        self.use_emulator = use_emulator

        if use_emulator:
            os.environ["FIRESTORE_EMULATOR_HOST"] = emulator_host

        self._client = firestore.Client(project=project_id)

    async def get_document(self, collection: str, doc_id: str) -> dict | None:
        """Get a document's data by ID, or None if it does not exist."""
        with _store_errors("get", collection):
            doc = self._client.collection(collection).document(doc_id).get()
        if doc.exists:
            return doc.to_dict()
        return None

    async def set_document(
        self, collection: str, doc_id: str, data: dict, merge: bool = False
    ) -> str:
        """Create or overwrite a document. With ``merge`` this is an upsert."""
        with _store_errors("set", collection):
            self._client.collection(collection).document(doc_id).set(data, merge=merge)
        return doc_id

    async def update_document(self, collection: str, doc_id: str, data: dict) -> None:
        """Update fields of an existing document."""
        with _store_errors("update", collection):
            self._client.collection(collection).document(doc_id).update(data)

    async def delete_document(self, collection: str, doc_id: str) -> None:
        """Delete a document."""
        with _store_errors("delete", collection):
            self._client.collection(collection).document(doc_id).delete()

    def _build_query(self, collection: str, filters: dict | None):
        query = self._client.collection(collection)
        if filters:
            for field, value in filters.items():
                # Support __in suffix for "in" queries (e.g., "status__in")
                if field.endswith("__in"):
                    query = query.where(field.removesuffix("__in"), "in", value)
                else:
                    query = query.where(field, "==", value)
        return query

    async def query_documents(
        self,
        collection: str,
        filters: dict | None = None,
        order_by: list[tuple[str, str]] | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> list[tuple[str, dict]]:
        """
        Query documents with optional filtering, ordering and paging.

        Args:
            collection: Collection name.
            filters: Equality filters as {field: value}, or {field__in: [values]}.
            order_by: (field, "asc" | "desc") pairs, applied in order.
            limit: Maximum results.
            offset: Number of results to skip.

        Returns:
            List of (document_id, data) pairs.
        """
        query = self._build_query(collection, filters)
        for field, direction in order_by or []:
            query = query.order_by(field, direction=_DIRECTIONS[direction])

        query = query.limit(limit).offset(offset)
        with _store_errors("query", collection):
            return [(doc.id, doc.to_dict()) for doc in query.stream()]

    async def count_documents(self, collection: str, filters: dict | None = None) -> int:
        """Count documents matching equality filters."""
        query = self._build_query(collection, filters)
        with _store_errors("count", collection):
            results = query.count().get()
        return results[0][0].value

    async def batch_write(
        self,
        sets: list[tuple[str, str, dict]] | None = None,
        updates: list[tuple[str, str, dict]] | None = None,
    ) -> None:
        """
        Apply several document writes atomically.

        Args:
            sets: (collection, document_id, data) triples to create or overwrite.
            updates: (collection, document_id, fields) triples to update.
        """
        sets = sets or []
        updates = updates or []
        batch = self._client.batch()
        for collection, doc_id, data in sets:
            batch.set(self._client.collection(collection).document(doc_id), data)
        for collection, doc_id, data in updates:
            batch.update(self._client.collection(collection).document(doc_id), data)

        collections = ",".join(sorted({write[0] for write in sets + updates}))
        with _store_errors("batch write", collections):
            batch.commit()
