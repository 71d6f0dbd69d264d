"""Google Cloud Storage client wrapper."""

import asyncio
import logging
import os

from google.api_core.exceptions import GoogleAPIError
from google.cloud import storage

from community.exceptions import StoreError

logger = logging.getLogger(__name__)

PUBLIC_BASE_URL = "https://storage.googleapis.com"


class StorageClient:
    """
    Bucket holding user-uploaded media.

    Objects are written publicly readable by URL; the emulator serves them
    from its own host.
    """

    def __init__(
        self,
        bucket_name: str,
        use_emulator: bool = False,
        emulator_host: str = "localhost:9199",
    ):
        """
        Initialize Storage client.

        Args:
            bucket_name: GCS bucket name.
            use_emulator: Whether to use Firebase Storage Emulator.
            emulator_host: Emulator host:port.
        """
        self.bucket_name = bucket_name
        self.base_url = PUBLIC_BASE_URL

        if use_emulator:
            self.base_url = f"http://{emulator_host}"
            os.environ["STORAGE_EMULATOR_HOST"] = self.base_url

        self._bucket = storage.Client().bucket(bucket_name)

    async def upload_bytes(
        self,
        data: bytes,
        gcs_path: str,
        content_type: str | None = None,
    ) -> str:
        """
        Write an object.

        Returns:
            GCS URI (gs://bucket/path).

        Raises:
            StoreError: If the upload fails.
        """
        blob = self._bucket.blob(gcs_path)
        try:
            await asyncio.to_thread(blob.upload_from_string, data, content_type=content_type)
        except GoogleAPIError as e:
            logger.error(f"Upload to {gcs_path} failed: {e}")
            raise StoreError("Image storage unavailable") from e
        return f"gs://{self.bucket_name}/{gcs_path}"

    def get_public_url(self, gcs_path: str) -> str:
        """URL the object is served from (the bucket must allow public reads)."""
        return f"{self.base_url}/{self.bucket_name}/{gcs_path}"
