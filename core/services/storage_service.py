# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles admin attachment uploads to Supabase Storage.
# =============================================================================

import logging
import uuid

from app.config import settings
from app.exceptions import StorageUploadError
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


def _extension(filename: str | None) -> str:
    if not filename or "." not in filename:
        return "bin"
    return filename.rsplit(".", 1)[-1].lower()


class StorageService:
    """
    Service for Supabase Storage operations.

    Uploaded files get a random name so two uploads never collide.
    """

    @staticmethod
    def upload_file(
        file_content: bytes,
        filename: str | None,
        content_type: str | None = None,
    ) -> str:
        """
        Upload raw file content to the items bucket.

        Args:
            file_content: File bytes
            filename: Original filename (only the extension is kept)
            content_type: MIME type reported by the browser

        Returns:
            Public URL of the stored file

        Raises:
            StorageUploadError: If upload fails
        """
        client = SupabaseClient.get_client()
        bucket = client.storage.from_(settings.STORAGE_BUCKET)

        path = f"{uuid.uuid4()}.{_extension(filename)}"

        try:
            bucket.upload(
                path=path,
                file=file_content,
                file_options={
                    "content-type": content_type or "application/octet-stream",
                    "upsert": "true",
                }
            )
            logger.info(f"Uploaded file to storage: {path}")
        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(str(e))

        return bucket.get_public_url(path)
