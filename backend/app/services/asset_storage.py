"""
Storage-side checks shared by photo and document services.

- verify_uploaded_object: confirm a client-reported upload really exists
  under the caller's key prefix before its metadata is persisted.
- delete_stored_object: best-effort removal of the object when its row is
  deleted.
"""
import asyncio
import logging
from typing import Optional

from app.auth.identity import CallerIdentity
from app.errors import InvalidArgument
from app.storage.r2_client import ObjectMetadata, R2Client
from app.utils.logging import log_storage_cleanup_failed
from app.utils.metrics import storage_cleanup_failures_total, uploads_rejected_total

logger = logging.getLogger(__name__)


def caller_key_prefix(caller: CallerIdentity) -> str:
    """Top-level key prefix the caller's uploads are issued under."""
    return f"org-{caller.organization_id}/" if caller.organization_id else "users/"


async def verify_uploaded_object(
    storage: Optional[R2Client],
    caller: CallerIdentity,
    file_key: str,
    asset: str,
) -> ObjectMetadata:
    """
    Check that file_key was issued to this caller and exists in storage.

    Returns:
        Storage metadata (size, content type) for the object

    Raises:
        InvalidArgument: key outside the caller's prefix, or object missing
        RuntimeError: storage not configured (surfaced as Internal)
    """
    object_name = file_key.rsplit("/", 1)[-1]
    if not file_key.startswith(caller_key_prefix(caller)) or not object_name.startswith(f"{caller.id}-"):
        uploads_rejected_total.labels(asset=asset).inc()
        raise InvalidArgument("fileKey was not issued to this user")

    if storage is None or not storage.is_configured:
        raise RuntimeError("Storage not configured; cannot verify upload")

    metadata = await asyncio.to_thread(storage.head_object, file_key)
    if metadata is None:
        uploads_rejected_total.labels(asset=asset).inc()
        logger.warning(
            f"Upload confirmation for missing object {file_key}",
            extra={"event": "upload_rejected", "file_key": file_key, "user_id": caller.id}
        )
        raise InvalidArgument("Uploaded file not found in storage")

    return metadata


async def delete_stored_object(storage: Optional[R2Client], file_key: Optional[str], asset: str) -> bool:
    """
    Best-effort storage cleanup before a metadata row is removed.

    Failures are logged and counted, never raised: the row is deleted
    either way and the object may be left behind.
    """
    if not file_key:
        return False

    try:
        if storage is None:
            raise RuntimeError("storage not available")
        deleted = await asyncio.to_thread(storage.delete_object, file_key)
    except Exception as e:
        log_storage_cleanup_failed(logger, file_key, error=str(e), asset=asset)
        storage_cleanup_failures_total.labels(asset=asset).inc()
        return False

    if not deleted:
        log_storage_cleanup_failed(logger, file_key, asset=asset)
        storage_cleanup_failures_total.labels(asset=asset).inc()
    return deleted
