"""
Presigned upload slot issuance.

Handles storage key construction and the "request an upload slot" step
shared by photos and documents.

Flow:
1. Client requests a slot with fileName, fileType, category
2. Backend builds a deterministic object key and a presigned PUT URL
3. Client uploads directly to R2 using the URL
4. Client confirms the upload; the owning service persists metadata
"""
import logging
import re
import time
from dataclasses import dataclass
from typing import Optional

from app.auth.identity import CallerIdentity
from app.errors import Internal, InvalidArgument, Unauthenticated
from app.storage.r2_client import R2Client

logger = logging.getLogger(__name__)

# Anything other than letters, digits, dot and dash becomes "_"
UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9.-]")


@dataclass(frozen=True)
class UploadSlot:
    """Everything the browser needs to upload and later confirm a file."""
    upload_url: str
    public_url: str
    file_key: str


def sanitize_filename(file_name: str) -> str:
    """Replace characters that are unsafe in object keys."""
    return UNSAFE_FILENAME_CHARS.sub("_", file_name)


def generate_object_key(
    user_id: str,
    organization_id: Optional[str],
    file_name: str,
    category: str,
    timestamp_ms: Optional[int] = None,
) -> str:
    """
    Generate the object key for an upload.

    Pattern: {org-<organization_id>|users}/{category}/{user_id}-{epoch_ms}-{file_name}

    Organization uploads are grouped under the organization prefix; users
    without an organization share the "users" prefix, disambiguated by
    their id in the object name.
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    prefix = f"org-{organization_id}" if organization_id else "users"
    return f"{prefix}/{category}/{user_id}-{timestamp_ms}-{sanitize_filename(file_name)}"


def issue_upload_slot(
    storage: R2Client,
    caller: Optional[CallerIdentity],
    file_name: Optional[str],
    file_type: Optional[str],
    category: Optional[str],
) -> UploadSlot:
    """
    Build a key and a presigned PUT URL for one upload.

    Raises:
        Unauthenticated: no caller
        InvalidArgument: file_name, file_type or category missing
        Internal: storage could not sign the URL
    """
    if caller is None:
        raise Unauthenticated()

    if not file_name or not file_type or not category:
        raise InvalidArgument("Missing fileName, fileType, or category")

    file_key = generate_object_key(caller.id, caller.organization_id, file_name, category)

    upload_url = storage.generate_presigned_upload_url(file_key, file_type)
    if not upload_url:
        logger.error(f"Failed to generate presigned URL for {file_key}")
        raise Internal("Failed to generate upload URL")

    return UploadSlot(
        upload_url=upload_url,
        public_url=storage.get_public_url(file_key),
        file_key=file_key,
    )
