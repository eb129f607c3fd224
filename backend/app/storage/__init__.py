"""
Storage module for S3-compatible object storage (Cloudflare R2).

This module handles direct uploads from the browser using presigned URLs.
The backend NEVER receives file bytes - files go directly to R2.
"""
from app.storage.r2_client import get_r2_client, R2Client, ObjectMetadata
from app.storage.presign import UploadSlot, generate_object_key, issue_upload_slot, sanitize_filename

__all__ = [
    "get_r2_client",
    "R2Client",
    "ObjectMetadata",
    "UploadSlot",
    "generate_object_key",
    "issue_upload_slot",
    "sanitize_filename",
]
