"""
Photo service: upload orchestration and access-controlled listing/deletion.

Upload flow:
1. request_upload_slot  -> key + presigned PUT URL (no row yet)
2. browser PUTs the bytes to R2
3. confirm_upload       -> optional HEAD check, then one row inserted

Listing and deletion go through the visibility filter.
"""
import logging
from typing import List, Optional

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.identity import CallerIdentity, require_caller
from app.errors import Forbidden, InvalidArgument, NotFound, internal_errors
from app.models.photo import Photo, PhotoCategory
from app.services.asset_storage import delete_stored_object, verify_uploaded_object
from app.services.visibility import (
    Capabilities,
    can_delete,
    parse_visibility,
    scope_clause,
    visibility_filter,
)
from app.storage.presign import UploadSlot, issue_upload_slot
from app.storage.r2_client import R2Client
from app.utils.logging import (
    log_asset_deleted,
    log_upload_confirmed,
    log_upload_slot_issued,
)
from app.utils.metrics import (
    assets_deleted_total,
    upload_slots_issued_total,
    uploads_confirmed_total,
)

logger = logging.getLogger(__name__)


class PhotoService:
    """Service for photo upload, listing and deletion."""

    ASSET = "photo"

    @staticmethod
    @internal_errors("generate upload URL")
    async def request_upload_slot(
        storage: R2Client,
        caller: Optional[CallerIdentity],
        file_name: Optional[str],
        file_type: Optional[str],
        category: Optional[str],
    ) -> UploadSlot:
        """
        Issue a presigned upload slot for a photo.

        Raises:
            Unauthenticated: no caller
            InvalidArgument: file_name, file_type or category missing
            Internal: storage could not sign the URL
        """
        slot = issue_upload_slot(storage, caller, file_name, file_type, category)

        upload_slots_issued_total.labels(asset=PhotoService.ASSET).inc()
        log_upload_slot_issued(
            logger,
            asset=PhotoService.ASSET,
            file_key=slot.file_key,
            user_id=caller.id,
            organization_id=caller.organization_id,
        )
        return slot

    @staticmethod
    @internal_errors("save photo metadata")
    async def confirm_upload(
        db: AsyncSession,
        storage: Optional[R2Client],
        caller: Optional[CallerIdentity],
        file_key: Optional[str],
        file_name: Optional[str],
        file_url: Optional[str],
        file_size: Optional[int] = None,
        mime_type: Optional[str] = None,
        category: Optional[str] = None,
        notes: Optional[str] = None,
        tags: Optional[List[str]] = None,
        alt_text: Optional[str] = None,
        visibility: Optional[str] = None,
        verify: bool = True,
    ) -> Photo:
        """
        Persist metadata for a photo the browser has uploaded.

        With verify=True the object is looked up in storage first: it must
        exist under the caller's key prefix, the size and content type
        reported by storage take precedence over the client's values, and
        the stored URL is derived from the key.

        Raises:
            Unauthenticated: no caller
            InvalidArgument: file_key, file_name or file_url missing, bad
                visibility, or (verify) object missing from storage, or
                file_key already confirmed
        """
        caller = require_caller(caller)

        if not file_key or not file_name or not file_url:
            raise InvalidArgument("Missing required fields")

        visibility_value = parse_visibility(visibility)

        if verify:
            metadata = await verify_uploaded_object(storage, caller, file_key, PhotoService.ASSET)
            if metadata.size is not None:
                file_size = metadata.size
            if metadata.content_type:
                mime_type = metadata.content_type
            # Served from the verified key, never from a client-supplied URL
            file_url = storage.get_public_url(file_key)

        photo = Photo(
            organization_id=caller.organization_id,
            uploaded_by=caller.id,
            file_key=file_key,
            file_url=file_url,
            file_name=file_name,
            file_size=file_size,
            mime_type=mime_type,
            category=category or PhotoCategory.UNCATEGORIZED.value,
            notes=notes or None,
            tags=list(tags or []),
            alt_text=alt_text or None,
            visibility=visibility_value,
        )

        db.add(photo)
        try:
            await db.commit()
        except IntegrityError:
            # file_key is unique: a retried confirmation lands here
            await db.rollback()
            raise InvalidArgument("fileKey already confirmed")
        await db.refresh(photo)

        uploads_confirmed_total.labels(asset=PhotoService.ASSET).inc()
        log_upload_confirmed(
            logger,
            asset=PhotoService.ASSET,
            asset_id=photo.id,
            user_id=caller.id,
            file_key=file_key,
            verified=verify,
        )
        return photo

    @staticmethod
    @internal_errors("fetch photos")
    async def list_photos(db: AsyncSession, caller: Optional[CallerIdentity]) -> list[Photo]:
        """Photos visible to the caller, newest first."""
        caller = require_caller(caller)

        result = await db.execute(
            select(Photo)
            .where(visibility_filter(Photo, caller))
            .order_by(Photo.created_at.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    @internal_errors("delete photo")
    async def delete_photo(
        db: AsyncSession,
        storage: Optional[R2Client],
        caller: Optional[CallerIdentity],
        photo_id: Optional[str],
    ) -> None:
        """
        Delete a photo from storage (best effort) and the database.

        Raises:
            Unauthenticated: no caller
            InvalidArgument: photo_id missing
            NotFound: photo absent or outside the caller's scope
            Forbidden: owner_only photo and caller is not admin/staff/team lead
        """
        caller = require_caller(caller)

        if not photo_id:
            raise InvalidArgument("Photo ID required")

        result = await db.execute(
            select(Photo).where(
                Photo.id == photo_id,
                scope_clause(Photo, Capabilities.from_caller(caller))
            )
        )
        photo = result.scalar_one_or_none()

        if not photo:
            raise NotFound("Photo not found")

        if not can_delete(caller, photo.visibility):
            raise Forbidden("You don't have permission to delete this photo")

        storage_deleted = await delete_stored_object(storage, photo.file_key, PhotoService.ASSET)

        await db.execute(delete(Photo).where(Photo.id == photo.id))
        await db.commit()

        assets_deleted_total.labels(asset=PhotoService.ASSET).inc()
        log_asset_deleted(
            logger,
            asset=PhotoService.ASSET,
            asset_id=photo_id,
            user_id=caller.id,
            storage_deleted=storage_deleted,
        )

