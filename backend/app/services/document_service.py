"""
Document service.

Same upload/list/delete flow as photos. Differences:
- uploads always go under the "documents" category
- visibility defaults by document type (contracts, invoices and proposals
  are owner_only), and legacy rows without a flag follow that default
"""
import logging
from typing import Optional

from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.identity import CallerIdentity, require_caller
from app.errors import Forbidden, InvalidArgument, NotFound, internal_errors
from app.models.document import (
    DEFAULT_DOCUMENT_VISIBILITY,
    Document,
    DocumentType,
    default_visibility_for,
)
from app.models.photo import Visibility
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
from app.utils.logging import log_asset_deleted, log_upload_confirmed, log_upload_slot_issued
from app.utils.metrics import assets_deleted_total, upload_slots_issued_total, uploads_confirmed_total

logger = logging.getLogger(__name__)

DOCUMENTS_CATEGORY = "documents"

# Legacy rows of these types are hidden from ordinary members
OWNER_ONLY_DOCUMENT_TYPES = tuple(
    doc_type.value
    for doc_type, visibility in DEFAULT_DOCUMENT_VISIBILITY.items()
    if visibility == Visibility.OWNER_ONLY
)


def parse_document_type(value: Optional[str]) -> str:
    if not value:
        return DocumentType.OTHER.value
    try:
        return DocumentType(value).value
    except ValueError:
        allowed = ", ".join(t.value for t in DocumentType)
        raise InvalidArgument(f"Invalid document type '{value}'. Must be one of: {allowed}")


class DocumentService:
    """Service for document upload, listing and deletion."""

    ASSET = "document"

    @staticmethod
    @internal_errors("generate upload URL")
    async def request_upload_slot(
        storage: R2Client,
        caller: Optional[CallerIdentity],
        file_name: Optional[str],
        file_type: Optional[str],
    ) -> UploadSlot:
        """Issue a presigned upload slot under the documents category."""
        slot = issue_upload_slot(storage, caller, file_name, file_type, DOCUMENTS_CATEGORY)

        upload_slots_issued_total.labels(asset=DocumentService.ASSET).inc()
        log_upload_slot_issued(
            logger,
            asset=DocumentService.ASSET,
            file_key=slot.file_key,
            user_id=caller.id,
            organization_id=caller.organization_id,
        )
        return slot

    @staticmethod
    @internal_errors("save document metadata")
    async def confirm_upload(
        db: AsyncSession,
        storage: Optional[R2Client],
        caller: Optional[CallerIdentity],
        file_key: Optional[str],
        name: Optional[str],
        file_url: Optional[str],
        file_size: Optional[int] = None,
        mime_type: Optional[str] = None,
        document_type: Optional[str] = None,
        description: Optional[str] = None,
        visibility: Optional[str] = None,
        verify: bool = True,
    ) -> Document:
        """
        Persist metadata for an uploaded document.

        Visibility falls back to the default for the document type.

        Raises:
            Unauthenticated: no caller
            InvalidArgument: file_key, name or file_url missing, bad type or
                visibility, or (verify) object missing from storage
        """
        caller = require_caller(caller)

        if not file_key or not name or not file_url:
            raise InvalidArgument("Missing required fields")

        type_value = parse_document_type(document_type)
        visibility_value = parse_visibility(visibility, default=default_visibility_for(type_value))

        if verify:
            metadata = await verify_uploaded_object(storage, caller, file_key, DocumentService.ASSET)
            if metadata.size is not None:
                file_size = metadata.size
            if metadata.content_type:
                mime_type = metadata.content_type
            # Served from the verified key, never from a client-supplied URL
            file_url = storage.get_public_url(file_key)

        document = Document(
            organization_id=caller.organization_id,
            uploaded_by=caller.id,
            name=name,
            description=description or None,
            type=type_value,
            file_key=file_key,
            file_url=file_url,
            file_size=file_size,
            mime_type=mime_type,
            visibility=visibility_value,
        )

        db.add(document)
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            raise InvalidArgument("fileKey already confirmed")
        await db.refresh(document)

        uploads_confirmed_total.labels(asset=DocumentService.ASSET).inc()
        log_upload_confirmed(
            logger,
            asset=DocumentService.ASSET,
            asset_id=document.id,
            user_id=caller.id,
            file_key=file_key,
            verified=verify,
        )
        return document

    @staticmethod
    @internal_errors("fetch documents")
    async def list_documents(db: AsyncSession, caller: Optional[CallerIdentity]) -> list[Document]:
        """Documents visible to the caller, newest first."""
        caller = require_caller(caller)

        result = await db.execute(
            select(Document)
            .where(visibility_filter(Document, caller, legacy_restricted_types=OWNER_ONLY_DOCUMENT_TYPES))
            .order_by(Document.created_at.desc())
        )
        return list(result.scalars().all())

    @staticmethod
    @internal_errors("delete document")
    async def delete_document(
        db: AsyncSession,
        storage: Optional[R2Client],
        caller: Optional[CallerIdentity],
        document_id: Optional[str],
    ) -> None:
        """
        Delete a document from storage (best effort) and the database.

        Raises:
            Unauthenticated: no caller
            InvalidArgument: document_id missing
            NotFound: document absent or outside the caller's scope
            Forbidden: owner_only document and caller is not admin/staff/team lead
        """
        caller = require_caller(caller)

        if not document_id:
            raise InvalidArgument("Document ID required")

        result = await db.execute(
            select(Document).where(
                Document.id == document_id,
                scope_clause(Document, Capabilities.from_caller(caller))
            )
        )
        document = result.scalar_one_or_none()

        if not document:
            raise NotFound("Document not found")

        # Legacy rows are judged by the same type default used for listing
        effective_visibility = document.visibility or default_visibility_for(document.type or "").value
        if not can_delete(caller, effective_visibility):
            raise Forbidden("You don't have permission to delete this document")

        storage_deleted = await delete_stored_object(storage, document.file_key, DocumentService.ASSET)

        await db.execute(delete(Document).where(Document.id == document.id))
        await db.commit()

        assets_deleted_total.labels(asset=DocumentService.ASSET).inc()
        log_asset_deleted(
            logger,
            asset=DocumentService.ASSET,
            asset_id=document_id,
            user_id=caller.id,
            storage_deleted=storage_deleted,
        )
