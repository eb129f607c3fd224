"""
Document endpoints.

GET doubles as the upload-slot endpoint: with fileName and fileType it
returns a presigned URL instead of the listing.
"""
from typing import Optional, Union

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_caller
from app.auth.identity import CallerIdentity
from app.config import settings
from app.database import get_db
from app.schemas.common import SuccessResponse
from app.schemas.document import (
    DocumentConfirmRequest,
    DocumentEnvelope,
    DocumentListResponse,
    DocumentResponse,
)
from app.schemas.upload import UploadSlotResponse
from app.services.document_service import DocumentService
from app.storage.r2_client import R2Client, get_r2_client

router = APIRouter()


@router.get("", response_model=Union[UploadSlotResponse, DocumentListResponse])
async def list_or_presign_documents(
    file_name: Optional[str] = Query(None, alias="fileName"),
    file_type: Optional[str] = Query(None, alias="fileType"),
    db: AsyncSession = Depends(get_db),
    caller: CallerIdentity = Depends(get_caller),
    storage: R2Client = Depends(get_r2_client)
):
    """List visible documents, or issue an upload slot when fileName and fileType are given."""
    if file_name and file_type:
        slot = await DocumentService.request_upload_slot(storage, caller, file_name, file_type)
        return UploadSlotResponse.model_validate(slot)

    documents = await DocumentService.list_documents(db, caller)
    return DocumentListResponse(documents=[DocumentResponse.model_validate(d) for d in documents])


@router.post("", response_model=DocumentEnvelope)
async def confirm_document_upload(
    request: DocumentConfirmRequest,
    db: AsyncSession = Depends(get_db),
    caller: CallerIdentity = Depends(get_caller),
    storage: R2Client = Depends(get_r2_client)
):
    """Save document metadata after the browser uploaded the file."""
    document = await DocumentService.confirm_upload(
        db,
        storage,
        caller,
        file_key=request.file_key,
        name=request.name,
        file_url=request.file_url,
        file_size=request.file_size,
        mime_type=request.mime_type,
        document_type=request.type,
        description=request.description,
        visibility=request.visibility,
        verify=settings.verify_uploads,
    )
    return DocumentEnvelope(document=DocumentResponse.model_validate(document))


@router.delete("", response_model=SuccessResponse)
async def delete_document(
    document_id: Optional[str] = Query(None, alias="id"),
    db: AsyncSession = Depends(get_db),
    caller: CallerIdentity = Depends(get_caller),
    storage: R2Client = Depends(get_r2_client)
):
    """Delete a document from storage and the database."""
    await DocumentService.delete_document(db, storage, caller, document_id)
    return SuccessResponse(success=True)
