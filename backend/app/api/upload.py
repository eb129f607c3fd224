"""
Photo upload endpoints.

Direct-to-storage upload flow:
1. GET  /upload?fileName&fileType&category - presigned PUT URL + key
2. browser PUTs the file to R2
3. POST /upload - confirm, photo metadata saved

The backend never handles file bytes. With VERIFY_UPLOADS on, the
confirmation is checked against storage before the row is written.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_caller
from app.auth.identity import CallerIdentity
from app.config import settings
from app.database import get_db
from app.schemas.photo import PhotoConfirmRequest, PhotoEnvelope, PhotoResponse
from app.schemas.upload import UploadSlotResponse
from app.services.photo_service import PhotoService
from app.storage.r2_client import R2Client, get_r2_client

router = APIRouter()


@router.get("", response_model=UploadSlotResponse)
async def request_upload_url(
    file_name: Optional[str] = Query(None, alias="fileName"),
    file_type: Optional[str] = Query(None, alias="fileType"),
    category: Optional[str] = Query(None),
    caller: CallerIdentity = Depends(get_caller),
    storage: R2Client = Depends(get_r2_client)
):
    """
    Generate a presigned URL for a direct photo upload.

    Requires valid Firebase JWT token.
    """
    slot = await PhotoService.request_upload_slot(storage, caller, file_name, file_type, category)
    return UploadSlotResponse.model_validate(slot)


@router.post("", response_model=PhotoEnvelope)
async def confirm_upload(
    request: PhotoConfirmRequest,
    db: AsyncSession = Depends(get_db),
    caller: CallerIdentity = Depends(get_caller),
    storage: R2Client = Depends(get_r2_client)
):
    """
    Save photo metadata after the browser uploaded the file.

    Requires valid Firebase JWT token.
    """
    photo = await PhotoService.confirm_upload(
        db,
        storage,
        caller,
        file_key=request.file_key,
        file_name=request.file_name,
        file_url=request.file_url,
        file_size=request.file_size,
        mime_type=request.mime_type,
        category=request.category,
        notes=request.notes,
        tags=request.tags,
        alt_text=request.alt_text,
        visibility=request.visibility,
        verify=settings.verify_uploads,
    )
    return PhotoEnvelope(photo=PhotoResponse.model_validate(photo))
