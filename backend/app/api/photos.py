"""
Photo listing and deletion endpoints.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_caller
from app.auth.identity import CallerIdentity
from app.database import get_db
from app.schemas.common import SuccessResponse
from app.schemas.photo import PhotoListResponse, PhotoResponse
from app.services.photo_service import PhotoService
from app.storage.r2_client import R2Client, get_r2_client

router = APIRouter()


@router.get("", response_model=PhotoListResponse)
async def list_photos(
    db: AsyncSession = Depends(get_db),
    caller: CallerIdentity = Depends(get_caller)
):
    """
    List photos visible to the caller, newest first.

    Ordinary members only see photos shared with everyone; admins, staff
    and team leads see the whole organization.
    """
    photos = await PhotoService.list_photos(db, caller)
    return PhotoListResponse(photos=[PhotoResponse.model_validate(p) for p in photos])


@router.delete("", response_model=SuccessResponse)
async def delete_photo(
    photo_id: Optional[str] = Query(None, alias="id"),
    db: AsyncSession = Depends(get_db),
    caller: CallerIdentity = Depends(get_caller),
    storage: R2Client = Depends(get_r2_client)
):
    """Delete a photo from storage and the database."""
    await PhotoService.delete_photo(db, storage, caller, photo_id)
    return SuccessResponse(success=True)
