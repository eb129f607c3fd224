"""
Pydantic schemas for presigned upload slots.
"""
from pydantic import Field

from app.schemas.common import CamelModel


class UploadSlotResponse(CamelModel):
    """Presigned PUT URL plus the key and public URL to confirm with."""
    upload_url: str = Field(..., description="Presigned PUT URL for direct upload")
    public_url: str = Field(..., description="URL the object will be served from")
    file_key: str = Field(..., description="Object key in storage bucket")

    model_config = CamelModel.model_config | {
        "json_schema_extra": {
            "example": {
                "uploadUrl": "https://account.r2.cloudflarestorage.com/portal-assets/...",
                "publicUrl": "https://assets.example.com/org-1/headshots/u1-1700000000000-photo.jpg",
                "fileKey": "org-1/headshots/u1-1700000000000-photo.jpg",
            }
        }
    }
