"""
Pydantic schemas for API request/response validation.
"""
from app.schemas.common import (
    CamelModel,
    ErrorResponse,
    MeResponse,
    SuccessResponse,
)
from app.schemas.upload import UploadSlotResponse
from app.schemas.photo import (
    PhotoConfirmRequest,
    PhotoEnvelope,
    PhotoListResponse,
    PhotoResponse,
)
from app.schemas.document import (
    DocumentConfirmRequest,
    DocumentEnvelope,
    DocumentListResponse,
    DocumentResponse,
)
from app.schemas.dashboard import (
    ActivityEntry,
    DashboardResponse,
    DashboardStats,
)

__all__ = [
    "CamelModel",
    "ErrorResponse",
    "MeResponse",
    "SuccessResponse",
    "UploadSlotResponse",
    "PhotoConfirmRequest",
    "PhotoEnvelope",
    "PhotoListResponse",
    "PhotoResponse",
    "DocumentConfirmRequest",
    "DocumentEnvelope",
    "DocumentListResponse",
    "DocumentResponse",
    "ActivityEntry",
    "DashboardResponse",
    "DashboardStats",
]
