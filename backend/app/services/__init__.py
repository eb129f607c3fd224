"""
Business logic services.
"""
from app.services.photo_service import PhotoService
from app.services.document_service import DocumentService
from app.services.dashboard_service import DashboardService

__all__ = [
    "PhotoService",
    "DocumentService",
    "DashboardService",
]
