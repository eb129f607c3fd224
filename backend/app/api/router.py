"""
API router aggregator.
Includes all route modules.
"""
from fastapi import APIRouter
from app.api import health, me, upload, photos, documents, dashboard

api_router = APIRouter()

# Include route modules
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(me.router, prefix="/me", tags=["me"])
api_router.include_router(upload.router, prefix="/upload", tags=["upload"])
api_router.include_router(photos.router, prefix="/photos", tags=["photos"])
api_router.include_router(documents.router, prefix="/documents", tags=["documents"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
