"""
Dashboard service: counts and recent activity for the caller's scope.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.identity import CallerIdentity, require_caller
from app.errors import internal_errors
from app.models.document import Document
from app.models.organization import Organization
from app.models.photo import Photo
from app.models.user import UserRole
from app.services.visibility import Capabilities, scope_clause

RECENT_ACTIVITY_LIMIT = 5


class DashboardService:
    """Service for dashboard stats."""

    @staticmethod
    async def _count(db: AsyncSession, model, *where) -> int:
        result = await db.execute(select(func.count()).select_from(model).where(*where))
        return int(result.scalar_one() or 0)

    @staticmethod
    async def get_recent_activity(
        db: AsyncSession,
        capabilities: Capabilities,
        limit: int = RECENT_ACTIVITY_LIMIT
    ) -> List[Dict[str, Any]]:
        """
        Newest photos and documents merged into one activity feed.

        Returns:
            Up to `limit` entries {type, action, item, created_at}, newest first
        """
        photos = await db.execute(
            select(Photo.file_name, Photo.created_at)
            .where(scope_clause(Photo, capabilities))
            .order_by(Photo.created_at.desc())
            .limit(limit)
        )
        documents = await db.execute(
            select(Document.name, Document.created_at)
            .where(scope_clause(Document, capabilities))
            .order_by(Document.created_at.desc())
            .limit(limit)
        )

        activity = [
            {"type": "photo", "action": "Photo uploaded", "item": name, "created_at": created_at}
            for name, created_at in photos.all()
        ] + [
            {"type": "document", "action": "Document added", "item": name, "created_at": created_at}
            for name, created_at in documents.all()
        ]

        activity.sort(key=lambda entry: entry["created_at"], reverse=True)
        return activity[:limit]

    @staticmethod
    @internal_errors("fetch dashboard data")
    async def get_dashboard(
        db: AsyncSession,
        caller: Optional[CallerIdentity],
        now: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """
        Dashboard stats for the caller's organization (or own uploads).

        Counts cover the whole scope; the visibility flag is not applied.
        """
        caller = require_caller(caller)
        capabilities = Capabilities.from_caller(caller)
        now = now or datetime.now(timezone.utc)
        one_week_ago = now - timedelta(days=7)

        photo_scope = scope_clause(Photo, capabilities)
        document_scope = scope_clause(Document, capabilities)

        photo_count = await DashboardService._count(db, Photo, photo_scope)
        photos_this_week = await DashboardService._count(
            db, Photo, photo_scope, Photo.created_at >= one_week_ago
        )
        document_count = await DashboardService._count(db, Document, document_scope)

        types_result = await db.execute(
            select(Document.type)
            .where(document_scope, Document.type.is_not(None))
            .distinct()
            .order_by(Document.type)
        )
        document_types = [row[0] for row in types_result.all()]

        organization_name = None
        if caller.organization_id:
            org_result = await db.execute(
                select(Organization.name).where(Organization.id == caller.organization_id)
            )
            organization_name = org_result.scalar_one_or_none()

        return {
            "stats": {
                "photo_count": photo_count,
                "photos_this_week": photos_this_week,
                "document_count": document_count,
                "document_types": document_types,
            },
            "recent_activity": await DashboardService.get_recent_activity(db, capabilities),
            "organization_name": organization_name,
            "is_admin": caller.role == UserRole.ADMIN.value,
        }
