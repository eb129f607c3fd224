"""
Dashboard endpoint.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_caller
from app.auth.identity import CallerIdentity
from app.database import get_db
from app.schemas.dashboard import DashboardResponse
from app.services.dashboard_service import DashboardService

router = APIRouter()


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    db: AsyncSession = Depends(get_db),
    caller: CallerIdentity = Depends(get_caller)
):
    """
    Counts and recent activity for the caller's organization.
    Requires valid Firebase JWT token.
    """
    data = await DashboardService.get_dashboard(db, caller)
    return DashboardResponse.model_validate(data)
