"""
User profile endpoint.
Returns information about the authenticated user.
"""
from fastapi import APIRouter, Depends

from app.models.user import User
from app.auth.dependencies import get_current_user
from app.schemas.common import MeResponse

router = APIRouter()


@router.get("", response_model=MeResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """
    Get the authenticated user's role, account type and organization.
    Requires valid Firebase JWT token.
    """
    return MeResponse.model_validate(current_user)
