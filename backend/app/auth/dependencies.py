"""
FastAPI dependencies for authentication.
Provides get_current_user (Firebase JWT -> User row) and get_caller
(User -> CallerIdentity consumed by services).
"""
import logging
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.database import get_db
from app.errors import Internal, Unauthenticated
from app.models.user import User, UserRole, AccountType
from app.auth.firebase import verify_firebase_token
from app.auth.identity import CallerIdentity

logger = logging.getLogger(__name__)

# auto_error=False so a missing header maps to our Unauthenticated (401)
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    FastAPI dependency that verifies Firebase JWT token and returns User.

    Flow:
    1. Extract Bearer token from Authorization header
    2. Verify token with Firebase Admin SDK
    3. Lookup user in database by firebase_uid
    4. Create user if doesn't exist (client role, team member, no organization)
    5. Return User object

    Raises:
        Unauthenticated: If token is missing, invalid, or expired
    """
    if credentials is None or not credentials.credentials:
        raise Unauthenticated("Missing authentication token")

    try:
        decoded_token = verify_firebase_token(credentials.credentials)
    except ValueError as e:
        raise Unauthenticated(f"Invalid token: {str(e)}")
    except RuntimeError as e:
        logger.error(f"Token verification unavailable: {e}")
        raise Internal("Authentication is not configured")

    firebase_uid = decoded_token.get("uid")
    if not firebase_uid:
        raise Unauthenticated("Invalid token: missing uid")

    result = await db.execute(
        select(User).where(User.firebase_uid == firebase_uid)
    )
    user = result.scalar_one_or_none()

    if not user:
        user = User(
            firebase_uid=firebase_uid,
            email=decoded_token.get("email"),
            name=decoded_token.get("name"),
            role=UserRole.CLIENT.value,
            account_type=AccountType.TEAM_MEMBER.value,
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        logger.info(
            f"Provisioned user {user.id}",
            extra={"event": "user_provisioned", "user_id": user.id}
        )

    return user


async def get_caller(current_user: User = Depends(get_current_user)) -> CallerIdentity:
    """Caller identity (role, account type, organization) for the service layer."""
    return CallerIdentity.from_user(current_user)
