"""
Caller identity handed from the authentication layer to services.
"""
from dataclasses import dataclass
from typing import Optional

from app.errors import Unauthenticated
from app.models.user import User


@dataclass(frozen=True)
class CallerIdentity:
    """Who is making the request. Only used as filter input."""
    id: str
    role: str = "client"
    organization_id: Optional[str] = None
    account_type: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "CallerIdentity":
        return cls(
            id=user.id,
            role=user.role,
            organization_id=user.organization_id or None,
            account_type=user.account_type,
        )


def require_caller(caller: Optional[CallerIdentity]) -> CallerIdentity:
    """Raise Unauthenticated when no caller identity is present."""
    if caller is None:
        raise Unauthenticated()
    return caller
