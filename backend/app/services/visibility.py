"""
Visibility filter for organization assets (photos, documents).

Capability-based access control: the caller is reduced to a capability
record once, and every listing and deletion check composes the same
clauses from it.

Policy, in precedence order:
1. role admin/staff    -> whole scope, no visibility restriction
2. account team_lead   -> whole scope, no visibility restriction
3. everyone else       -> whole scope, rows visible to all only

Scope is the caller's organization, or the caller's own uploads when they
have no organization.
"""
from dataclasses import dataclass
from typing import Iterable, Optional

from sqlalchemy import and_, or_
from sqlalchemy.sql.elements import ColumnElement

from app.auth.identity import CallerIdentity
from app.errors import InvalidArgument
from app.models.photo import Visibility
from app.models.user import AccountType, UserRole

PRIVILEGED_ROLES = frozenset({UserRole.ADMIN.value, UserRole.STAFF.value})


@dataclass(frozen=True)
class Capabilities:
    """What a caller may do with assets in their scope."""
    organization_id: Optional[str]
    user_id: str
    sees_restricted: bool

    @classmethod
    def from_caller(cls, caller: CallerIdentity) -> "Capabilities":
        sees_restricted = (
            caller.role in PRIVILEGED_ROLES
            or caller.account_type == AccountType.TEAM_LEAD.value
        )
        return cls(
            organization_id=caller.organization_id,
            user_id=caller.id,
            sees_restricted=sees_restricted,
        )

    @property
    def can_delete_restricted(self) -> bool:
        """owner_only rows may be deleted by the same callers who can see them."""
        return self.sees_restricted


def scope_clause(model, capabilities: Capabilities) -> ColumnElement:
    """Rows belonging to the caller's organization, or their own uploads."""
    if capabilities.organization_id:
        return model.organization_id == capabilities.organization_id
    return model.uploaded_by == capabilities.user_id


def member_visibility_clause(model, legacy_restricted_types: Iterable[str] = ()) -> ColumnElement:
    """
    Rows an ordinary member may see.

    Rows flagged "all" are visible. Legacy rows (NULL flag) are visible
    unless their type is listed in legacy_restricted_types.
    """
    legacy = model.visibility.is_(None)
    restricted_types = [str(t) for t in legacy_restricted_types]
    if restricted_types:
        legacy = and_(
            legacy,
            or_(model.type.is_(None), model.type.notin_(restricted_types)),
        )
    return or_(model.visibility == Visibility.ALL.value, legacy)


def visibility_filter(
    model,
    caller: CallerIdentity,
    legacy_restricted_types: Iterable[str] = (),
) -> ColumnElement:
    """
    Composed WHERE clause selecting exactly the rows the caller may see.

    Args:
        model: Mapped class with organization_id, uploaded_by, visibility
        caller: Authenticated caller
        legacy_restricted_types: Values of model.type whose legacy rows
            (NULL visibility) are hidden from ordinary members
    """
    capabilities = Capabilities.from_caller(caller)
    clauses = [scope_clause(model, capabilities)]
    if not capabilities.sees_restricted:
        clauses.append(member_visibility_clause(model, legacy_restricted_types))
    return and_(*clauses)


def can_delete(caller: CallerIdentity, visibility: Optional[str]) -> bool:
    """Whether the caller may delete an in-scope row with this visibility flag."""
    if visibility == Visibility.OWNER_ONLY.value:
        return Capabilities.from_caller(caller).can_delete_restricted
    return True


def parse_visibility(value: Optional[str], default: Visibility = Visibility.ALL) -> str:
    """
    Validate a client-supplied visibility flag.

    Raises:
        InvalidArgument: value is neither "all" nor "owner_only"
    """
    if not value:
        return default.value
    try:
        return Visibility(value).value
    except ValueError:
        raise InvalidArgument(f"Invalid visibility '{value}'. Must be 'all' or 'owner_only'")
