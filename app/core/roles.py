"""
Platform-wide role comparisons.

Roles are ranked ``USER < ASSOCIATION_ADMIN < PLATFORM_ADMIN``. A rank check
answers "is this principal at least this capable" and nothing more: an
association admin passes the ASSOCIATION_ADMIN floor for every association,
but whether they administer a *particular* association is decided by
``AdminAuthorityService``. Only PLATFORM_ADMIN carries over into the
resource-scoped checks.

Every function here accepts anything with a ``role`` attribute (a ``User``
row or a token-derived ``Principal``) or ``None``. ``None`` always yields
``False``; callers decide whether that means "sign in" or "forbidden".
"""
from typing import Any, Optional

from app.models.user import UserRole

ROLE_RANK = {
    UserRole.USER: 0,
    UserRole.ASSOCIATION_ADMIN: 1,
    UserRole.PLATFORM_ADMIN: 2,
}


def _role_of(principal: Any) -> Optional[UserRole]:
    if principal is None:
        return None
    role = getattr(principal, "role", None)
    if role is None:
        return None
    try:
        return UserRole(role)
    except ValueError:
        return None


def has_role(principal: Any, required: UserRole) -> bool:
    """Return True if the principal's role is at least ``required``."""
    role = _role_of(principal)
    if role is None:
        return False
    if role == UserRole.PLATFORM_ADMIN:
        return True
    return ROLE_RANK[role] >= ROLE_RANK[UserRole(required)]


def is_platform_admin(principal: Any) -> bool:
    return _role_of(principal) == UserRole.PLATFORM_ADMIN


def is_association_admin(principal: Any) -> bool:
    """True for association admins and platform admins."""
    return has_role(principal, UserRole.ASSOCIATION_ADMIN)
