from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from .database import get_db
from .utils.security import decode_access_token
from app.models.user import User, UserRole
from app.schemas.auth import Principal
from app.services.authorization_service import AuthorizationService
from .config import settings
from .core.roles import has_role
from .core.exception import AuthenticationException, AuthorizationException

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=settings.TOKEN_URL, auto_error=False)


def _token_from_request(request: Request, token: Optional[str]) -> Optional[str]:
    return token or request.cookies.get(settings.ACCESS_TOKEN_COOKIE)


async def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Dependency to get current authenticated user.

    Only the token subject is taken from the client. The user, and with it
    the role, is always reloaded from the database.

    Example:
        @router.get("/protected")
        async def protected_route(current_user: User = Depends(get_current_user)):
            return {"user_id": current_user.id}
    """
    token = _token_from_request(request, token)
    if not token:
        raise AuthenticationException("Not authenticated")

    payload = decode_access_token(token)
    if payload is None:
        raise AuthenticationException("Could not validate credentials")

    user_id_str: str | None = payload.get("sub")
    if user_id_str is None:
        raise AuthenticationException("Could not validate credentials")

    try:
        user_id = int(user_id_str)
    except (ValueError, TypeError):
        raise AuthenticationException("Invalid token format")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise AuthenticationException("Could not validate credentials")

    if not user.is_active:
        raise AuthenticationException("Account is deactivated")

    return user


async def get_optional_principal(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
) -> Optional[Principal]:
    """Token-derived principal for advisory checks; None when absent or invalid."""
    token = _token_from_request(request, token)
    if not token:
        return None
    return Principal.from_token_payload(decode_access_token(token))


def enforce(allowed: bool, message: str) -> None:
    """Turn a negative decision into a 403."""
    if not allowed:
        raise AuthorizationException(message=message)


def require_role(required: UserRole):
    """
    Dependency factory enforcing a platform-wide role floor.

    Example:
        @router.get("", dependencies=[Depends(require_role(UserRole.PLATFORM_ADMIN))])
    """
    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        enforce(
            has_role(current_user, required),
            f"This action requires the {required.value} role",
        )
        return current_user

    return role_checker


async def require_association_admin(
    association_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> User:
    """Path-scoped guard: caller administers ``association_id``."""
    authorization = AuthorizationService(db)
    enforce(
        authorization.is_admin_of_association(current_user.id, association_id),
        "Only association admins can perform this action",
    )
    return current_user


async def require_association_member(
    association_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> User:
    """Path-scoped guard: caller is a member of ``association_id``."""
    authorization = AuthorizationService(db)
    enforce(
        authorization.is_member(current_user.id, association_id),
        "You don't have access to this association",
    )
    return current_user


async def require_event_manager(
    event_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> User:
    """Path-scoped guard: caller administers the event's association."""
    authorization = AuthorizationService(db)
    enforce(
        authorization.can_manage_event(current_user.id, event_id),
        "Only association admins can manage this event",
    )
    return current_user


async def require_event_attendee(
    event_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> User:
    """Path-scoped guard: caller is a member of the event's association."""
    authorization = AuthorizationService(db)
    enforce(
        authorization.can_attend_event(current_user.id, event_id),
        "You don't have access to this event",
    )
    return current_user
