"""FastAPI dependency: JWT auth and role gates."""

from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.application.services.auth_service import decode_access_token
from app.core.exceptions import ForbiddenException, UnauthorizedException
from app.domain.models.user import User
from app.domain.roles import Requester, Role
from app.infrastructure.database import get_db

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Extract and validate the current user from JWT token."""
    if credentials is None:
        raise UnauthorizedException("Authentication required")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise UnauthorizedException("Invalid or expired token")

    user_id = payload.get("id")
    if user_id is None:
        raise UnauthorizedException("Invalid token")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise UnauthorizedException("User not found")
    if not user.is_active:
        raise UnauthorizedException("Account is deactivated")

    return user


def get_requester(user: User = Depends(get_current_user)) -> Requester:
    return Requester.from_user(user)


def require_roles(*roles: Role) -> Callable[..., Requester]:
    """Dependency allowing only the given roles through."""

    def dependency(requester: Requester = Depends(get_requester)) -> Requester:
        if requester.role not in roles:
            raise ForbiddenException("You do not have permission to perform this action")
        return requester

    return dependency


require_admin = require_roles(Role.ADMIN)
require_supervisor = require_roles(Role.ADMIN, Role.MANAGER)
