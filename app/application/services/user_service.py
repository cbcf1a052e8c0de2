"""User administration: listing users and blocking/unblocking accounts."""

from typing import Optional

import structlog

from app.core.exceptions import EntityNotFoundException, ForbiddenException
from app.domain.models.user import User
from app.domain.repositories.user_repository import UserRepository
from app.domain.roles import Role, parse_role
from app.domain.schemas.base import paginate
from app.infrastructure.database import transaction

logger = structlog.get_logger(__name__)


def list_users(
    repo: UserRepository,
    role: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    page_size: int = 20,
) -> dict:
    if role:
        role = parse_role(role).value
    items, total = repo.search(role=role, search=search, page=page, page_size=page_size)
    return paginate(items, total, page, page_size)


def toggle_user_status(repo: UserRepository, user_id: str, is_active: Optional[bool] = None) -> User:
    """Block or unblock a user; without an explicit value the flag flips."""
    with transaction(repo.db):
        user = repo.get_by_id(user_id, for_update=True)
        if not user:
            raise EntityNotFoundException("User not found")
        if user.role == Role.ADMIN.value:
            raise ForbiddenException("Admin users cannot be blocked")
        is_active = (not user.is_active) if is_active is None else is_active
        user = repo.update(user, {"is_active": is_active})

    logger.info("User status changed", user_id=user_id, is_active=is_active)
    return user
