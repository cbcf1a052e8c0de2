"""Admin bootstrap: creates the first admin account exactly once."""

from typing import Optional

import structlog

from app.application.services.auth_service import hash_password, issue_token
from app.core.exceptions import BadRequestException, ConflictException
from app.domain.models.user import User
from app.domain.repositories.user_repository import UserRepository
from app.domain.roles import Role
from app.infrastructure.database import transaction

logger = structlog.get_logger(__name__)


def create_admin(
    repo: UserRepository,
    email: str,
    password: str,
    first_name: str = "Admin",
    last_name: str = "User",
    phone: Optional[str] = None,
) -> User:
    """Persist a new admin. Caller owns the transaction."""
    if repo.get_by_email(email):
        raise ConflictException("User with this email already exists")
    return repo.create({
        "role": Role.ADMIN.value,
        "email": email.lower(),
        "password_hash": hash_password(password),
        "first_name": first_name,
        "last_name": last_name,
        "phone": phone,
        "is_active": True,
    })


def register_first_admin(repo: UserRepository, data: dict) -> tuple[User, str]:
    if repo.admin_exists():
        raise BadRequestException("Admin user already exists")

    with transaction(repo.db):
        user = create_admin(repo, **data)

    logger.info("First admin registered", user_id=user.id, email=user.email)
    return user, issue_token(user)
