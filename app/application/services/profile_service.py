"""Profile service: the signed-in user's own account."""

import structlog

from app.application.services.auth_service import hash_password, verify_password
from app.core.exceptions import BadRequestException
from app.domain.models.user import User
from app.domain.repositories.user_repository import UserRepository
from app.infrastructure.database import transaction

logger = structlog.get_logger(__name__)

PROFILE_FIELDS = ("first_name", "last_name", "phone")


def update_profile(repo: UserRepository, user: User, data: dict) -> User:
    changes = {key: value for key, value in data.items() if key in PROFILE_FIELDS}
    with transaction(repo.db):
        user = repo.update(user, changes)
    logger.info("Profile updated", user_id=user.id, fields=sorted(changes))
    return user


def change_password(repo: UserRepository, user: User, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, user.password_hash):
        raise BadRequestException("Current password is incorrect")
    with transaction(repo.db):
        repo.update(user, {"password_hash": hash_password(new_password)})
    logger.info("Password changed", user_id=user.id)
