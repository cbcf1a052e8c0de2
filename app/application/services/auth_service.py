"""Auth service: JWT token management, password hashing and login."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import get_settings
from app.core.exceptions import UnauthorizedException
from app.domain.models.user import User
from app.domain.repositories.user_repository import UserRepository

settings = get_settings()
logger = structlog.get_logger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
        return payload
    except JWTError:
        return None


def issue_token(user: User) -> str:
    """Session token carrying the user's id and role."""
    return create_access_token(data={"id": user.id, "role": user.role})


def login(repo: UserRepository, email: str, password: str) -> tuple[User, str]:
    user = repo.get_by_email(email)
    if not user or not verify_password(password, user.password_hash):
        logger.info("Login rejected", email=email)
        raise UnauthorizedException("Invalid email or password")
    if not user.is_active:
        logger.info("Login rejected for deactivated account", user_id=user.id)
        raise UnauthorizedException("Account is deactivated")

    logger.info("User logged in", user_id=user.id, role=user.role)
    return user, issue_token(user)
