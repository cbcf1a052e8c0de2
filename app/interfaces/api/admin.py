"""Admin API routes: one-time first admin registration."""

from fastapi import APIRouter, Depends, status

from app.application.services.admin_service import register_first_admin
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.auth import AuthResponse, FirstAdminRequest, UserRead
from app.interfaces.deps import get_user_repository

router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.post("/register-first-admin", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def first_admin(body: FirstAdminRequest, users: UserRepository = Depends(get_user_repository)):
    user, token = register_first_admin(users, body.model_dump())
    return AuthResponse(user=UserRead.model_validate(user), token=token)
