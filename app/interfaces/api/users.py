"""User administration routes: admin only."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.application.services.user_service import list_users, toggle_user_status
from app.domain.repositories.user_repository import UserRepository
from app.domain.roles import Requester
from app.domain.schemas.auth import StatusToggle, UserRead
from app.domain.schemas.base import Page
from app.interfaces.api.deps import require_admin
from app.interfaces.deps import get_user_repository

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("", response_model=Page[UserRead])
def users_list(
    role: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    users: UserRepository = Depends(get_user_repository),
    requester: Requester = Depends(require_admin),
):
    result = list_users(users, role=role, search=search, page=page, page_size=limit)
    result["items"] = [UserRead.model_validate(u) for u in result["items"]]
    return result


@router.patch("/{user_id}/toggle-status", response_model=UserRead)
def toggle_status(
    user_id: str,
    body: Optional[StatusToggle] = None,
    users: UserRepository = Depends(get_user_repository),
    requester: Requester = Depends(require_admin),
):
    return UserRead.model_validate(toggle_user_status(users, user_id, body.is_active if body else None))
