"""Profile API routes: the signed-in user's own account."""

from fastapi import APIRouter, Depends

from app.application.services.profile_service import change_password, update_profile
from app.domain.models.user import User
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.auth import ChangePasswordRequest, MessageResponse, ProfileUpdate, UserRead
from app.interfaces.api.deps import get_current_user
from app.interfaces.deps import get_user_repository

router = APIRouter(prefix="/api/profile", tags=["Profile"])


@router.get("", response_model=UserRead)
def get_profile(user: User = Depends(get_current_user)):
    return UserRead.model_validate(user)


@router.put("", response_model=UserRead)
def put_profile(
    body: ProfileUpdate,
    users: UserRepository = Depends(get_user_repository),
    user: User = Depends(get_current_user),
):
    updated = update_profile(users, user, body.model_dump(exclude_unset=True))
    return UserRead.model_validate(updated)


@router.put("/change-password", response_model=MessageResponse)
def put_password(
    body: ChangePasswordRequest,
    users: UserRepository = Depends(get_user_repository),
    user: User = Depends(get_current_user),
):
    change_password(users, user, body.current_password, body.new_password)
    return MessageResponse(message="Password changed successfully")
