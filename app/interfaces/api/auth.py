"""Auth API routes: login, register by invitation, me."""

from fastapi import APIRouter, Depends, status

from app.application.services.auth_service import login as login_user
from app.application.services.invitation_service import redeem_invitation
from app.domain.models.user import User
from app.domain.repositories.invitation_repository import InvitationRepository
from app.domain.repositories.user_repository import UserRepository
from app.domain.schemas.auth import AuthResponse, LoginRequest, RegisterRequest, UserRead
from app.interfaces.api.deps import get_current_user
from app.interfaces.deps import get_invitation_repository, get_user_repository

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, users: UserRepository = Depends(get_user_repository)):
    user, token = login_user(users, body.email, body.password)
    return AuthResponse(user=UserRead.model_validate(user), token=token)


@router.post("/register/{token}", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    token: str,
    body: RegisterRequest,
    invitations: InvitationRepository = Depends(get_invitation_repository),
    users: UserRepository = Depends(get_user_repository),
):
    user, session_token = redeem_invitation(invitations, users, token, body.model_dump())
    return AuthResponse(user=UserRead.model_validate(user), token=session_token)


@router.get("/me", response_model=UserRead)
def get_me(user: User = Depends(get_current_user)):
    return UserRead.model_validate(user)
