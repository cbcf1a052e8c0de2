"""Invitation API routes: invite, list, cancel."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from app.application.services.invitation_service import (
    cancel_invitation,
    create_invitation,
    list_invitations,
)
from app.domain.repositories.invitation_repository import InvitationRepository
from app.domain.repositories.user_repository import UserRepository
from app.domain.roles import Requester
from app.domain.schemas.base import Page
from app.domain.schemas.invitation import InvitationCreate, InvitationRead
from app.interfaces.api.deps import require_supervisor
from app.interfaces.deps import get_invitation_repository, get_user_repository

router = APIRouter(prefix="/api/invitations", tags=["Invitations"])


@router.post("", response_model=InvitationRead, status_code=status.HTTP_201_CREATED)
def invite(
    body: InvitationCreate,
    invitations: InvitationRepository = Depends(get_invitation_repository),
    users: UserRepository = Depends(get_user_repository),
    requester: Requester = Depends(require_supervisor),
):
    invitation = create_invitation(invitations, users, requester, body.email, body.role)
    return InvitationRead.model_validate(invitation)


@router.get("", response_model=Page[InvitationRead])
def invitations_list(
    invited_by: Optional[str] = Query(None, alias="invitedBy"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    invitations: InvitationRepository = Depends(get_invitation_repository),
    requester: Requester = Depends(require_supervisor),
):
    result = list_invitations(invitations, requester, page=page, page_size=limit, invited_by=invited_by)
    result["items"] = [InvitationRead.model_validate(i) for i in result["items"]]
    return result


@router.delete("/{invitation_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel(
    invitation_id: str,
    invitations: InvitationRepository = Depends(get_invitation_repository),
    requester: Requester = Depends(require_supervisor),
):
    cancel_invitation(invitations, invitation_id, requester)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
