"""Invitation service: issue, list, cancel and redeem registration invitations."""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog

from app.application.services.auth_service import hash_password, issue_token
from app.application.services.notification_service import send_invitation_email
from app.config import get_settings
from app.core.exceptions import (
    BadRequestException,
    ConflictException,
    EntityNotFoundException,
    ForbiddenException,
)
from app.domain.models.invitation import Invitation
from app.domain.models.user import User
from app.domain.repositories.invitation_repository import InvitationRepository
from app.domain.repositories.user_repository import UserRepository
from app.domain.roles import Requester, Role, parse_role
from app.domain.schemas.base import paginate
from app.infrastructure.database import transaction
from app.infrastructure.mailer import SMTPMailer

settings = get_settings()
logger = structlog.get_logger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """SQLite hands back naive datetimes; stored values are always UTC."""
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def check_invitation_authority(requester: Requester, role: Role) -> None:
    if role is Role.MANAGER and not requester.is_admin:
        raise ForbiddenException("Only admin can invite managers")
    if role is Role.AGENT and not requester.is_supervisor:
        raise ForbiddenException("Only admin or manager can invite agents")
    if role is Role.ADMIN:
        raise ForbiddenException("Admins cannot be invited")


def create_invitation(
    invitations: InvitationRepository,
    users: UserRepository,
    requester: Requester,
    email: str,
    role: str,
    mailer: Optional[SMTPMailer] = None,
) -> Invitation:
    invited_role = parse_role(role)
    check_invitation_authority(requester, invited_role)

    email = email.lower()
    now = utcnow()
    if users.get_by_email(email):
        raise ConflictException("User with this email already exists")
    if invitations.get_active_for_email(email, now):
        raise ConflictException("Active invitation for this email already exists")

    with transaction(invitations.db):
        invitation = invitations.create({
            "email": email,
            "role": invited_role.value,
            "invited_by": requester.id,
            "token": str(uuid.uuid4()),
            "expires_at": now + timedelta(days=settings.INVITATION_EXPIRATION_DAYS),
            "used": False,
        })

    logger.info(
        "Invitation created",
        invitation_id=invitation.id,
        email=email,
        role=invited_role.value,
        invited_by=requester.id,
    )

    # Committed above; a delivery failure leaves the invitation in place
    send_invitation_email(invitation, users.get_by_id(requester.id), mailer=mailer)
    return invitation


def list_invitations(
    invitations: InvitationRepository,
    requester: Requester,
    page: int = 1,
    page_size: int = 20,
    invited_by: Optional[str] = None,
) -> dict:
    """Admins see every invitation (optionally by inviter), others their own."""
    if not requester.is_admin:
        invited_by = requester.id
    items, total = invitations.search(invited_by=invited_by, page=page, page_size=page_size)
    return paginate(items, total, page, page_size)


def cancel_invitation(invitations: InvitationRepository, invitation_id: str, requester: Requester) -> None:
    with transaction(invitations.db):
        invitation = invitations.get_by_id(invitation_id, for_update=True)
        if not invitation:
            raise EntityNotFoundException("Invitation not found")
        if invitation.invited_by != requester.id and not requester.is_admin:
            raise ForbiddenException("You are not authorized to cancel this invitation")
        if invitation.used:
            raise BadRequestException("Cannot cancel used invitation")
        invitations.delete(invitation)

    logger.info("Invitation cancelled", invitation_id=invitation_id, cancelled_by=requester.id)


def redeem_invitation(
    invitations: InvitationRepository,
    users: UserRepository,
    token: str,
    data: dict,
) -> tuple[User, str]:
    """Register the invited user and consume the invitation."""
    with transaction(invitations.db):
        invitation = invitations.get_by_token(token, for_update=True)
        if not invitation or invitation.used:
            raise BadRequestException("Invalid or expired invitation token")
        if utcnow() > as_utc(invitation.expires_at):
            raise BadRequestException("Invitation has expired")
        if users.get_by_email(invitation.email):
            raise ConflictException("User with this email already exists")

        inviter = users.get_by_id(invitation.invited_by)
        manager_id = None
        if inviter and inviter.role == Role.MANAGER.value and invitation.role == Role.AGENT.value:
            manager_id = inviter.id

        user = users.create({
            "role": invitation.role,
            "email": invitation.email,
            "password_hash": hash_password(data["password"]),
            "first_name": data["first_name"],
            "last_name": data["last_name"],
            "phone": data.get("phone"),
            "is_active": True,
            "manager_id": manager_id,
        })
        invitations.update(invitation, {"used": True})

    logger.info(
        "Invitation redeemed",
        invitation_id=invitation.id,
        user_id=user.id,
        role=user.role,
        manager_id=manager_id,
    )
    return user, issue_token(user)
