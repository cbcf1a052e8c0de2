"""Notification service: invitation emails.

Delivery is best effort: a failure is logged and never undoes the
invitation that triggered it.
"""

from typing import Optional

import structlog

from app.config import get_settings
from app.domain.models.invitation import Invitation
from app.domain.models.user import User
from app.infrastructure.mailer import SMTPMailer

settings = get_settings()
logger = structlog.get_logger(__name__)


def inviter_display_name(inviter: Optional[User]) -> str:
    if inviter is None:
        return "Administrator"
    name = f"{inviter.first_name or ''} {inviter.last_name or ''}".strip()
    return name or inviter.email


def registration_link(token: str) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/register/{token}"


def format_invitation_email(invitation: Invitation, inviter: Optional[User]) -> tuple[str, str]:
    """Subject and HTML body of the invitation email."""
    link = registration_link(invitation.token)
    subject = f"Invitation to join {settings.APP_NAME} as {invitation.role.capitalize()}"
    html = f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
      <h2>Welcome to {settings.APP_NAME}</h2>
      <p>Hello,</p>
      <p>You have been invited by {inviter_display_name(inviter)} to join {settings.APP_NAME} as a {invitation.role}.</p>
      <p>Please click the button below to complete your registration:</p>
      <p style="text-align: center; margin: 30px 0;">
        <a href="{link}" style="background-color: #4CAF50; color: white; padding: 12px 20px; text-decoration: none; border-radius: 5px; font-weight: bold;">Complete Registration</a>
      </p>
      <p>Or copy and paste this link in your browser:</p>
      <p><a href="{link}">{link}</a></p>
      <p>This invitation link will expire in {settings.INVITATION_EXPIRATION_DAYS} days.</p>
      <p>Thank you,<br>{settings.APP_NAME} Team</p>
    </div>
    """
    return subject, html


def send_invitation_email(
    invitation: Invitation,
    inviter: Optional[User],
    mailer: Optional[SMTPMailer] = None,
) -> bool:
    """Send the invitation email. Returns whether it was delivered."""
    mailer = mailer or SMTPMailer()
    subject, html = format_invitation_email(invitation, inviter)
    try:
        return mailer.send(invitation.email, subject, html)
    except Exception as e:
        logger.error(
            "Failed to send invitation email",
            invitation_id=invitation.id,
            email=invitation.email,
            error=str(e),
        )
        return False
