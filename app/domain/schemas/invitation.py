"""Pydantic schemas for invitations."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import EmailStr

from app.domain.schemas.base import CamelModel


class InvitationCreate(CamelModel):
    email: EmailStr
    role: Literal["manager", "agent"]


class InvitationRead(CamelModel):
    id: str
    email: str
    role: str
    invited_by: str
    token: str
    expires_at: datetime
    used: bool
    created_at: Optional[datetime] = None
