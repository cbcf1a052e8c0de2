"""
SQLAlchemy Implementation of Invitation Repository.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from app.domain.models.invitation import Invitation
from app.domain.repositories.invitation_repository import InvitationRepository
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyInvitationRepository(SQLAlchemyRepository[Invitation], InvitationRepository):

    def get_by_token(self, token: str, for_update: bool = False) -> Optional[Invitation]:
        query = self.db.query(Invitation).filter(Invitation.token == token)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def get_active_for_email(self, email: str, now: datetime) -> Optional[Invitation]:
        return (
            self.db.query(Invitation)
            .filter(
                Invitation.email == email.lower(),
                Invitation.used.is_(False),
                Invitation.expires_at > now,
            )
            .first()
        )

    def search(
        self,
        invited_by: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> Tuple[List[Invitation], int]:
        query = self.db.query(Invitation)
        if invited_by:
            query = query.filter(Invitation.invited_by == invited_by)
        return self.paginate(query, page, page_size, Invitation.created_at.desc())
