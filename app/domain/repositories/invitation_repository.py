"""
Invitation Repository Interface.
"""

from datetime import datetime
from typing import List, Optional, Tuple

from app.domain.models.invitation import Invitation
from app.domain.repositories.base import BaseRepository


class InvitationRepository(BaseRepository[Invitation]):

    def get_by_token(self, token: str, for_update: bool = False) -> Optional[Invitation]:
        ...

    def get_active_for_email(self, email: str, now: datetime) -> Optional[Invitation]:
        """The unused, unexpired invitation for an email, if any."""
        ...

    def search(
        self,
        invited_by: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> Tuple[List[Invitation], int]:
        ...
