"""
User Repository Interface.
"""

from typing import List, Optional, Tuple

from app.domain.models.user import User
from app.domain.policies.visibility import AgentVisibility
from app.domain.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Interface for User-specific operations."""

    def get_by_email(self, email: str) -> Optional[User]:
        ...

    def admin_exists(self) -> bool:
        ...

    def search(
        self,
        role: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> Tuple[List[User], int]:
        """Users filtered by role and by a name/email fragment."""
        ...

    def search_agents(
        self,
        scope: AgentVisibility,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> Tuple[List[User], int]:
        ...
