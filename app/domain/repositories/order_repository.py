"""
Order Repository Interface.
"""

from typing import List, Optional, Tuple

from app.domain.models.order import Order
from app.domain.policies.visibility import OrderVisibility
from app.domain.repositories.base import BaseRepository


class OrderRepository(BaseRepository[Order]):

    def search(
        self,
        scope: OrderVisibility,
        status: Optional[str] = None,
        agent_id: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> Tuple[List[Order], int]:
        """Orders visible under `scope`, newest first."""
        ...
