"""
SQLAlchemy Implementation of Order Repository.
"""

from typing import List, Optional, Tuple

from sqlalchemy import or_

from app.domain.models.order import Order
from app.domain.models.user import User
from app.domain.policies.visibility import OrderVisibility
from app.domain.repositories.order_repository import OrderRepository
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyOrderRepository(SQLAlchemyRepository[Order], OrderRepository):
    """Order repository implementation using SQLAlchemy."""

    def search(
        self,
        scope: OrderVisibility,
        status: Optional[str] = None,
        agent_id: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 10,
    ) -> Tuple[List[Order], int]:
        query = self.db.query(Order)

        if scope.agent_id is not None:
            query = query.filter(Order.agent_id == scope.agent_id)
        if scope.manager_id is not None:
            query = query.join(User, Order.agent_id == User.id).filter(User.manager_id == scope.manager_id)

        if status:
            query = query.filter(Order.status_order == status)
        if agent_id:
            query = query.filter(Order.agent_id == agent_id)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    Order.client_name.ilike(pattern),
                    Order.property_name.ilike(pattern),
                    Order.city_travel.ilike(pattern),
                    Order.country_travel.ilike(pattern),
                    Order.reservation_number.ilike(pattern),
                )
            )

        return self.paginate(query, page, page_size, Order.created_at.desc())
