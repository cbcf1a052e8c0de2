"""Manager order routes: review and approve the orders of supervised agents."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.application.services.order_service import confirm_order, confirm_payment, list_manager_orders
from app.domain.repositories.order_repository import OrderRepository
from app.domain.repositories.user_repository import UserRepository
from app.domain.roles import Requester
from app.domain.schemas.base import Page
from app.domain.schemas.order import OrderRead, OrderStatus
from app.interfaces.api.deps import require_supervisor
from app.interfaces.deps import get_order_repository, get_user_repository

router = APIRouter(prefix="/api/manager/orders", tags=["Manager Orders"])


@router.get("", response_model=Page[OrderRead])
def manager_orders_list(
    status_order: Optional[OrderStatus] = Query(None, alias="status"),
    agent_id: Optional[str] = Query(None, alias="agentId"),
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    orders: OrderRepository = Depends(get_order_repository),
    users: UserRepository = Depends(get_user_repository),
    requester: Requester = Depends(require_supervisor),
):
    result = list_manager_orders(
        orders,
        users,
        requester,
        status=status_order,
        agent_id=agent_id,
        search=search,
        page=page,
        page_size=limit,
    )
    result["items"] = [OrderRead.model_validate(o) for o in result["items"]]
    return result


@router.patch("/{order_id}/confirm", response_model=OrderRead)
def manager_confirm(
    order_id: str,
    orders: OrderRepository = Depends(get_order_repository),
    requester: Requester = Depends(require_supervisor),
):
    return OrderRead.model_validate(confirm_order(orders, requester, order_id))


@router.patch("/{order_id}/confirm-payment", response_model=OrderRead)
def manager_confirm_payment(
    order_id: str,
    orders: OrderRepository = Depends(get_order_repository),
    requester: Requester = Depends(require_supervisor),
):
    return OrderRead.model_validate(confirm_payment(orders, requester, order_id))
