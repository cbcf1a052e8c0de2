"""Order service: booking lifecycle, payments and the manager review flow.

Every write re-reads the order with a row lock and applies the order rules
from app.domain.policies.order_mutation inside one transaction.
"""

from datetime import date, datetime
from typing import Any, Dict, Optional

import pytz
import structlog

from app.config import get_settings
from app.core.exceptions import EntityNotFoundException, ForbiddenException, ValidationException
from app.domain.models.order import Order
from app.domain.policies.order_mutation import (
    APPROVED,
    PAID,
    PAYMENT_KINDS,
    PENDING,
    OrderSnapshot,
    authorize_order_update,
    build_order,
)
from app.domain.policies.visibility import can_see_order, order_visibility
from app.domain.repositories.order_repository import OrderRepository
from app.domain.repositories.user_repository import UserRepository
from app.domain.roles import Requester, Role
from app.domain.schemas.base import paginate
from app.infrastructure.database import transaction

settings = get_settings()
tz = pytz.timezone(settings.TIMEZONE)
logger = structlog.get_logger(__name__)

ORDER_COLUMNS = (
    "id",
    "agent_id",
    "agent_name",
    "check_in",
    "check_out",
    "nights",
    "country_travel",
    "city_travel",
    "property_name",
    "property_number",
    "reservation_number",
    "client_name",
    "client_phone",
    "client_email",
    "client_country",
    "client_document_number",
    "guests",
    "official_price",
    "tax_clean",
    "discount",
    "total_price",
    "bank_account",
    "payments",
    "status_order",
    "created_at",
)


def get_current_date() -> date:
    """Get current date in the configured timezone."""
    return datetime.now(tz).date()


def order_values(order: Order) -> Dict[str, Any]:
    return {column: getattr(order, column) for column in ORDER_COLUMNS}


def snapshot(order: Order) -> OrderSnapshot:
    manager_id = order.agent.manager_id if order.agent else None
    return OrderSnapshot(agent_id=order.agent_id, agent_manager_id=manager_id, values=order_values(order))


def _load(orders: OrderRepository, order_id: str, for_update: bool = False) -> Order:
    order = orders.get_by_id(order_id, for_update=for_update)
    if not order:
        raise EntityNotFoundException("Order not found")
    return order


def _apply(orders: OrderRepository, requester: Requester, order: Order, update: Dict[str, Any]) -> Order:
    mutation = authorize_order_update(requester, snapshot(order), update, get_current_date())
    if mutation.values:
        order = orders.update(order, mutation.values)
    logger.info(
        "Order updated",
        order_id=order.id,
        by=requester.id,
        role=requester.role.value,
        changed=sorted(mutation.changed),
    )
    return order


def _resolve_agent(users: UserRepository, requester: Requester, agent_id: Optional[str]):
    """The agent a new order belongs to."""
    if requester.is_agent:
        if agent_id and agent_id != requester.id:
            raise ForbiddenException("Only admin or manager can create orders for agents")
        agent_id = requester.id
    elif not agent_id:
        raise ValidationException(
            "Validation failed",
            [{"field": "agentId", "message": "agentId is required when creating orders for agents"}],
        )

    agent = users.get_by_id(agent_id)
    if not agent or agent.role != Role.AGENT.value or not agent.is_active:
        raise EntityNotFoundException("Agent not found or inactive")
    if requester.is_manager and agent.manager_id != requester.id:
        raise ForbiddenException("Agent does not belong to this manager")
    return agent


def create_order(orders: OrderRepository, users: UserRepository, requester: Requester, data: Dict[str, Any]) -> Order:
    agent = _resolve_agent(users, requester, data.get("agent_id"))
    values = build_order(
        data,
        agent_id=agent.id,
        agent_name=agent.full_name,
        requester=requester,
        today=get_current_date(),
    )
    with transaction(orders.db):
        order = orders.create(values)

    logger.info(
        "Order created",
        order_id=order.id,
        agent_id=agent.id,
        by=requester.id,
        total_price=order.total_price,
    )
    return order


def get_order(orders: OrderRepository, requester: Requester, order_id: str) -> Order:
    order = _load(orders, order_id)
    if not can_see_order(requester, order.agent_id, order.agent.manager_id if order.agent else None):
        raise EntityNotFoundException("Order not found")
    return order


def list_orders(
    orders: OrderRepository,
    requester: Requester,
    status: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    page_size: int = 10,
) -> dict:
    items, total = orders.search(
        order_visibility(requester), status=status, search=search, page=page, page_size=page_size
    )
    return paginate(items, total, page, page_size)


def update_order(orders: OrderRepository, requester: Requester, order_id: str, update: Dict[str, Any]) -> Order:
    with transaction(orders.db):
        order = _load(orders, order_id, for_update=True)
        order = _apply(orders, requester, order, update)
    return order


def delete_order(orders: OrderRepository, requester: Requester, order_id: str) -> None:
    with transaction(orders.db):
        order = _load(orders, order_id, for_update=True)
        current = snapshot(order)
        if not can_see_order(requester, current.agent_id, current.agent_manager_id):
            raise ForbiddenException("You are not authorized to delete this order")
        if order.status_order != PENDING:
            raise ForbiddenException("Cannot delete order after confirmation")
        orders.delete(order)

    logger.info("Order deleted", order_id=order_id, by=requester.id)


def mark_deposit_paid(orders: OrderRepository, requester: Requester, order_id: str) -> Order:
    """Shortcut for setting payments.deposit.status to paid."""
    return update_order(orders, requester, order_id, {"payments": {"deposit": {"status": PAID}}})


def list_manager_orders(
    orders: OrderRepository,
    users: UserRepository,
    requester: Requester,
    status: Optional[str] = None,
    agent_id: Optional[str] = None,
    search: Optional[str] = None,
    page: int = 1,
    page_size: int = 10,
) -> dict:
    if agent_id and requester.is_manager:
        agent = users.get_by_id(agent_id)
        if not agent or agent.manager_id != requester.id:
            raise ForbiddenException("Agent does not belong to this manager")

    items, total = orders.search(
        order_visibility(requester),
        status=status,
        agent_id=agent_id,
        search=search,
        page=page,
        page_size=page_size,
    )
    return paginate(items, total, page, page_size)


def _supervised_order(orders: OrderRepository, requester: Requester, order_id: str) -> Order:
    order = _load(orders, order_id, for_update=True)
    current = snapshot(order)
    if not can_see_order(requester, current.agent_id, current.agent_manager_id):
        raise ForbiddenException("This order does not belong to your agents")
    return order


def confirm_order(orders: OrderRepository, requester: Requester, order_id: str) -> Order:
    """Approve a pending order."""
    with transaction(orders.db):
        order = _supervised_order(orders, requester, order_id)
        if order.status_order != PENDING:
            raise ForbiddenException("Order has already been confirmed or paid")
        order = _apply(orders, requester, order, {"status_order": APPROVED})
    return order


def confirm_payment(orders: OrderRepository, requester: Requester, order_id: str) -> Order:
    """Mark deposit and balance of an approved order as paid."""
    with transaction(orders.db):
        order = _supervised_order(orders, requester, order_id)
        if order.status_order != APPROVED:
            raise ForbiddenException("Order must be confirmed before payment can be confirmed")
        payments = order.payments or {}
        if all((payments.get(kind) or {}).get("status") == PAID for kind in PAYMENT_KINDS):
            raise ForbiddenException("Payment has already been confirmed")
        order = _apply(
            orders,
            requester,
            order,
            {"payments": {kind: {"status": PAID} for kind in PAYMENT_KINDS}},
        )
    return order
