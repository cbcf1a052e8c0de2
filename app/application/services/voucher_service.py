"""Voucher service: checks an order is ready and renders its PDF voucher."""

from typing import Optional

import structlog

from app.core.exceptions import (
    BadRequestException,
    EntityNotFoundException,
    ForbiddenException,
    VoucherRenderingError,
)
from app.domain.models.bank_account import BankAccount
from app.domain.models.order import Order
from app.domain.policies.order_mutation import APPROVED
from app.domain.policies.visibility import BankAccountVisibility
from app.domain.repositories.bank_account_repository import BankAccountRepository
from app.domain.repositories.order_repository import OrderRepository
from app.domain.roles import Requester
from app.infrastructure.voucher_pdf import render_voucher

logger = structlog.get_logger(__name__)

REQUIRED_FIELDS = {
    "check_in": "checkIn",
    "check_out": "checkOut",
    "nights": "nights",
    "property_name": "propertyName",
    "city_travel": "cityTravel",
    "country_travel": "countryTravel",
    "reservation_number": "reservationNumber",
    "client_name": "clientName",
    "official_price": "officialPrice",
    "total_price": "totalPrice",
}

BANK_ACCOUNT_COLUMNS = ("bank_name", "iban", "swift", "holder_name", "address", "identifier")


def voucher_filename(order: Order) -> str:
    return f"voucher-{order.reservation_number}.pdf"


def missing_fields(order: Order) -> list[str]:
    return [
        name
        for column, name in REQUIRED_FIELDS.items()
        if getattr(order, column) is None or getattr(order, column) == ""
    ]


def resolve_bank_account(accounts: BankAccountRepository, order: Order) -> Optional[BankAccount]:
    """The order's bank account, looked up among its agent's manager's accounts."""
    manager_id = order.agent.manager_id if order.agent else None
    if not order.bank_account or not manager_id:
        return None
    return accounts.get_by_identifier(order.bank_account, BankAccountVisibility(manager_id=manager_id))


def generate_voucher(
    orders: OrderRepository,
    accounts: BankAccountRepository,
    requester: Requester,
    order_id: str,
) -> tuple[bytes, str]:
    """Return the voucher PDF bytes and its download filename."""
    logger.info("Voucher requested", order_id=order_id, by=requester.id, role=requester.role.value)

    order = orders.get_by_id(order_id)
    if not order:
        raise EntityNotFoundException("Order not found")
    if requester.is_agent and order.agent_id != requester.id:
        raise ForbiddenException("Access denied. You can only generate vouchers for your own orders.")
    if order.status_order != APPROVED:
        raise ForbiddenException("Voucher generation requires manager approval")

    missing = missing_fields(order)
    if missing:
        raise BadRequestException(f"Missing required fields: {', '.join(missing)}")

    account = resolve_bank_account(accounts, order)
    order_data = {column: getattr(order, column) for column in Order.__table__.columns.keys()}
    account_data = {column: getattr(account, column) for column in BANK_ACCOUNT_COLUMNS} if account else None

    try:
        pdf = render_voucher(order_data, account_data)
    except Exception as e:
        logger.exception("Voucher rendering failed", order_id=order_id)
        raise VoucherRenderingError() from e

    logger.info("Voucher generated", order_id=order_id, size=len(pdf))
    return pdf, voucher_filename(order)
