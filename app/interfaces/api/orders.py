"""Orders API routes: agent-facing booking CRUD, deposit and voucher."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from app.application.services.order_service import (
    create_order,
    delete_order,
    get_order,
    list_orders,
    mark_deposit_paid,
    update_order,
)
from app.application.services.voucher_service import generate_voucher
from app.domain.repositories.bank_account_repository import BankAccountRepository
from app.domain.repositories.order_repository import OrderRepository
from app.domain.repositories.user_repository import UserRepository
from app.domain.roles import Requester
from app.domain.schemas.base import Page
from app.domain.schemas.order import OrderCreate, OrderRead, OrderStatus, OrderUpdate
from app.interfaces.api.deps import get_requester
from app.interfaces.deps import get_bank_account_repository, get_order_repository, get_user_repository

router = APIRouter(prefix="/api/orders", tags=["Orders"])


@router.get("", response_model=Page[OrderRead])
def orders_list(
    status_order: Optional[OrderStatus] = Query(None, alias="status"),
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    orders: OrderRepository = Depends(get_order_repository),
    requester: Requester = Depends(get_requester),
):
    result = list_orders(orders, requester, status=status_order, search=search, page=page, page_size=limit)
    result["items"] = [OrderRead.model_validate(o) for o in result["items"]]
    return result


@router.post("", response_model=OrderRead, status_code=status.HTTP_201_CREATED)
def order_create(
    body: OrderCreate,
    orders: OrderRepository = Depends(get_order_repository),
    users: UserRepository = Depends(get_user_repository),
    requester: Requester = Depends(get_requester),
):
    order = create_order(orders, users, requester, body.model_dump(exclude_none=True))
    return OrderRead.model_validate(order)


@router.get("/{order_id}", response_model=OrderRead)
def order_detail(
    order_id: str,
    orders: OrderRepository = Depends(get_order_repository),
    requester: Requester = Depends(get_requester),
):
    return OrderRead.model_validate(get_order(orders, requester, order_id))


@router.put("/{order_id}", response_model=OrderRead)
def order_update(
    order_id: str,
    body: OrderUpdate,
    orders: OrderRepository = Depends(get_order_repository),
    requester: Requester = Depends(get_requester),
):
    # Explicit nulls are ignored: every updatable column is required or defaulted
    update = body.model_dump(exclude_unset=True, exclude_none=True)
    return OrderRead.model_validate(update_order(orders, requester, order_id, update))


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def order_delete(
    order_id: str,
    orders: OrderRepository = Depends(get_order_repository),
    requester: Requester = Depends(get_requester),
):
    delete_order(orders, requester, order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.patch("/{order_id}/deposit-paid", response_model=OrderRead)
def order_deposit_paid(
    order_id: str,
    orders: OrderRepository = Depends(get_order_repository),
    requester: Requester = Depends(get_requester),
):
    """Mark the deposit paid. Managers and admins only; agents always get a 422."""
    return OrderRead.model_validate(mark_deposit_paid(orders, requester, order_id))


@router.get("/{order_id}/voucher", response_class=Response)
def order_voucher(
    order_id: str,
    orders: OrderRepository = Depends(get_order_repository),
    accounts: BankAccountRepository = Depends(get_bank_account_repository),
    requester: Requester = Depends(get_requester),
):
    pdf, filename = generate_voucher(orders, accounts, requester, order_id)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
