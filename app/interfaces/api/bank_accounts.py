"""Bank account API routes: managers write, agents and admins read."""

from typing import List

from fastapi import APIRouter, Depends, Response, status

from app.application.services.bank_account_service import (
    create_bank_account,
    delete_bank_account,
    get_bank_account,
    list_bank_accounts,
    update_bank_account,
)
from app.domain.repositories.bank_account_repository import BankAccountRepository
from app.domain.roles import Requester
from app.domain.schemas.bank_account import BankAccountCreate, BankAccountRead, BankAccountUpdate
from app.interfaces.api.deps import get_requester
from app.interfaces.deps import get_bank_account_repository

router = APIRouter(prefix="/api/bank-accounts", tags=["Bank Accounts"])


@router.get("", response_model=List[BankAccountRead])
def bank_accounts_list(
    accounts: BankAccountRepository = Depends(get_bank_account_repository),
    requester: Requester = Depends(get_requester),
):
    return [BankAccountRead.model_validate(a) for a in list_bank_accounts(accounts, requester)]


@router.get("/{identifier}", response_model=BankAccountRead)
def bank_account_detail(
    identifier: str,
    accounts: BankAccountRepository = Depends(get_bank_account_repository),
    requester: Requester = Depends(get_requester),
):
    return BankAccountRead.model_validate(get_bank_account(accounts, requester, identifier))


@router.post("", response_model=BankAccountRead, status_code=status.HTTP_201_CREATED)
def bank_account_create(
    body: BankAccountCreate,
    accounts: BankAccountRepository = Depends(get_bank_account_repository),
    requester: Requester = Depends(get_requester),
):
    account = create_bank_account(accounts, requester, body.model_dump(exclude_unset=True))
    return BankAccountRead.model_validate(account)


@router.put("/{account_id}", response_model=BankAccountRead)
def bank_account_update(
    account_id: str,
    body: BankAccountUpdate,
    accounts: BankAccountRepository = Depends(get_bank_account_repository),
    requester: Requester = Depends(get_requester),
):
    account = update_bank_account(accounts, requester, account_id, body.model_dump(exclude_unset=True, exclude_none=True))
    return BankAccountRead.model_validate(account)


@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def bank_account_delete(
    account_id: str,
    accounts: BankAccountRepository = Depends(get_bank_account_repository),
    requester: Requester = Depends(get_requester),
):
    delete_bank_account(accounts, requester, account_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
