"""Bank account service: manager-owned payment destinations."""

from typing import List

import structlog
from sqlalchemy.exc import IntegrityError

from app.core.exceptions import ConflictException, EntityNotFoundException, ForbiddenException
from app.domain.models.bank_account import BankAccount
from app.domain.policies.visibility import bank_account_visibility
from app.domain.repositories.bank_account_repository import BankAccountRepository
from app.domain.roles import Requester
from app.infrastructure.database import transaction

logger = structlog.get_logger(__name__)

IDENTIFIER_TAKEN = "Identifier must be unique for this manager"


def _require_manager(requester: Requester, action: str) -> None:
    if not requester.is_manager:
        raise ForbiddenException(f"Only managers can {action} bank accounts")


def _owned_account(repo: BankAccountRepository, requester: Requester, account_id: str, action: str) -> BankAccount:
    account = repo.get_by_id(account_id, for_update=True)
    if not account:
        raise EntityNotFoundException("Bank account not found")
    if account.manager_id != requester.id:
        raise ForbiddenException(f"You are not authorized to {action} this bank account")
    return account


def list_bank_accounts(repo: BankAccountRepository, requester: Requester) -> List[BankAccount]:
    return repo.list_visible(bank_account_visibility(requester))


def get_bank_account(repo: BankAccountRepository, requester: Requester, identifier: str) -> BankAccount:
    account = repo.get_by_identifier(identifier, bank_account_visibility(requester))
    if not account:
        raise EntityNotFoundException("Bank account not found")
    return account


def create_bank_account(repo: BankAccountRepository, requester: Requester, data: dict) -> BankAccount:
    _require_manager(requester, "create")
    with transaction(repo.db):
        if repo.identifier_taken(requester.id, data["identifier"]):
            raise ConflictException(IDENTIFIER_TAKEN)
        try:
            account = repo.create({**data, "manager_id": requester.id})
        except IntegrityError as exc:
            # lost a race on unique_manager_identifier
            raise ConflictException(IDENTIFIER_TAKEN) from exc

    logger.info("Bank account created", bank_account_id=account.id, manager_id=requester.id)
    return account


def update_bank_account(repo: BankAccountRepository, requester: Requester, account_id: str, data: dict) -> BankAccount:
    _require_manager(requester, "update")
    data = {key: value for key, value in data.items() if key != "manager_id"}
    with transaction(repo.db):
        account = _owned_account(repo, requester, account_id, "update")
        identifier = data.get("identifier")
        if identifier and identifier != account.identifier and repo.identifier_taken(
            requester.id, identifier, exclude_id=account.id
        ):
            raise ConflictException(IDENTIFIER_TAKEN)
        try:
            account = repo.update(account, data)
        except IntegrityError as exc:
            raise ConflictException(IDENTIFIER_TAKEN) from exc

    logger.info("Bank account updated", bank_account_id=account_id, fields=sorted(data))
    return account


def delete_bank_account(repo: BankAccountRepository, requester: Requester, account_id: str) -> None:
    _require_manager(requester, "delete")
    with transaction(repo.db):
        account = _owned_account(repo, requester, account_id, "delete")
        repo.delete(account)

    logger.info("Bank account deleted", bank_account_id=account_id, manager_id=requester.id)
