"""
SQLAlchemy Implementation of Bank Account Repository.
"""

from typing import List, Optional

from app.domain.models.bank_account import BankAccount
from app.domain.policies.visibility import BankAccountVisibility
from app.domain.repositories.bank_account_repository import BankAccountRepository
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyBankAccountRepository(SQLAlchemyRepository[BankAccount], BankAccountRepository):

    def _visible(self, scope: BankAccountVisibility):
        query = self.db.query(BankAccount)
        if scope.manager_id is not None:
            query = query.filter(BankAccount.manager_id == scope.manager_id)
        return query

    def list_visible(self, scope: BankAccountVisibility) -> List[BankAccount]:
        return self._visible(scope).order_by(BankAccount.created_at.desc()).all()

    def get_by_identifier(self, identifier: str, scope: BankAccountVisibility) -> Optional[BankAccount]:
        return self._visible(scope).filter(BankAccount.identifier == identifier).first()

    def identifier_taken(self, manager_id: str, identifier: str, exclude_id: Optional[str] = None) -> bool:
        query = self.db.query(BankAccount.id).filter(
            BankAccount.manager_id == manager_id,
            BankAccount.identifier == identifier,
        )
        if exclude_id:
            query = query.filter(BankAccount.id != exclude_id)
        return query.first() is not None
