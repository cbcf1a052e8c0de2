"""
Bank Account Repository Interface.
"""

from typing import List, Optional

from app.domain.models.bank_account import BankAccount
from app.domain.policies.visibility import BankAccountVisibility
from app.domain.repositories.base import BaseRepository


class BankAccountRepository(BaseRepository[BankAccount]):

    def list_visible(self, scope: BankAccountVisibility) -> List[BankAccount]:
        ...

    def get_by_identifier(self, identifier: str, scope: BankAccountVisibility) -> Optional[BankAccount]:
        ...

    def identifier_taken(self, manager_id: str, identifier: str, exclude_id: Optional[str] = None) -> bool:
        """Whether the manager already uses this identifier on another account."""
        ...
