"""
Role-scoped visibility.

Each function turns a Requester into a filter descriptor; repositories
translate the descriptors into SQL. A field left as None means "no restriction".
"""

from dataclasses import dataclass
from typing import Optional

from app.core.exceptions import EntityNotFoundException, ForbiddenException, InvalidRoleException
from app.domain.roles import Requester, Role


@dataclass(frozen=True)
class OrderVisibility:
    agent_id: Optional[str] = None
    manager_id: Optional[str] = None

    @property
    def unrestricted(self) -> bool:
        return self.agent_id is None and self.manager_id is None


@dataclass(frozen=True)
class BankAccountVisibility:
    manager_id: Optional[str] = None


@dataclass(frozen=True)
class AgentVisibility:
    manager_id: Optional[str] = None


def order_visibility(requester: Requester) -> OrderVisibility:
    if requester.role is Role.ADMIN:
        return OrderVisibility()
    if requester.role is Role.MANAGER:
        return OrderVisibility(manager_id=requester.id)
    if requester.role is Role.AGENT:
        return OrderVisibility(agent_id=requester.id)
    raise InvalidRoleException(requester.role)


def bank_account_visibility(requester: Requester) -> BankAccountVisibility:
    if requester.role is Role.ADMIN:
        return BankAccountVisibility()
    if requester.role is Role.MANAGER:
        return BankAccountVisibility(manager_id=requester.id)
    if requester.role is Role.AGENT:
        if not requester.manager_id:
            raise EntityNotFoundException("Agent not found or not assigned to a manager")
        return BankAccountVisibility(manager_id=requester.manager_id)
    raise InvalidRoleException(requester.role)


def agent_visibility(requester: Requester) -> AgentVisibility:
    if requester.role is Role.ADMIN:
        return AgentVisibility()
    if requester.role is Role.MANAGER:
        return AgentVisibility(manager_id=requester.id)
    if requester.role is Role.AGENT:
        raise ForbiddenException("Agents cannot access agent lists")
    raise InvalidRoleException(requester.role)


def can_see_order(requester: Requester, agent_id: str, agent_manager_id: Optional[str]) -> bool:
    """Apply OrderVisibility to one already-loaded order."""
    scope = order_visibility(requester)
    if scope.agent_id is not None and agent_id != scope.agent_id:
        return False
    if scope.manager_id is not None and agent_manager_id != scope.manager_id:
        return False
    return True
