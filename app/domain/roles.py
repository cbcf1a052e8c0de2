"""User roles and the requester identity consumed by the policy functions."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from app.core.exceptions import InvalidRoleException


class Role(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    AGENT = "agent"


INVITABLE_ROLES = (Role.MANAGER, Role.AGENT)


def parse_role(value: Any) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise InvalidRoleException(value) from None


@dataclass(frozen=True)
class Requester:
    """Identity of the caller: id, role and (for agents) the owning manager."""

    id: str
    role: Role
    manager_id: Optional[str] = None

    @classmethod
    def from_user(cls, user) -> "Requester":
        return cls(id=user.id, role=parse_role(user.role), manager_id=user.manager_id)

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def is_manager(self) -> bool:
        return self.role is Role.MANAGER

    @property
    def is_agent(self) -> bool:
        return self.role is Role.AGENT

    @property
    def is_supervisor(self) -> bool:
        """Managers and admins may approve orders and change payment statuses."""
        return self.role in (Role.ADMIN, Role.MANAGER)
