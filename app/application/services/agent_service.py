"""Agent service: managers supervise their agents, admins supervise all."""

from typing import Optional

import structlog

from app.core.exceptions import EntityNotFoundException
from app.domain.models.user import User
from app.domain.policies.visibility import AgentVisibility, agent_visibility
from app.domain.repositories.user_repository import UserRepository
from app.domain.roles import Requester, Role
from app.domain.schemas.base import paginate
from app.infrastructure.database import transaction

logger = structlog.get_logger(__name__)

AGENT_FIELDS = ("first_name", "last_name", "phone")


def _in_scope(agent: Optional[User], scope: AgentVisibility) -> bool:
    if agent is None or agent.role != Role.AGENT.value:
        return False
    return scope.manager_id is None or agent.manager_id == scope.manager_id


def list_agents(
    repo: UserRepository,
    requester: Requester,
    search: Optional[str] = None,
    page: int = 1,
    page_size: int = 20,
) -> dict:
    scope = agent_visibility(requester)
    items, total = repo.search_agents(scope, search=search, page=page, page_size=page_size)
    return paginate(items, total, page, page_size)


def get_agent(repo: UserRepository, requester: Requester, agent_id: str, for_update: bool = False) -> User:
    scope = agent_visibility(requester)
    agent = repo.get_by_id(agent_id, for_update=for_update)
    if not _in_scope(agent, scope):
        raise EntityNotFoundException("Agent not found")
    return agent


def update_agent(repo: UserRepository, requester: Requester, agent_id: str, data: dict) -> User:
    changes = {key: value for key, value in data.items() if key in AGENT_FIELDS}
    with transaction(repo.db):
        agent = get_agent(repo, requester, agent_id, for_update=True)
        agent = repo.update(agent, changes)
    logger.info("Agent updated", agent_id=agent_id, by=requester.id, fields=sorted(changes))
    return agent


def toggle_agent_status(
    repo: UserRepository, requester: Requester, agent_id: str, is_active: Optional[bool] = None
) -> User:
    with transaction(repo.db):
        agent = get_agent(repo, requester, agent_id, for_update=True)
        is_active = (not agent.is_active) if is_active is None else is_active
        agent = repo.update(agent, {"is_active": is_active})
    logger.info("Agent status changed", agent_id=agent_id, by=requester.id, is_active=is_active)
    return agent
