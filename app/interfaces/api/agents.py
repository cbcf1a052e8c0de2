"""Agent API routes: managers and admins supervising agents."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.application.services.agent_service import (
    get_agent,
    list_agents,
    toggle_agent_status,
    update_agent,
)
from app.domain.repositories.user_repository import UserRepository
from app.domain.roles import Requester
from app.domain.schemas.auth import ProfileUpdate, StatusToggle, UserRead
from app.domain.schemas.base import Page
from app.interfaces.api.deps import require_supervisor
from app.interfaces.deps import get_user_repository

router = APIRouter(prefix="/api/agents", tags=["Agents"])


@router.get("", response_model=Page[UserRead])
def agents_list(
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    users: UserRepository = Depends(get_user_repository),
    requester: Requester = Depends(require_supervisor),
):
    result = list_agents(users, requester, search=search, page=page, page_size=limit)
    result["items"] = [UserRead.model_validate(a) for a in result["items"]]
    return result


@router.get("/{agent_id}", response_model=UserRead)
def agent_detail(
    agent_id: str,
    users: UserRepository = Depends(get_user_repository),
    requester: Requester = Depends(require_supervisor),
):
    return UserRead.model_validate(get_agent(users, requester, agent_id))


@router.put("/{agent_id}", response_model=UserRead)
def agent_update(
    agent_id: str,
    body: ProfileUpdate,
    users: UserRepository = Depends(get_user_repository),
    requester: Requester = Depends(require_supervisor),
):
    agent = update_agent(users, requester, agent_id, body.model_dump(exclude_unset=True))
    return UserRead.model_validate(agent)


@router.patch("/{agent_id}/toggle-status", response_model=UserRead)
def agent_toggle_status(
    agent_id: str,
    body: Optional[StatusToggle] = None,
    users: UserRepository = Depends(get_user_repository),
    requester: Requester = Depends(require_supervisor),
):
    return UserRead.model_validate(toggle_agent_status(users, requester, agent_id, body.is_active if body else None))
