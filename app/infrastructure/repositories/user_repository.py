"""
SQLAlchemy Implementation of User Repository.
"""

from typing import List, Optional, Tuple

from sqlalchemy import or_

from app.domain.models.user import User
from app.domain.policies.visibility import AgentVisibility
from app.domain.repositories.user_repository import UserRepository
from app.domain.roles import Role
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


def _matches(search: str):
    pattern = f"%{search}%"
    return or_(
        User.first_name.ilike(pattern),
        User.last_name.ilike(pattern),
        User.email.ilike(pattern),
    )


class SQLAlchemyUserRepository(SQLAlchemyRepository[User], UserRepository):
    """User repository implementation using SQLAlchemy."""

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.lower()).first()

    def admin_exists(self) -> bool:
        return self.db.query(User.id).filter(User.role == Role.ADMIN.value).first() is not None

    def search(
        self,
        role: Optional[str] = None,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> Tuple[List[User], int]:
        query = self.db.query(User)
        if role:
            query = query.filter(User.role == role)
        if search:
            query = query.filter(_matches(search))
        return self.paginate(query, page, page_size, User.created_at.desc())

    def search_agents(
        self,
        scope: AgentVisibility,
        search: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> Tuple[List[User], int]:
        query = self.db.query(User).filter(User.role == Role.AGENT.value)
        if scope.manager_id is not None:
            query = query.filter(User.manager_id == scope.manager_id)
        if search:
            query = query.filter(_matches(search))
        return self.paginate(query, page, page_size, User.created_at.desc())
