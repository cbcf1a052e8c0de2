"""
API Dependencies.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from app.domain.models.bank_account import BankAccount
from app.domain.models.invitation import Invitation
from app.domain.models.order import Order
from app.domain.models.user import User
from app.domain.repositories.bank_account_repository import BankAccountRepository
from app.domain.repositories.invitation_repository import InvitationRepository
from app.domain.repositories.order_repository import OrderRepository
from app.domain.repositories.user_repository import UserRepository
from app.infrastructure.database import get_db
from app.infrastructure.repositories.bank_account_repository import SQLAlchemyBankAccountRepository
from app.infrastructure.repositories.invitation_repository import SQLAlchemyInvitationRepository
from app.infrastructure.repositories.order_repository import SQLAlchemyOrderRepository
from app.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    """Get user repository instance."""
    return SQLAlchemyUserRepository(db, User)


def get_invitation_repository(db: Session = Depends(get_db)) -> InvitationRepository:
    """Get invitation repository instance."""
    return SQLAlchemyInvitationRepository(db, Invitation)


def get_bank_account_repository(db: Session = Depends(get_db)) -> BankAccountRepository:
    """Get bank account repository instance."""
    return SQLAlchemyBankAccountRepository(db, BankAccount)


def get_order_repository(db: Session = Depends(get_db)) -> OrderRepository:
    """Get order repository instance."""
    return SQLAlchemyOrderRepository(db, Order)
