"""BankAccount model: payment destinations owned by a manager."""

from sqlalchemy import Column, DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.sql import func

from app.domain.models.user import generate_uuid
from app.infrastructure.database import Base


class BankAccount(Base):
    __tablename__ = "bank_accounts"
    __table_args__ = (
        UniqueConstraint("manager_id", "identifier", name="unique_manager_identifier"),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    manager_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    bank_name = Column(String(100), nullable=False)
    swift = Column(String(11), nullable=False)
    iban = Column(String(34), nullable=False)
    holder_name = Column(String(100), nullable=False)
    address = Column(String(200), nullable=True)
    identifier = Column(String(50), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<BankAccount {self.identifier} of {self.manager_id}>"
