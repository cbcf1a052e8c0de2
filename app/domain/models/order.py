"""Order domain model: maps to the 'orders' table.

payments is a JSON document {"deposit": {...}, "balance": {...}} whose records
carry amount, status, due_date, paid_date (ISO dates) and payment_methods.
"""

from sqlalchemy import JSON, Column, Date, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.domain.models.user import generate_uuid
from app.infrastructure.database import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    agent_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    agent_name = Column(String(200), nullable=True)

    # Trip
    check_in = Column(Date, nullable=False)
    check_out = Column(Date, nullable=False)
    nights = Column(Integer, nullable=False)
    country_travel = Column(String(100), nullable=False)
    city_travel = Column(String(100), nullable=False)
    property_name = Column(String(200), nullable=False)
    property_number = Column(String(100), nullable=True)
    reservation_number = Column(String(100), nullable=False, index=True)

    # Client
    client_name = Column(String(200), nullable=False)
    client_phone = Column(JSON, nullable=False, default=list)
    client_email = Column(String(255), nullable=True)
    client_country = Column(String(100), nullable=True)
    client_document_number = Column(String(100), nullable=True)
    guests = Column(JSON, nullable=False, default=dict)

    # Pricing
    official_price = Column(Float, nullable=False)
    tax_clean = Column(Float, nullable=False, default=0)
    discount = Column(Float, nullable=False, default=0)
    total_price = Column(Float, nullable=False)
    bank_account = Column(String(50), nullable=True)

    payments = Column(JSON, nullable=False)
    status_order = Column(String(20), nullable=False, default="pending", index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    agent = relationship("User", foreign_keys=[agent_id])

    def __repr__(self):
        return f"<Order {self.reservation_number} ({self.status_order})>"
