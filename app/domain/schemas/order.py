"""Pydantic schemas for orders and their payment records."""

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import EmailStr, Field, model_validator

from app.domain.schemas.base import CamelModel

PaymentStatus = Literal["unpaid", "paid"]
OrderStatus = Literal["pending", "approved", "rejected"]


class Guests(CamelModel):
    adults: int = Field(default=1, ge=0)
    children: int = Field(default=0, ge=0)


class PaymentInput(CamelModel):
    """Partial payment record; only the submitted keys are applied."""

    amount: Optional[float] = Field(default=None, ge=0)
    status: Optional[PaymentStatus] = None
    due_date: Optional[date] = None
    paid_date: Optional[date] = None
    payment_methods: Optional[List[str]] = None


class PaymentsInput(CamelModel):
    deposit: Optional[PaymentInput] = None
    balance: Optional[PaymentInput] = None


class PaymentRecord(CamelModel):
    amount: float = 0
    status: PaymentStatus = "unpaid"
    due_date: Optional[date] = None
    paid_date: Optional[date] = None
    payment_methods: List[str] = []


class Payments(CamelModel):
    deposit: PaymentRecord
    balance: PaymentRecord


class OrderCreate(CamelModel):
    agent_id: Optional[str] = None
    agent_name: Optional[str] = Field(default=None, max_length=200)
    check_in: date
    check_out: date
    nights: int = Field(ge=1)
    country_travel: str = Field(min_length=1, max_length=100)
    city_travel: str = Field(min_length=1, max_length=100)
    property_name: str = Field(min_length=1, max_length=200)
    property_number: Optional[str] = Field(default=None, max_length=100)
    reservation_number: str = Field(min_length=1, max_length=100)
    client_name: str = Field(min_length=1, max_length=200)
    client_phone: List[str] = []
    client_email: Optional[EmailStr] = None
    client_country: Optional[str] = Field(default=None, max_length=100)
    client_document_number: Optional[str] = Field(default=None, max_length=100)
    guests: Guests = Guests()
    official_price: float = Field(ge=0)
    tax_clean: float = Field(default=0, ge=0)
    discount: float = Field(default=0, ge=0)
    total_price: Optional[float] = Field(default=None, ge=0)
    bank_account: Optional[str] = Field(default=None, max_length=50)
    payments: PaymentsInput = PaymentsInput()
    status_order: Optional[OrderStatus] = None

    @model_validator(mode="after")
    def check_dates(self):
        if self.check_out <= self.check_in:
            raise ValueError("checkOut must be after checkIn")
        return self


class OrderUpdate(CamelModel):
    """Partial update; agentId is accepted but never applied."""

    agent_id: Optional[str] = None
    agent_name: Optional[str] = Field(default=None, max_length=200)
    check_in: Optional[date] = None
    check_out: Optional[date] = None
    nights: Optional[int] = Field(default=None, ge=1)
    country_travel: Optional[str] = Field(default=None, min_length=1, max_length=100)
    city_travel: Optional[str] = Field(default=None, min_length=1, max_length=100)
    property_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    property_number: Optional[str] = Field(default=None, max_length=100)
    reservation_number: Optional[str] = Field(default=None, min_length=1, max_length=100)
    client_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    client_phone: Optional[List[str]] = None
    client_email: Optional[EmailStr] = None
    client_country: Optional[str] = Field(default=None, max_length=100)
    client_document_number: Optional[str] = Field(default=None, max_length=100)
    guests: Optional[Guests] = None
    official_price: Optional[float] = Field(default=None, ge=0)
    tax_clean: Optional[float] = Field(default=None, ge=0)
    discount: Optional[float] = Field(default=None, ge=0)
    total_price: Optional[float] = Field(default=None, ge=0)
    bank_account: Optional[str] = Field(default=None, max_length=50)
    payments: Optional[PaymentsInput] = None
    status_order: Optional[OrderStatus] = None


class OrderRead(CamelModel):
    id: str
    agent_id: str
    agent_name: Optional[str] = None
    check_in: date
    check_out: date
    nights: int
    country_travel: str
    city_travel: str
    property_name: str
    property_number: Optional[str] = None
    reservation_number: str
    client_name: str
    client_phone: List[str] = []
    client_email: Optional[str] = None
    client_country: Optional[str] = None
    client_document_number: Optional[str] = None
    guests: dict = {}
    official_price: float
    tax_clean: float = 0
    discount: float = 0
    total_price: float
    bank_account: Optional[str] = None
    payments: Payments
    status_order: OrderStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
