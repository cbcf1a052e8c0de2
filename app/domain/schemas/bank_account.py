"""Pydantic schemas for bank accounts, with the field formats banks expect."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from app.domain.schemas.base import CamelModel

SWIFT_PATTERN = r"^[A-Z]{6}[A-Z0-9]{2}([A-Z0-9]{3})?$"
IBAN_PATTERN = r"^[A-Z]{2}[0-9]{2}[A-Z0-9]{4}[0-9]{7}([A-Z0-9]?){0,16}$"
HOLDER_NAME_PATTERN = r"^[a-zA-Zа-яА-ЯіІїЇєЄґҐ\s]+$"
ADDRESS_PATTERN = r"^[a-zA-Zа-яА-ЯіІїЇєЄґҐ0-9\s\.,\-\(\)]+$"


class BankAccountCreate(CamelModel):
    bank_name: str = Field(min_length=3, max_length=100)
    swift: str = Field(pattern=SWIFT_PATTERN)
    iban: str = Field(pattern=IBAN_PATTERN)
    holder_name: str = Field(min_length=2, max_length=100, pattern=HOLDER_NAME_PATTERN)
    address: Optional[str] = Field(default=None, max_length=200, pattern=ADDRESS_PATTERN)
    identifier: str = Field(min_length=1, max_length=50)


class BankAccountUpdate(CamelModel):
    bank_name: Optional[str] = Field(default=None, min_length=3, max_length=100)
    swift: Optional[str] = Field(default=None, pattern=SWIFT_PATTERN)
    iban: Optional[str] = Field(default=None, pattern=IBAN_PATTERN)
    holder_name: Optional[str] = Field(default=None, min_length=2, max_length=100, pattern=HOLDER_NAME_PATTERN)
    address: Optional[str] = Field(default=None, max_length=200, pattern=ADDRESS_PATTERN)
    identifier: Optional[str] = Field(default=None, min_length=1, max_length=50)


class BankAccountRead(CamelModel):
    id: str
    manager_id: str
    bank_name: str
    swift: str
    iban: str
    holder_name: str
    address: Optional[str] = None
    identifier: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
