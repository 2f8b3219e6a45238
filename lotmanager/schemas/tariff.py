# lotmanager/schemas/tariff.py
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

BillingModeName = Literal["PER_MINUTE", "PER_HOUR", "PER_DAY", "PER_FRACTION"]


class TariffCreate(BaseModel):
    category_id: int
    name: str = Field(min_length=1)
    billing_mode: BillingModeName
    rate: Decimal = Field(ge=0)
    valid_from: datetime
    valid_to: Optional[datetime] = None
    fraction_minutes: Optional[int] = Field(default=None, gt=0)   # PER_FRACTION only, default 15


class TariffUpdate(BaseModel):
    category_id: Optional[int] = None
    name: Optional[str] = None
    billing_mode: Optional[BillingModeName] = None
    rate: Optional[Decimal] = Field(default=None, ge=0)
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    fraction_minutes: Optional[int] = Field(default=None, gt=0)

    # Omitting a field leaves it unchanged; only valid_to and fraction_minutes may be cleared
    @field_validator("category_id", "name", "billing_mode", "rate", "valid_from")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class TariffStatusUpdate(BaseModel):
    active: bool


class TariffOut(BaseModel):
    id: int
    category_id: int
    name: str
    billing_mode: str
    fraction_minutes: Optional[int]
    rate: Decimal
    active: bool
    valid_from: datetime
    valid_to: Optional[datetime]
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class CategoryOut(BaseModel):
    id: int
    name: str
    capacity_group: str

    class Config:
        from_attributes = True
