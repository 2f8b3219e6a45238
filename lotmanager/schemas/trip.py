# lotmanager/schemas/trip.py
from pydantic import BaseModel
from datetime import datetime
from decimal import Decimal
from typing import Optional


class EntryRequest(BaseModel):
    plate: str
    category_id: int
    space_id: Optional[int] = None


class ExitRequest(BaseModel):
    plate: str


class TripOut(BaseModel):
    id: int
    plate: str
    category_id: int
    space_id: int
    tariff_id: Optional[int]
    entered_at: datetime
    exited_at: Optional[datetime]
    status: str
    duration_minutes: Optional[int]
    amount: Optional[Decimal]
    opened_by: str
    closed_by: Optional[str]

    class Config:
        from_attributes = True


class ExitResultOut(BaseModel):
    trip: TripOut
    duration_minutes: int
    amount: Decimal
    tariff_name: str


class ExitPreviewOut(BaseModel):
    plate: str
    duration_minutes: int
    amount: Decimal
    tariff_name: str
    tariff_id: Optional[int]


class RejectionOut(BaseModel):
    error: str
    code: str


class PaginationOut(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class TripHistoryOut(BaseModel):
    data: list[TripOut]
    pagination: PaginationOut
