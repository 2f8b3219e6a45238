# lotmanager/schemas/stats.py
from pydantic import BaseModel
from decimal import Decimal


class DashboardStatsOut(BaseModel):
    income: Decimal
    active: int
    total_capacity: int
    occupancy: int
    date: str
