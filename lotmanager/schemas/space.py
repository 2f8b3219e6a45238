# lotmanager/schemas/space.py
from pydantic import BaseModel
from datetime import datetime
from typing import Optional


class SpaceOut(BaseModel):
    id: int
    code: str
    category_id: int
    available: bool
    created_at: Optional[datetime]

    class Config:
        from_attributes = True


class OccupancyOut(BaseModel):
    group: str
    capacity: int
    active: int
    available_spaces: int
    inventory: int
    occupancy_percent: float
    is_full: bool
