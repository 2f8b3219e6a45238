# lotmanager/routers/spaces.py
"""Space inventory and per-group occupancy (read-only)."""

from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from lotmanager.database import get_db
from lotmanager.repositories.spaces import SpaceRepository
from lotmanager.schemas.space import SpaceOut, OccupancyOut
from lotmanager.services import reports

router = APIRouter()


@router.get("/spaces", response_model=list[SpaceOut], summary="List spaces")
def list_spaces(category_id: Optional[int] = None, db: Session = Depends(get_db)):
    return SpaceRepository(db).list_all(category_id)


@router.get("/occupancy", response_model=list[OccupancyOut], summary="Occupancy per capacity group")
def get_occupancy(db: Session = Depends(get_db)):
    """Open trips vs ceiling, plus free and total spaces, per group."""
    return reports.occupancy(db)
