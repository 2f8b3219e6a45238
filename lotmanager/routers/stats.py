# lotmanager/routers/stats.py
"""Admin reports: today's dashboard and paginated trip history."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from lotmanager.database import get_db
from lotmanager.schemas.stats import DashboardStatsOut
from lotmanager.schemas.trip import TripHistoryOut
from lotmanager.services import reports

router = APIRouter()


@router.get("/stats/dashboard", response_model=DashboardStatsOut, summary="Today's income and occupancy")
def get_dashboard(db: Session = Depends(get_db)):
    return reports.dashboard_stats(db)


@router.get("/stats/history", response_model=TripHistoryOut, summary="Trip history, newest first")
def get_history(page: int = Query(1, ge=1), limit: int = Query(50, ge=1, le=500),
                db: Session = Depends(get_db)):
    return reports.trip_history(db, page=page, limit=limit)
