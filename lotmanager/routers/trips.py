# lotmanager/routers/trips.py
"""
Entry/exit endpoints — thin glue over services.trip_lifecycle.
Rejections become {"error", "code"} bodies; only STORE_UNAVAILABLE is a 5xx.
Store work is blocking, so the handlers are plain functions run in the threadpool;
asyncio.run drives the lifecycle coroutines there instead of on the event loop.
"""

import asyncio
from typing import Optional
from fastapi import APIRouter, Depends, Header, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from lotmanager.database import get_db
from lotmanager.schemas.trip import (
    EntryRequest, ExitRequest, TripOut, ExitResultOut, ExitPreviewOut, RejectionOut,
)
from lotmanager.services import trip_lifecycle
from lotmanager.services.results import Rejected, RejectionKind

router = APIRouter()

_STATUS_BY_KIND = {
    RejectionKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    RejectionKind.STORE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def rejection_response(rejected: Rejected) -> JSONResponse:
    return JSONResponse(
        status_code=_STATUS_BY_KIND.get(rejected.kind, status.HTTP_400_BAD_REQUEST),
        content={"error": rejected.message, "code": rejected.kind.value},
    )


_REJECTIONS = {400: {"model": RejectionOut}, 404: {"model": RejectionOut}, 503: {"model": RejectionOut}}


@router.post("/trips/entry", status_code=201, response_model=TripOut, responses=_REJECTIONS,
             summary="Register a vehicle entry")
def register_entry(body: EntryRequest, db: Session = Depends(get_db),
                   x_operator_id: Optional[str] = Header(default=None)):
    """Claims a space (requested or first free, provisioning if needed) and opens a trip."""
    result = asyncio.run(trip_lifecycle.register_entry(
        db, body.plate, body.category_id, requested_space_id=body.space_id, actor_id=x_operator_id,
    ))
    if isinstance(result, Rejected):
        return rejection_response(result)
    return result


@router.post("/trips/exit", response_model=ExitResultOut, responses=_REJECTIONS,
             summary="Register a vehicle exit and charge it")
def register_exit(body: ExitRequest, db: Session = Depends(get_db),
                  x_operator_id: Optional[str] = Header(default=None)):
    result = asyncio.run(trip_lifecycle.register_exit(db, body.plate, actor_id=x_operator_id))
    if isinstance(result, Rejected):
        return rejection_response(result)
    return ExitResultOut(
        trip=TripOut.model_validate(result.trip),
        duration_minutes=result.duration_minutes,
        amount=result.amount,
        tariff_name=result.tariff_name,
    )


@router.get("/trips/exit/preview/{plate}", response_model=ExitPreviewOut, responses=_REJECTIONS,
            summary="What the vehicle would pay if it left now")
def preview_exit(plate: str, db: Session = Depends(get_db)):
    result = trip_lifecycle.preview_exit(db, plate)
    if isinstance(result, Rejected):
        return rejection_response(result)
    return ExitPreviewOut(
        plate=result.plate,
        duration_minutes=result.duration_minutes,
        amount=result.amount,
        tariff_name=result.tariff_name,
        tariff_id=result.tariff_id,
    )


@router.get("/trips/active", response_model=list[TripOut], summary="Vehicles currently parked")
def list_active(db: Session = Depends(get_db)):
    """OPEN trips, most recent entry first."""
    return trip_lifecycle.list_active_trips(db)
