# lotmanager/routers/tariffs.py
"""Tariff administration + vehicle categories."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from lotmanager.database import get_db
from lotmanager.repositories.categories import CategoryRepository
from lotmanager.schemas.tariff import (
    TariffCreate, TariffUpdate, TariffStatusUpdate, TariffOut, CategoryOut,
)
from lotmanager.services import tariff_admin

router = APIRouter()


@router.get("/tariffs", response_model=list[TariffOut], summary="List all tariffs")
def list_tariffs(db: Session = Depends(get_db)):
    return tariff_admin.list_tariffs(db)


@router.post("/tariffs", status_code=201, response_model=TariffOut, summary="Create a tariff")
def create_tariff(body: TariffCreate, db: Session = Depends(get_db)):
    """New tariffs are active immediately and win over older active ones for new entries."""
    if CategoryRepository(db).find_by_id(body.category_id) is None:
        raise HTTPException(status_code=400, detail=f"Unknown vehicle category {body.category_id}")
    return tariff_admin.create_tariff(db, **body.model_dump())


@router.put("/tariffs/{tariff_id}", response_model=TariffOut, summary="Update a tariff")
def update_tariff(tariff_id: int, body: TariffUpdate, db: Session = Depends(get_db)):
    tariff = tariff_admin.update_tariff(db, tariff_id, body.model_dump(exclude_unset=True))
    if tariff is None:
        raise HTTPException(status_code=404, detail="Tariff not found")
    return tariff


@router.patch("/tariffs/{tariff_id}/status", response_model=TariffOut, summary="Activate or deactivate a tariff")
def set_tariff_status(tariff_id: int, body: TariffStatusUpdate, db: Session = Depends(get_db)):
    """Open trips keep billing with the tariff they entered under."""
    tariff = tariff_admin.set_tariff_active(db, tariff_id, body.active)
    if tariff is None:
        raise HTTPException(status_code=404, detail="Tariff not found")
    return tariff


@router.get("/categories", response_model=list[CategoryOut], summary="Vehicle categories")
def list_categories(db: Session = Depends(get_db)):
    return CategoryRepository(db).list_all()
