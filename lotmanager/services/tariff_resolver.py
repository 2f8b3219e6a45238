# lotmanager/services/tariff_resolver.py
"""
Tariff Resolver.
At entry the latest active tariff id is frozen onto the trip. At exit that exact
row is used even if it has since been deactivated.
"""

from typing import Optional

from sqlalchemy.orm import Session

from lotmanager.models.tariff import Tariff
from lotmanager.repositories.tariffs import TariffRepository


def resolve_for_entry(db: Session, category_id: int) -> Optional[int]:
    tariff = TariffRepository(db).find_active_latest(category_id)
    return tariff.id if tariff else None


def resolve_snapshot(db: Session, trip_tariff_id: Optional[int]) -> Optional[Tariff]:
    if trip_tariff_id is None:
        return None
    return TariffRepository(db).find_by_id(trip_tariff_id)


def resolve_current(db: Session, category_id: int) -> Optional[Tariff]:
    return TariffRepository(db).find_active_latest(category_id)
