# lotmanager/services/tariff_admin.py
"""
Tariff administration helpers used by the tariffs router.
Edits never reach trips already opened: those keep the tariff id frozen at entry.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from lotmanager.models.tariff import Tariff
from lotmanager.repositories.tariffs import TariffRepository
from lotmanager.utils.logger import get_logger
from lotmanager.utils.time_utils import utcnow

logger = get_logger(__name__)

_EDITABLE = ("category_id", "name", "billing_mode", "fraction_minutes", "rate", "valid_from", "valid_to")
_CLEARABLE = ("fraction_minutes", "valid_to")


def list_tariffs(db: Session) -> List[Tariff]:
    return TariffRepository(db).list_all()


def create_tariff(
    db: Session,
    category_id: int,
    name: str,
    billing_mode: str,
    rate,
    valid_from: datetime,
    valid_to: Optional[datetime] = None,
    fraction_minutes: Optional[int] = None,
) -> Tariff:
    tariff = Tariff(
        category_id=category_id,
        name=name,
        billing_mode=billing_mode,
        fraction_minutes=fraction_minutes,
        rate=rate,
        active=True,
        valid_from=valid_from,
        valid_to=valid_to,
        created_at=utcnow(),
    )
    TariffRepository(db).add(tariff)
    logger.info(f"[TARIFFS] Created tariff {tariff.id} '{name}' {billing_mode}@{rate} for category {category_id}")
    return tariff


def update_tariff(db: Session, tariff_id: int, changes: dict) -> Optional[Tariff]:
    """Apply a partial update. Returns None when the tariff does not exist."""
    repo = TariffRepository(db)
    tariff = repo.find_by_id(tariff_id)
    if tariff is None:
        return None
    for key, value in changes.items():
        if key not in _EDITABLE or (value is None and key not in _CLEARABLE):
            continue
        setattr(tariff, key, value)
    repo.save(tariff)
    logger.info(f"[TARIFFS] Updated tariff {tariff_id}: {sorted(changes)}")
    return tariff


def set_tariff_active(db: Session, tariff_id: int, active: bool) -> Optional[Tariff]:
    repo = TariffRepository(db)
    tariff = repo.find_by_id(tariff_id)
    if tariff is None:
        return None
    tariff.active = active
    repo.save(tariff)
    logger.info(f"[TARIFFS] Tariff {tariff_id} {'activated' if active else 'deactivated'}")
    return tariff
