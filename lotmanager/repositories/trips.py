# lotmanager/repositories/trips.py
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from lotmanager.models.trip import Trip, TripStatus


class TripRepository:
    def __init__(self, session: Session):
        self.session = session

    def find_by_id(self, trip_id: int) -> Optional[Trip]:
        return self.session.get(Trip, trip_id, populate_existing=True)

    def find_open_by_plate(self, plate: str) -> Optional[Trip]:
        stmt = (
            select(Trip)
            .where(Trip.plate == plate, Trip.status == TripStatus.OPEN)
            .order_by(Trip.entered_at.desc())
            .limit(1)
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalars().first()

    def count_open_by_category(self, category_ids: Iterable[int]) -> int:
        ids = list(category_ids)
        if not ids:
            return 0
        stmt = select(func.count(Trip.id)).where(
            Trip.status == TripStatus.OPEN, Trip.category_id.in_(ids)
        )
        return self.session.execute(stmt).scalar() or 0

    def insert(self, trip: Trip) -> Trip:
        """Persist an OPEN trip. IntegrityError surfaces when the plate already has one."""
        self.session.add(trip)
        self.session.commit()
        return trip

    def close_by_id(
        self,
        trip_id: int,
        exited_at: datetime,
        duration_minutes: int,
        amount: Decimal,
        tariff_id: Optional[int],
        closed_by: str,
    ) -> bool:
        """OPEN → CLOSED in one statement. False when the trip was already closed."""
        result = self.session.execute(
            update(Trip)
            .where(Trip.id == trip_id, Trip.status == TripStatus.OPEN)
            .values(
                status=TripStatus.CLOSED,
                exited_at=exited_at,
                duration_minutes=duration_minutes,
                amount=amount,
                tariff_id=tariff_id,
                closed_by=closed_by,
            )
            .execution_options(synchronize_session=False)
        )
        self.session.commit()
        return result.rowcount == 1

    def list_open(self) -> List[Trip]:
        stmt = (
            select(Trip)
            .where(Trip.status == TripStatus.OPEN)
            .order_by(Trip.entered_at.desc())
            .execution_options(populate_existing=True)
        )
        return list(self.session.execute(stmt).scalars().all())

    def sum_closed_amount_between(self, start: datetime, end: datetime) -> Decimal:
        stmt = select(func.coalesce(func.sum(Trip.amount), 0)).where(
            Trip.status == TripStatus.CLOSED,
            Trip.exited_at >= start,
            Trip.exited_at < end,
        )
        return Decimal(str(self.session.execute(stmt).scalar() or 0))

    def count_all(self) -> int:
        return self.session.execute(select(func.count(Trip.id))).scalar() or 0

    def page(self, offset: int, limit: int) -> List[Trip]:
        stmt = (
            select(Trip)
            .order_by(Trip.entered_at.desc(), Trip.id.desc())
            .offset(offset)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return list(self.session.execute(stmt).scalars().all())

    def count_and_page(self, page: int, limit: int) -> Tuple[int, List[Trip]]:
        return self.count_all(), self.page((page - 1) * limit, limit)
