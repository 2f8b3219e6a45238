# lotmanager/repositories/tariffs.py
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from lotmanager.models.tariff import Tariff


class TariffRepository:
    def __init__(self, session: Session):
        self.session = session

    def find_by_id(self, tariff_id: int) -> Optional[Tariff]:
        """Exact row regardless of its active flag."""
        return self.session.get(Tariff, tariff_id, populate_existing=True)

    def find_active_latest(self, category_id: int) -> Optional[Tariff]:
        """Most recently created active tariff; highest id breaks ties."""
        stmt = (
            select(Tariff)
            .where(Tariff.category_id == category_id, Tariff.active.is_(True))
            .order_by(Tariff.created_at.desc().nulls_last(), Tariff.id.desc())
            .limit(1)
            .execution_options(populate_existing=True)
        )
        return self.session.execute(stmt).scalars().first()

    def list_all(self) -> List[Tariff]:
        stmt = select(Tariff).order_by(Tariff.id.asc()).execution_options(populate_existing=True)
        return list(self.session.execute(stmt).scalars().all())

    def add(self, tariff: Tariff) -> Tariff:
        self.session.add(tariff)
        self.session.commit()
        return tariff

    def save(self, tariff: Tariff) -> Tariff:
        self.session.commit()
        return tariff
