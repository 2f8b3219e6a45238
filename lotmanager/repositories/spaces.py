# lotmanager/repositories/spaces.py
"""
Space persistence. The claim is a single conditional UPDATE: the store decides
which of two racing callers wins, the row count tells each caller the outcome.
"""

from typing import List, Optional

from sqlalchemy import func, insert, literal, select, update
from sqlalchemy.orm import Session

from lotmanager.models.category import VehicleCategory
from lotmanager.models.space import Space
from lotmanager.utils.time_utils import utcnow


class SpaceRepository:
    def __init__(self, session: Session):
        self.session = session

    def find_by_id(self, space_id: int) -> Optional[Space]:
        return self.session.get(Space, space_id, populate_existing=True)

    def find_available_by_category(self, category_id: int, limit: int) -> List[Space]:
        stmt = (
            select(Space)
            .where(Space.category_id == category_id, Space.available.is_(True))
            .order_by(Space.id.asc())
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return list(self.session.execute(stmt).scalars().all())

    def conditional_claim(self, space_id: int) -> bool:
        """available: true → false in one statement. False when someone else got there first."""
        result = self.session.execute(
            update(Space)
            .where(Space.id == space_id, Space.available.is_(True))
            .values(available=False)
            .execution_options(synchronize_session=False)
        )
        self.session.commit()
        return result.rowcount == 1

    def insert_claimed(self, category_id: int, code: str, ceiling: Optional[int] = None) -> Optional[Space]:
        """
        Insert a space already claimed. With a ceiling, the row is only written while the
        category holds fewer than `ceiling` spaces; the count and the insert are one
        statement, and the category row is locked first where the backend supports it.
        Returns None when the ceiling is reached.
        """
        self.session.execute(
            select(VehicleCategory.id).where(VehicleCategory.id == category_id).with_for_update()
        )
        row = select(
            literal(code, Space.__table__.c.code.type),
            literal(category_id, Space.__table__.c.category_id.type),
            literal(False, Space.__table__.c.available.type),
            literal(utcnow(), Space.__table__.c.created_at.type),
        )
        if ceiling is not None:
            inventory = (
                select(func.count(Space.id))
                .where(Space.category_id == category_id)
                .correlate(None)
                .scalar_subquery()
            )
            row = row.where(inventory < ceiling)

        result = self.session.execute(
            insert(Space).from_select(["code", "category_id", "available", "created_at"], row)
        )
        if result.rowcount != 1:
            self.session.rollback()
            return None

        # Read back inside the same transaction: if this fails the insert is rolled back with it
        space = self.session.execute(
            select(Space).where(Space.code == code).execution_options(populate_existing=True)
        ).scalar_one()
        self.session.commit()
        return space

    def set_available(self, space_id: int, available: bool) -> None:
        self.session.execute(
            update(Space)
            .where(Space.id == space_id)
            .values(available=available)
            .execution_options(synchronize_session=False)
        )
        self.session.commit()

    def count_by_category(self, category_id: int, available: Optional[bool] = None) -> int:
        stmt = select(func.count(Space.id)).where(Space.category_id == category_id)
        if available is not None:
            stmt = stmt.where(Space.available.is_(available))
        return self.session.execute(stmt).scalar() or 0

    def list_all(self, category_id: Optional[int] = None) -> List[Space]:
        stmt = select(Space).order_by(Space.id.asc()).execution_options(populate_existing=True)
        if category_id is not None:
            stmt = stmt.where(Space.category_id == category_id)
        return list(self.session.execute(stmt).scalars().all())

    def exists_any(self) -> bool:
        return self.session.execute(select(Space.id).limit(1)).first() is not None

    def bulk_insert(self, spaces: List[Space]) -> None:
        self.session.add_all(spaces)
        self.session.commit()
