# lotmanager/repositories/categories.py
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from lotmanager.models.category import VehicleCategory


class CategoryRepository:
    def __init__(self, session: Session):
        self.session = session

    def find_by_id(self, category_id: int) -> Optional[VehicleCategory]:
        return self.session.get(VehicleCategory, category_id)

    def list_all(self) -> List[VehicleCategory]:
        return list(
            self.session.execute(select(VehicleCategory).order_by(VehicleCategory.id.asc())).scalars().all()
        )

    def add_missing(self, categories: List[VehicleCategory]) -> int:
        added = 0
        for category in categories:
            if self.session.get(VehicleCategory, category.id) is None:
                self.session.add(category)
                added += 1
        self.session.commit()
        return added
