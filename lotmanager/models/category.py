# lotmanager/models/category.py
"""
Vehicle categories (reference data).
Categories sharing a capacity_group share one capacity ceiling and one pool of spaces.
"""

from sqlalchemy import Column, Integer, String
from lotmanager.database import Base


class VehicleCategory(Base):
    __tablename__ = "vehicle_categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(50), nullable=False, unique=True)
    capacity_group = Column(String(30), nullable=False, index=True)  # car | motorcycle

    def __repr__(self):
        return f"<VehicleCategory {self.id} {self.name} group={self.capacity_group}>"
