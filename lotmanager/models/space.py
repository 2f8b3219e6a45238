# lotmanager/models/space.py
"""
Physical parking spaces.
`available` is the single source of truth for occupancy: a space is unavailable
exactly while an OPEN trip holds it. Spaces are never deleted, only toggled.
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from lotmanager.database import Base


class Space(Base):
    __tablename__ = "spaces"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(30), unique=True, nullable=False)          # e.g. A-12, GEN-3-9f2c1a
    category_id = Column(Integer, ForeignKey("vehicle_categories.id"), nullable=False, index=True)
    available = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True))

    def __repr__(self):
        return f"<Space {self.id} {self.code} available={self.available}>"
