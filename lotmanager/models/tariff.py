# lotmanager/models/tariff.py
"""
Fee schedules per vehicle category.
Several tariffs may exist per category over time; only active ones are picked for new trips.
A trip keeps the id of the tariff in effect at entry even if it is deactivated later.
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Numeric, ForeignKey
from lotmanager.database import Base


class BillingMode:
    PER_MINUTE = "PER_MINUTE"
    PER_HOUR = "PER_HOUR"
    PER_DAY = "PER_DAY"
    PER_FRACTION = "PER_FRACTION"

    ALL = (PER_MINUTE, PER_HOUR, PER_DAY, PER_FRACTION)


class Tariff(Base):
    __tablename__ = "tariffs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_id = Column(Integer, ForeignKey("vehicle_categories.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    billing_mode = Column(String(20), nullable=False)
    fraction_minutes = Column(Integer)        # Only meaningful for PER_FRACTION
    rate = Column(Numeric(12, 2), nullable=False)
    active = Column(Boolean, default=True, nullable=False, index=True)
    valid_from = Column(DateTime(timezone=True), nullable=False)
    valid_to = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True))

    def __repr__(self):
        return f"<Tariff {self.id} {self.name} {self.billing_mode}@{self.rate} active={self.active}>"
