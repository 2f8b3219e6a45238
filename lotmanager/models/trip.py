# lotmanager/models/trip.py
"""
Trips — one row per parking stay.
Created OPEN on entry, closed exactly once on exit (CLOSED is terminal).
The partial unique index enforces one OPEN trip per plate at the store level.
"""

from sqlalchemy import Column, Integer, String, DateTime, Numeric, ForeignKey, Index, text
from lotmanager.database import Base


class TripStatus:
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class Trip(Base):
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, autoincrement=True)
    plate = Column(String(20), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("vehicle_categories.id"), nullable=False, index=True)
    space_id = Column(Integer, ForeignKey("spaces.id"), nullable=False)
    tariff_id = Column(Integer, ForeignKey("tariffs.id"))    # Snapshot at entry; tariff actually used after exit
    entered_at = Column(DateTime(timezone=True), nullable=False, index=True)
    exited_at = Column(DateTime(timezone=True))
    status = Column(String(10), nullable=False, default=TripStatus.OPEN, index=True)
    duration_minutes = Column(Integer)       # Set on exit
    amount = Column(Numeric(12, 2))          # Set on exit
    opened_by = Column(String(100), nullable=False)
    closed_by = Column(String(100))

    __table_args__ = (
        Index(
            "uq_trips_open_plate",
            "plate",
            unique=True,
            postgresql_where=text("status = 'OPEN'"),
            sqlite_where=text("status = 'OPEN'"),
        ),
    )

    def __repr__(self):
        return f"<Trip {self.id} plate={self.plate} status={self.status} space={self.space_id}>"
