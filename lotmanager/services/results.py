# lotmanager/services/results.py
"""
Tagged results returned by the allocation and billing core.
Operations return either their success payload or a Rejected; they never raise
business errors across the core boundary. Callers branch with isinstance(..., Rejected).
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional


class RejectionKind(str, Enum):
    MISSING_FIELDS = "MISSING_FIELDS"
    INVALID_PLATE_FORMAT = "INVALID_PLATE_FORMAT"
    INVALID_CATEGORY = "INVALID_CATEGORY"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"
    FULL_CAPACITY = "FULL_CAPACITY"
    INVALID_SPACE = "INVALID_SPACE"
    SPACE_OCCUPIED = "SPACE_OCCUPIED"
    NO_SPACE_AVAILABLE = "NO_SPACE_AVAILABLE"
    ALREADY_OCCUPIED = "ALREADY_OCCUPIED"    # Space Registry level; mapped to SPACE_OCCUPIED by callers
    NOT_FOUND = "NOT_FOUND"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


@dataclass(frozen=True)
class Rejected:
    kind: RejectionKind
    message: str


class Allowed:
    """Capacity check passed."""

    def __repr__(self):
        return "Allowed()"


ALLOWED = Allowed()


@dataclass(frozen=True)
class ExitResult:
    trip: object                  # the CLOSED Trip row
    duration_minutes: int
    amount: Decimal
    tariff_name: str


@dataclass(frozen=True)
class ExitPreview:
    plate: str
    duration_minutes: int
    amount: Decimal
    tariff_name: str
    tariff_id: Optional[int]
