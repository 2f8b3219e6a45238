# lotmanager/services/fee_calculator.py
"""
Fee Calculator — pure (duration, tariff) → amount.

Every mode charges whole started units: one minute into a new hour pays the full hour.
Unknown modes bill per minute. A negative or non-numeric rate yields 0; this never raises.
"""

import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from lotmanager.config import settings
from lotmanager.models.tariff import BillingMode

MINUTES_PER_HOUR = 60
MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True)
class TariffTerms:
    """Minimal tariff shape; ORM Tariff rows are accepted as well."""
    billing_mode: str
    rate: object
    fraction_minutes: Optional[int] = None
    name: str = ""


def _to_rate(value) -> Decimal:
    if isinstance(value, bool):
        return Decimal(0)
    try:
        rate = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return Decimal(0)
    if not rate.is_finite() or rate < 0:
        return Decimal(0)
    return rate


def billable_units(duration_minutes: int, billing_mode: str, fraction_minutes: Optional[int] = None) -> int:
    minutes = max(0, int(duration_minutes))
    if billing_mode == BillingMode.PER_HOUR:
        return math.ceil(minutes / MINUTES_PER_HOUR)
    if billing_mode == BillingMode.PER_DAY:
        return math.ceil(minutes / MINUTES_PER_DAY)
    if billing_mode == BillingMode.PER_FRACTION:
        size = fraction_minutes if fraction_minutes and fraction_minutes > 0 else settings.DEFAULT_FRACTION_MINUTES
        return math.ceil(minutes / size)
    return minutes


def round_money(amount: Decimal, decimals: int = None) -> Decimal:
    decimals = settings.MONEY_DECIMALS if decimals is None else decimals
    quantum = Decimal(1).scaleb(-max(2, decimals))
    return amount.quantize(quantum, rounding=ROUND_HALF_UP)


def compute_amount(duration_minutes: int, tariff) -> Decimal:
    rate = _to_rate(getattr(tariff, "rate", None))
    units = billable_units(
        duration_minutes,
        getattr(tariff, "billing_mode", None),
        getattr(tariff, "fraction_minutes", None),
    )
    amount = Decimal(units) * rate
    if amount < 0:
        amount = Decimal(0)
    return round_money(amount)


def emergency_tariff() -> TariffTerms:
    return TariffTerms(
        billing_mode=BillingMode.PER_MINUTE,
        rate=settings.EMERGENCY_RATE_PER_MINUTE,
        name="Emergency per-minute rate",
    )
