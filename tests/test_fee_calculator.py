"""Unit tests for the fee calculator — rounding rules per billing mode."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from decimal import Decimal
from lotmanager.services.fee_calculator import TariffTerms, compute_amount, emergency_tariff


def terms(mode, rate, fraction=None):
    return TariffTerms(billing_mode=mode, rate=rate, fraction_minutes=fraction)


class TestFeeCalculator:
    def test_hour_rounds_up_one_minute_past(self):
        assert compute_amount(61, terms("PER_HOUR", 1000)) == 2000

    def test_exact_hour_is_one_unit(self):
        assert compute_amount(60, terms("PER_HOUR", 1000)) == 1000

    def test_zero_minutes_per_minute_is_free(self):
        assert compute_amount(0, terms("PER_MINUTE", 100)) == 0

    def test_per_minute(self):
        assert compute_amount(37, terms("PER_MINUTE", 100)) == 3700

    def test_per_day_rounds_up(self):
        assert compute_amount(1440, terms("PER_DAY", 20000)) == 20000
        assert compute_amount(1441, terms("PER_DAY", 20000)) == 40000

    def test_fraction_defaults_to_fifteen_minutes(self):
        assert compute_amount(16, terms("PER_FRACTION", 500)) == 1000

    def test_fraction_uses_tariff_size(self):
        assert compute_amount(31, terms("PER_FRACTION", 500, fraction=10)) == 2000

    def test_unknown_mode_bills_per_minute(self):
        assert compute_amount(5, terms("PER_WEEK", 100)) == 500

    @pytest.mark.parametrize("rate", [-50, "abc", None, "NaN", True])
    def test_invalid_rate_is_zero(self, rate):
        assert compute_amount(90, terms("PER_HOUR", rate)) == 0

    def test_amount_has_two_decimals(self):
        amount = compute_amount(3, terms("PER_MINUTE", "33.335"))
        assert amount == Decimal("100.01")
        assert amount.as_tuple().exponent == -2

    def test_emergency_tariff_is_never_zero(self):
        assert compute_amount(10, emergency_tariff()) == 1000
