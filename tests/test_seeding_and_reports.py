"""Tests for inventory seeding and the admin reports."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import timedelta
from decimal import Decimal

from conftest import NOW, add_tariff
from lotmanager.repositories.spaces import SpaceRepository
from lotmanager.services import reports
from lotmanager.services.seeding import seed_categories, seed_spaces
from lotmanager.services.trip_lifecycle import register_entry, register_exit


class TestSeeding:
    def test_fixed_inventory(self, db, policy):
        seed_categories(db, policy)
        assert seed_spaces(db, policy) == 4
        codes = [s.code for s in SpaceRepository(db).list_all()]
        assert codes == ["A-1", "A-2", "A-3", "M-1"]
        assert all(s.available for s in SpaceRepository(db).list_all())

    def test_reseed_is_refused(self, seeded_db, policy):
        assert seed_spaces(seeded_db, policy) == 0
        assert len(SpaceRepository(seeded_db).list_all()) == 4

    def test_categories_idempotent(self, seeded_db, policy):
        assert seed_categories(seeded_db, policy) == 0


class TestReports:
    @pytest.mark.asyncio
    async def test_dashboard_counts_today_income_and_active(self, seeded_db, policy):
        add_tariff(seeded_db, category_id=1, billing_mode="PER_MINUTE", rate="100")
        await register_entry(seeded_db, "ABC123", 1, policy=policy, now=NOW - timedelta(minutes=30))
        await register_entry(seeded_db, "DEF456", 1, policy=policy, now=NOW - timedelta(minutes=10))
        await register_exit(seeded_db, "ABC123", now=NOW - timedelta(minutes=20))

        stats = reports.dashboard_stats(seeded_db, policy, now=NOW)
        assert stats["income"] == Decimal("1000")
        assert stats["active"] == 1
        assert stats["total_capacity"] == 4
        assert stats["occupancy"] == 25
        assert stats["date"] == "2026-03-10"

    @pytest.mark.asyncio
    async def test_occupancy_per_group(self, seeded_db, policy):
        await register_entry(seeded_db, "XYZ12A", 3, policy=policy, now=NOW)
        by_group = {row["group"]: row for row in reports.occupancy(seeded_db, policy)}

        assert by_group["motorcycle"]["active"] == 1
        assert by_group["motorcycle"]["is_full"] is True
        assert by_group["motorcycle"]["available_spaces"] == 0
        assert by_group["car"]["available_spaces"] == 3
        assert by_group["car"]["occupancy_percent"] == 0

    @pytest.mark.asyncio
    async def test_history_pagination(self, seeded_db, policy):
        for i, plate in enumerate(["AAA111", "BBB222", "CCC333"]):
            await register_entry(seeded_db, plate, 1, policy=policy, now=NOW + timedelta(minutes=i))

        page = reports.trip_history(seeded_db, page=1, limit=2)
        assert page["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}
        assert [t.plate for t in page["data"]] == ["CCC333", "BBB222"]
        assert [t.plate for t in reports.trip_history(seeded_db, page=2, limit=2)["data"]] == ["AAA111"]
