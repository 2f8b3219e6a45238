"""Unit tests for the capacity policy (live occupancy vs. configured ceilings)."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from conftest import NOW
from lotmanager.models.trip import Trip, TripStatus
from lotmanager.services.capacity_policy import CapacityPolicy
from lotmanager.services.results import Allowed, Rejected, RejectionKind


def open_trip(db, plate, category_id, space_id, status=TripStatus.OPEN):
    db.add(Trip(plate=plate, category_id=category_id, space_id=space_id, entered_at=NOW,
                status=status, opened_by="test"))
    db.commit()


class TestCapacityPolicy:
    def test_allowed_when_below_ceiling(self, seeded_db, policy):
        assert isinstance(policy.check_capacity(seeded_db, 3), Allowed)

    def test_full_when_open_trips_reach_ceiling(self, seeded_db, policy):
        open_trip(seeded_db, "XYZ12A", 3, 4)
        result = policy.check_capacity(seeded_db, 3)
        assert isinstance(result, Rejected)
        assert result.kind == RejectionKind.FULL_CAPACITY

    def test_closed_trips_do_not_count(self, seeded_db, policy):
        open_trip(seeded_db, "XYZ12A", 3, 4, status=TripStatus.CLOSED)
        assert isinstance(policy.check_capacity(seeded_db, 3), Allowed)

    def test_categories_in_a_group_share_the_ceiling(self, seeded_db, policy):
        open_trip(seeded_db, "AAA111", 1, 1)
        open_trip(seeded_db, "BBB222", 2, 2)
        open_trip(seeded_db, "CCC333", 1, 3)
        result = policy.check_capacity(seeded_db, 2)
        assert result.kind == RejectionKind.FULL_CAPACITY
        assert policy.active_count(seeded_db, 1) == 3

    def test_unknown_category(self, seeded_db, policy):
        result = policy.check_capacity(seeded_db, 42)
        assert result.kind == RejectionKind.INVALID_CATEGORY

    def test_from_settings(self):
        class Cfg:
            CAPACITY_GROUPS = {"car": {"capacity": 5, "categories": [1, 2], "prefix": "A"}}

        policy = CapacityPolicy.from_settings(Cfg())
        group = policy.group_for(2)
        assert group.capacity == 5
        assert group.space_category_id == 1
        assert policy.group_for(3) is None
