# lotmanager/services/reports.py
"""
Administrative read models: occupancy per capacity group, today's dashboard,
paginated trip history. Everything is computed from live rows on each call.
"""

import math
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from lotmanager.repositories.spaces import SpaceRepository
from lotmanager.repositories.trips import TripRepository
from lotmanager.services.capacity_policy import CapacityPolicy, default_policy
from lotmanager.utils.time_utils import local_date, today_bounds_utc, utcnow


def occupancy(db: Session, policy: CapacityPolicy = None) -> list[dict]:
    policy = policy or default_policy()
    trips = TripRepository(db)
    spaces = SpaceRepository(db)
    result = []
    for group in policy.groups.values():
        active = trips.count_open_by_category(group.category_ids)
        result.append({
            "group": group.name,
            "capacity": group.capacity,
            "active": active,
            "available_spaces": spaces.count_by_category(group.space_category_id, available=True),
            "inventory": spaces.count_by_category(group.space_category_id),
            "occupancy_percent": round(active / group.capacity * 100, 1) if group.capacity else 0,
            "is_full": active >= group.capacity,
        })
    return result


def dashboard_stats(db: Session, policy: CapacityPolicy = None, now: Optional[datetime] = None) -> dict:
    policy = policy or default_policy()
    now = now or utcnow()
    start, end = today_bounds_utc(now)
    trips = TripRepository(db)

    income = trips.sum_closed_amount_between(start, end)
    all_categories = [cid for group in policy.groups.values() for cid in group.category_ids]
    active = trips.count_open_by_category(all_categories)
    total_capacity = sum(group.capacity for group in policy.groups.values())
    return {
        "income": income,
        "active": active,
        "total_capacity": total_capacity,
        "occupancy": round(active / total_capacity * 100) if total_capacity else 0,
        "date": local_date(now).isoformat(),
    }


def trip_history(db: Session, page: int = 1, limit: int = 50) -> dict:
    page = max(1, page)
    limit = max(1, min(limit, 500))
    total, rows = TripRepository(db).count_and_page(page, limit)
    return {
        "data": rows,
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": math.ceil(total / limit) if total else 0,
        },
    }
