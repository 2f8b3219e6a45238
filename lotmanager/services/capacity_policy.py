# lotmanager/services/capacity_policy.py
"""
Capacity Policy — per-group ceilings and live occupancy accounting.

Occupancy is recomputed from OPEN trips on every call (no stored counter).
The check is a fast, friendly reject; the atomic space claim is what actually
prevents double allocation. The ceiling also bounds auto-provisioning.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from sqlalchemy.orm import Session

from lotmanager.config import settings
from lotmanager.repositories.trips import TripRepository
from lotmanager.services.results import ALLOWED, Allowed, Rejected, RejectionKind
from lotmanager.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CapacityGroup:
    name: str
    capacity: int
    category_ids: List[int]
    code_prefix: str = "P"

    @property
    def space_category_id(self) -> int:
        """Spaces of a group are registered under its first category."""
        return self.category_ids[0]


@dataclass
class CapacityPolicy:
    groups: Dict[str, CapacityGroup] = field(default_factory=dict)

    @classmethod
    def from_settings(cls, cfg=None) -> "CapacityPolicy":
        cfg = cfg or settings
        groups = {
            name: CapacityGroup(
                name=name,
                capacity=int(group["capacity"]),
                category_ids=list(group["categories"]),
                code_prefix=group.get("prefix", "P"),
            )
            for name, group in cfg.CAPACITY_GROUPS.items()
        }
        return cls(groups=groups)

    def group_for(self, category_id: int) -> Optional[CapacityGroup]:
        for group in self.groups.values():
            if category_id in group.category_ids:
                return group
        return None

    def active_count(self, db: Session, category_id: int) -> int:
        group = self.group_for(category_id)
        if group is None:
            return 0
        return TripRepository(db).count_open_by_category(group.category_ids)

    def check_capacity(self, db: Session, category_id: int) -> Union[Allowed, Rejected]:
        group = self.group_for(category_id)
        if group is None:
            return Rejected(RejectionKind.INVALID_CATEGORY, f"Unknown vehicle category {category_id}")

        active = TripRepository(db).count_open_by_category(group.category_ids)
        if active >= group.capacity:
            logger.info(f"[CAPACITY] {group.name} full: {active}/{group.capacity}")
            return Rejected(
                RejectionKind.FULL_CAPACITY,
                f"No spaces left for {group.name} ({active}/{group.capacity})",
            )
        return ALLOWED


def default_policy() -> CapacityPolicy:
    return CapacityPolicy.from_settings(settings)
