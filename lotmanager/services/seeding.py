# lotmanager/services/seeding.py
"""
Bulk seed of reference categories and the fixed space inventory.
Cars get A-1..A-<capacity>, motorcycles M-1..M-<capacity>, all free.
Refuses to touch an inventory that already has spaces.
"""

from sqlalchemy.orm import Session

from lotmanager.models.category import VehicleCategory
from lotmanager.models.space import Space
from lotmanager.repositories.categories import CategoryRepository
from lotmanager.repositories.spaces import SpaceRepository
from lotmanager.services.capacity_policy import CapacityPolicy, default_policy
from lotmanager.utils.logger import get_logger
from lotmanager.utils.time_utils import utcnow

logger = get_logger(__name__)

DEFAULT_CATEGORIES = {1: "Sedan", 2: "SUV", 3: "Motorcycle"}


def seed_categories(db: Session, policy: CapacityPolicy = None) -> int:
    policy = policy or default_policy()
    categories = []
    for group in policy.groups.values():
        for category_id in group.category_ids:
            name = DEFAULT_CATEGORIES.get(category_id, f"Category {category_id}")
            categories.append(VehicleCategory(id=category_id, name=name, capacity_group=group.name))
    added = CategoryRepository(db).add_missing(categories)
    logger.info(f"[SEED] {added} vehicle categories added")
    return added


def seed_spaces(db: Session, policy: CapacityPolicy = None) -> int:
    """Returns the number of spaces created (0 when the inventory already exists)."""
    policy = policy or default_policy()
    repo = SpaceRepository(db)
    if repo.exists_any():
        logger.warning("[SEED] Spaces already exist — skipping. Clear the table first to reseed.")
        return 0

    now = utcnow()
    spaces = []
    for group in policy.groups.values():
        for i in range(1, group.capacity + 1):
            spaces.append(Space(
                code=f"{group.code_prefix}-{i}",
                category_id=group.space_category_id,
                available=True,
                created_at=now,
            ))
        logger.info(f"[SEED] {group.capacity} spaces for {group.name} "
                    f"({group.code_prefix}-1 to {group.code_prefix}-{group.capacity})")

    repo.bulk_insert(spaces)
    logger.info(f"[SEED] {len(spaces)} spaces created")
    return len(spaces)
