# lotmanager/services/space_registry.py
"""
Space Registry — atomic claim/release of physical spaces.

claim() is a compare-and-set on `available` executed by the store as one
statement, so two racing requests can never both win the same space.
Nothing here blocks or loops beyond the bounded candidate scan; the caller
decides whether to provision when every candidate is taken.
"""

import asyncio
import secrets
from typing import Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.attributes import set_committed_value

from lotmanager.config import settings
from lotmanager.models.space import Space
from lotmanager.repositories.spaces import SpaceRepository
from lotmanager.services.results import Rejected, RejectionKind
from lotmanager.utils.logger import get_logger

logger = get_logger(__name__)


def claim(db: Session, space_id: int) -> Union[Space, Rejected]:
    repo = SpaceRepository(db)
    space = repo.find_by_id(space_id)
    if space is None:
        return Rejected(RejectionKind.NOT_FOUND, f"Space {space_id} does not exist")

    if not repo.conditional_claim(space_id):
        logger.debug(f"[SPACES] Lost claim on space {space_id}")
        return Rejected(RejectionKind.ALREADY_OCCUPIED, f"Space {space_id} is already occupied")

    # The winning UPDATE already set it; reflect that without reloading the row
    set_committed_value(space, "available", False)
    return space


def claim_first_available(db: Session, category_id: int, limit: int = None) -> Union[Space, Rejected]:
    """Try candidates in ascending id order; a lost race just moves on to the next one."""
    repo = SpaceRepository(db)
    candidates = repo.find_available_by_category(category_id, limit or settings.SPACE_CANDIDATE_LIMIT)
    candidate_ids = [space.id for space in candidates]

    for space_id in candidate_ids:
        result = claim(db, space_id)
        if not isinstance(result, Rejected):
            return result

    return Rejected(
        RejectionKind.NO_SPACE_AVAILABLE,
        f"No free space for category {category_id}",
    )


def generate_space_code(category_id: int) -> str:
    return f"GEN-{category_id}-{secrets.token_hex(3)}"


def provision(db: Session, category_id: int, code: str = None, ceiling: int = None) -> Union[Space, Rejected]:
    """
    Create a new space already claimed, so it is never observable as free.
    With a ceiling the store refuses the insert once the category already holds that many spaces.
    """
    space = SpaceRepository(db).insert_claimed(category_id, code or generate_space_code(category_id), ceiling)
    if space is None:
        logger.warning(f"[SPACES] Not provisioning for category {category_id}: inventory at ceiling {ceiling}")
        return Rejected(RejectionKind.NO_SPACE_AVAILABLE, f"No free space for category {category_id}")
    logger.info(f"[SPACES] Provisioned space {space.code} (id={space.id}) for category {category_id}")
    return space


def release(db: Session, space_id: int) -> None:
    """Mark a space free. Releasing a free space is a no-op."""
    SpaceRepository(db).set_available(space_id, True)
    logger.debug(f"[SPACES] Released space {space_id}")


async def release_with_retry(db: Session, space_id: int, attempts: int = None, delay: float = None) -> bool:
    """
    Release with a bounded number of retries on store errors.
    Returns False (and logs an inconsistency) if the space could not be freed.
    """
    attempts = attempts or settings.RELEASE_RETRY_ATTEMPTS
    delay = settings.RELEASE_RETRY_DELAY_SECONDS if delay is None else delay

    for attempt in range(1, attempts + 1):
        try:
            release(db, space_id)
            return True
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning(f"[SPACES] Release of space {space_id} failed (attempt {attempt}/{attempts}): {e}")
            if attempt < attempts:
                await asyncio.sleep(delay)
                delay *= 2

    logger.error(
        f"[SPACES] Space {space_id} left unavailable with no owning trip — manual release required"
    )
    return False
