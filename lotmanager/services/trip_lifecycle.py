# lotmanager/services/trip_lifecycle.py
"""
Trip Lifecycle Manager — the entry/exit state machine.

  registerEntry: plate check → duplicate check → capacity → tariff snapshot
                 → claim (or provision) a space → insert OPEN trip.
                 If the insert fails the claimed space is released before returning.
  registerExit:  find OPEN trip → duration + fee → close (billing is final)
                 → release space. A failed release is logged, never undone.
  previewExit:   same numbers as registerExit, no writes.

Every outcome is a tagged result; store errors come back as STORE_UNAVAILABLE.
"""

import re
from datetime import datetime
from typing import List, Optional, Tuple, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from lotmanager.config import settings
from lotmanager.models.space import Space
from lotmanager.models.trip import Trip, TripStatus
from lotmanager.repositories.spaces import SpaceRepository
from lotmanager.repositories.trips import TripRepository
from lotmanager.services import space_registry, tariff_resolver
from lotmanager.services.capacity_policy import CapacityGroup, CapacityPolicy, default_policy
from lotmanager.services.fee_calculator import compute_amount, emergency_tariff
from lotmanager.services.results import ExitPreview, ExitResult, Rejected, RejectionKind
from lotmanager.utils.logger import get_logger
from lotmanager.utils.time_utils import elapsed_minutes, utcnow

logger = get_logger(__name__)


def normalize_plate(plate: Optional[str]) -> str:
    if not plate:
        return ""
    return re.sub(r"[\s\-]", "", str(plate)).upper()


def is_valid_plate(plate: str, pattern: str = None) -> bool:
    return bool(re.fullmatch(pattern or settings.PLATE_PATTERN, plate))


def _store_unavailable(db: Session, action: str, error: Exception) -> Rejected:
    db.rollback()
    logger.error(f"[TRIPS] Store failure during {action}: {error}", exc_info=True)
    return Rejected(RejectionKind.STORE_UNAVAILABLE, f"Storage unavailable during {action}")


def _resolve_space(
    db: Session, group: CapacityGroup, requested_space_id: Optional[int]
) -> Union[Space, Rejected]:
    if requested_space_id is not None:
        existing = SpaceRepository(db).find_by_id(requested_space_id)
        if existing is None:
            return Rejected(RejectionKind.INVALID_SPACE, f"Space {requested_space_id} does not exist")
        if existing.category_id not in group.category_ids:
            return Rejected(
                RejectionKind.INVALID_SPACE,
                f"Space {existing.code} is not a {group.name} space",
            )

        result = space_registry.claim(db, requested_space_id)
        if isinstance(result, Rejected):
            if result.kind == RejectionKind.ALREADY_OCCUPIED:
                return Rejected(RejectionKind.SPACE_OCCUPIED, f"Space {existing.code} is already occupied")
            return Rejected(RejectionKind.INVALID_SPACE, f"Space {requested_space_id} does not exist")
        return result

    result = space_registry.claim_first_available(db, group.space_category_id)
    if not isinstance(result, Rejected):
        return result

    # Provisioning only tops the inventory up to the ceiling, never past it
    return space_registry.provision(db, group.space_category_id, ceiling=group.capacity)


async def register_entry(
    db: Session,
    plate: str,
    category_id: int,
    requested_space_id: Optional[int] = None,
    actor_id: Optional[str] = None,
    policy: Optional[CapacityPolicy] = None,
    now: Optional[datetime] = None,
) -> Union[Trip, Rejected]:
    plate = normalize_plate(plate)
    if not plate or category_id is None:
        return Rejected(RejectionKind.MISSING_FIELDS, "Plate and vehicle category are required")
    if not is_valid_plate(plate):
        logger.info(f"[ENTRY] Rejected plate with invalid format: {plate}")
        return Rejected(RejectionKind.INVALID_PLATE_FORMAT, f"Plate {plate} has an invalid format")

    policy = policy or default_policy()
    actor_id = actor_id or settings.DEFAULT_OPERATOR_ID
    trips = TripRepository(db)

    try:
        if trips.find_open_by_plate(plate) is not None:
            logger.info(f"[ENTRY] Duplicate entry for plate {plate}")
            return Rejected(RejectionKind.DUPLICATE_ENTRY, f"Vehicle {plate} already has an active entry")

        verdict = policy.check_capacity(db, category_id)
        if isinstance(verdict, Rejected):
            return verdict
        group = policy.group_for(category_id)

        # No active tariff is not fatal; exit falls back to the current or emergency rate
        tariff_id = tariff_resolver.resolve_for_entry(db, category_id)
        if tariff_id is None:
            logger.warning(f"[ENTRY] No active tariff for category {category_id}; plate {plate} enters without snapshot")

        space = _resolve_space(db, group, requested_space_id)
    except SQLAlchemyError as e:
        return _store_unavailable(db, "entry", e)

    if isinstance(space, Rejected):
        logger.info(f"[ENTRY] Plate {plate} rejected: {space.kind.value}")
        return space

    space_id, space_code = space.id, space.code
    trip = Trip(
        plate=plate,
        category_id=category_id,
        space_id=space_id,
        tariff_id=tariff_id,
        entered_at=now or utcnow(),
        status=TripStatus.OPEN,
        opened_by=actor_id,
    )
    try:
        trips.insert(trip)
    except IntegrityError:
        db.rollback()
        await space_registry.release_with_retry(db, space_id)
        logger.info(f"[ENTRY] Concurrent entry for plate {plate} lost on insert; space {space_code} released")
        return Rejected(RejectionKind.DUPLICATE_ENTRY, f"Vehicle {plate} already has an active entry")
    except SQLAlchemyError as e:
        rejected = _store_unavailable(db, "entry", e)
        await space_registry.release_with_retry(db, space_id)
        return rejected

    logger.info(f"[ENTRY] Plate={plate} | Category={category_id} | Space={space_code} | Tariff={tariff_id}")
    return trip


def _effective_tariff(db: Session, trip: Trip) -> Tuple[object, Optional[int]]:
    snapshot = tariff_resolver.resolve_snapshot(db, trip.tariff_id)
    if snapshot is not None:
        return snapshot, snapshot.id

    current = tariff_resolver.resolve_current(db, trip.category_id)
    if current is not None:
        logger.info(f"[EXIT] Trip {trip.id} has no usable snapshot; using current tariff {current.id}")
        return current, current.id

    logger.warning(f"[EXIT] No tariff for category {trip.category_id}; applying emergency per-minute rate")
    return emergency_tariff(), None


def _quote(db: Session, trip: Trip, now: datetime):
    duration = elapsed_minutes(trip.entered_at, now)
    tariff, tariff_id = _effective_tariff(db, trip)
    amount = compute_amount(duration, tariff)
    return duration, amount, tariff_id, tariff.name


def preview_exit(db: Session, plate: str, now: Optional[datetime] = None) -> Union[ExitPreview, Rejected]:
    plate = normalize_plate(plate)
    try:
        trip = TripRepository(db).find_open_by_plate(plate) if plate else None
        if trip is None:
            return Rejected(RejectionKind.NOT_FOUND, f"No active entry for plate {plate}")
        duration, amount, tariff_id, tariff_name = _quote(db, trip, now or utcnow())
    except SQLAlchemyError as e:
        return _store_unavailable(db, "exit preview", e)

    return ExitPreview(
        plate=plate,
        duration_minutes=duration,
        amount=amount,
        tariff_name=tariff_name,
        tariff_id=tariff_id,
    )


def _closed_copy(trip: Trip, **closing) -> Trip:
    """Detached CLOSED view of a trip, built from values already known rather than a re-read."""
    return Trip(
        id=trip.id,
        plate=trip.plate,
        category_id=trip.category_id,
        space_id=trip.space_id,
        entered_at=trip.entered_at,
        opened_by=trip.opened_by,
        status=TripStatus.CLOSED,
        **closing,
    )


async def register_exit(
    db: Session,
    plate: str,
    actor_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Union[ExitResult, Rejected]:
    plate = normalize_plate(plate)
    if not plate:
        return Rejected(RejectionKind.MISSING_FIELDS, "Plate is required")

    actor_id = actor_id or settings.DEFAULT_OPERATOR_ID
    now = now or utcnow()
    trips = TripRepository(db)

    try:
        trip = trips.find_open_by_plate(plate)
        if trip is None:
            return Rejected(RejectionKind.NOT_FOUND, f"No active entry for plate {plate}")

        duration, amount, tariff_id, tariff_name = _quote(db, trip, now)
        closed = trips.close_by_id(
            trip.id,
            exited_at=now,
            duration_minutes=duration,
            amount=amount,
            tariff_id=tariff_id,
            closed_by=actor_id,
        )
        if not closed:
            # Another exit closed it between our read and our write
            return Rejected(RejectionKind.NOT_FOUND, f"No active entry for plate {plate}")
    except SQLAlchemyError as e:
        return _store_unavailable(db, "exit", e)

    # The close is committed and billing is final: from here on nothing turns the exit into a rejection
    closed_trip = _closed_copy(trip, exited_at=now, duration_minutes=duration, amount=amount,
                               tariff_id=tariff_id, closed_by=actor_id)
    if not await space_registry.release_with_retry(db, closed_trip.space_id):
        logger.error(f"[EXIT] Trip {closed_trip.id} closed but space {closed_trip.space_id} is still marked occupied")

    logger.info(f"[EXIT] Plate={plate} | {duration} min | Amount={amount} | Tariff={tariff_name}")
    return ExitResult(trip=closed_trip, duration_minutes=duration, amount=amount, tariff_name=tariff_name)


def list_active_trips(db: Session) -> List[Trip]:
    return TripRepository(db).list_open()
