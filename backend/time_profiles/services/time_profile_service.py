"""Time profile mutations.

Every write follows the same shape:
- snapshot the profile before the change
- apply the change and flush
- let ``rollup_triggers`` compare the snapshots
- enqueue at most one rollup job in the same session
- commit once, so the job exists only if the mutation does
"""
import logging
from typing import Any, Iterable, Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from time_profiles.config import settings
from time_profiles.models.time_profile import (
    ALL_DAYS,
    ALL_HOURS,
    DEFAULT_TZ,
    ProfileType,
    TimeProfile,
    TimeProfileValidationError,
)
from time_profiles.repository import TimeProfileRepository
from time_profiles.services import rollup_triggers
from time_profiles.services.job_queue import DatabaseJobQueue, JobQueue

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("description", "days", "hours", "tz", "profile_type", "profile_key", "rollup_daily_metrics")


def _check_ownership(profile: TimeProfile) -> None:
    """A user profile must name its owner."""
    if profile.profile_type == ProfileType.user and not profile.profile_key:
        raise TimeProfileValidationError("profile_key is required for user profiles")


def _get_or_404(repo: TimeProfileRepository, profile_id: int) -> TimeProfile:
    profile = repo.find_by_id(profile_id)
    if not profile:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Time profile not found")
    return profile


def create_time_profile(
    db: Session,
    description: Optional[str] = None,
    days: Optional[Iterable[int]] = None,
    hours: Optional[Iterable[int]] = None,
    tz: Optional[str] = None,
    profile_type: Optional[str] = None,
    profile_key: Optional[Any] = None,
    rollup_daily_metrics: bool = False,
    profile_id: Optional[int] = None,
    queue: Optional[JobQueue] = None,
) -> TimeProfile:
    """Create a profile and queue a rebuild when it takes part in daily rollups."""
    queue = queue or DatabaseJobQueue(db)
    repo = TimeProfileRepository(db)

    attrs: dict[str, Any] = {
        "description": description,
        "tz": tz,
        "profile_type": profile_type,
        "profile_key": profile_key,
        "rollup_daily_metrics": rollup_daily_metrics,
    }
    if days is not None:
        attrs["days"] = list(days)
    if hours is not None:
        attrs["hours"] = list(hours)
    attrs["id"] = profile_id if profile_id is not None else repo.next_id(settings.REGION_NUMBER)

    profile = TimeProfile(**attrs)
    _check_ownership(profile)
    repo.save(profile)

    rollup_triggers.schedule(queue, rollup_triggers.on_create(rollup_triggers.profile_snapshot(profile)))
    db.commit()
    db.refresh(profile)
    logger.info("Created time profile %s (%s)", profile.id, profile.description)
    return profile


def update_time_profile(
    db: Session,
    profile_id: int,
    updates: dict[str, Any],
    queue: Optional[JobQueue] = None,
) -> TimeProfile:
    """Apply ``updates`` and queue a rebuild or teardown if the rollup inputs changed."""
    queue = queue or DatabaseJobQueue(db)
    repo = TimeProfileRepository(db)
    profile = _get_or_404(repo, profile_id)

    unknown = set(updates) - set(UPDATABLE_FIELDS)
    if unknown:
        raise TimeProfileValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")

    before = rollup_triggers.profile_snapshot(profile)
    try:
        for field, value in updates.items():
            setattr(profile, field, value)
        _check_ownership(profile)
    except TimeProfileValidationError:
        db.rollback()
        raise
    repo.save(profile)

    after = rollup_triggers.profile_snapshot(profile)
    rollup_triggers.schedule(queue, rollup_triggers.on_update(before, after))
    db.commit()
    db.refresh(profile)
    logger.info("Updated time profile %s", profile_id)
    return profile


def delete_time_profile(
    db: Session,
    profile_id: int,
    queue: Optional[JobQueue] = None,
) -> Optional[rollup_triggers.ScheduledAction]:
    """Delete a profile; rollups it fed are torn down asynchronously."""
    queue = queue or DatabaseJobQueue(db)
    repo = TimeProfileRepository(db)
    profile = _get_or_404(repo, profile_id)

    before = rollup_triggers.profile_snapshot(profile)
    repo.delete(profile)
    action = rollup_triggers.schedule(queue, rollup_triggers.on_destroy(before))
    db.commit()
    logger.info("Deleted time profile %s", profile_id)
    return action


def _seeded_profile(db: Session) -> Optional[TimeProfile]:
    return db.query(TimeProfile).filter(TimeProfile.system_default.is_(True)).first()


def seed(db: Session) -> Optional[TimeProfile]:
    """Insert the system default profile if the table is empty.

    Concurrent first-time callers race on the unique ``system_default``
    column; the loser rolls back and gets the winner's row.
    """
    repo = TimeProfileRepository(db)
    if repo.count() > 0:
        return _seeded_profile(db)

    profile = TimeProfile(
        id=repo.next_id(settings.REGION_NUMBER),
        description=DEFAULT_TZ,
        days=list(ALL_DAYS),
        hours=list(ALL_HOURS),
        tz=DEFAULT_TZ,
        profile_type=ProfileType.global_,
        rollup_daily_metrics=False,
        system_default=True,
    )
    try:
        db.add(profile)
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.info("Default time profile already seeded by another process")
        return _seeded_profile(db)

    db.refresh(profile)
    logger.info("Seeded default time profile %s (%s)", profile.id, DEFAULT_TZ)
    return profile
