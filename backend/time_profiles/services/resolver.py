"""Read-only time profile lookups. Nothing here schedules work."""
import logging
from typing import Any, Optional

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from time_profiles.models.time_profile import DEFAULT_TZ, ProfileType, TimeProfile
from time_profiles.region import id_range, region_of
from time_profiles.repository import TimeProfileRepository

logger = logging.getLogger(__name__)


def _visible_to(user_key: Any):
    """Global profiles plus the user's own."""
    return or_(
        TimeProfile.profile_type == ProfileType.global_,
        and_(TimeProfile.profile_type == ProfileType.user, TimeProfile.profile_key == str(user_key)),
    )


def _tz_equals(tz: Optional[str]):
    return TimeProfile.tz.is_(None) if tz is None else TimeProfile.tz == tz


def profiles_for_user(db: Session, user_key: Any, region_number: int) -> list[TimeProfile]:
    """Profiles a user can pick from in one region."""
    low, high = id_range(region_number)
    return TimeProfileRepository(db).find_all(_visible_to(user_key), TimeProfile.id.between(low, high))


def profile_for_user_tz(db: Session, user_key: Any, tz: str) -> Optional[TimeProfile]:
    """The rollup profile a user's reports should use for ``tz``.

    Returns None unless exactly one profile qualifies.
    """
    candidates = TimeProfileRepository(db).find_all(
        TimeProfile.rollup_daily_metrics.is_(True),
        TimeProfile.tz == tz,
        _visible_to(user_key),
    )
    if len(candidates) > 1:
        logger.warning(
            "Ambiguous time profile for user %s tz %s: %s",
            user_key, tz, [p.id for p in candidates],
        )
        return None
    return candidates[0] if candidates else None


def profile_for_each_region(db: Session, profile: TimeProfile) -> list[TimeProfile]:
    """One rollup-enabled replica of ``profile`` per region, lowest id first."""
    if not profile.rollup_daily_metrics:
        return []

    replicas = TimeProfileRepository(db).find_all(
        TimeProfile.rollup_daily_metrics.is_(True),
        _tz_equals(profile.tz),
    )
    by_region: dict[int, TimeProfile] = {}
    for candidate in replicas:
        if list(candidate.days) != list(profile.days) or list(candidate.hours) != list(profile.hours):
            continue
        by_region.setdefault(region_of(candidate.id), candidate)
    return list(by_region.values())


def all_timezones(db: Session) -> set[str]:
    rows = db.query(TimeProfile.tz).filter(TimeProfile.tz.isnot(None)).distinct().all()
    return {tz for (tz,) in rows}


def find_all_with_entire_tz(db: Session) -> list[TimeProfile]:
    return [p for p in TimeProfileRepository(db).find_all() if p.is_entire_timezone()]


def find_all_by_tz(db: Session, tz: str) -> list[TimeProfile]:
    """Rollup-enabled profiles for one timezone."""
    return TimeProfileRepository(db).find_all(TimeProfile.rollup_daily_metrics.is_(True), TimeProfile.tz == tz)


def default_time_profile(db: Session, tz: str = DEFAULT_TZ) -> Optional[TimeProfile]:
    """First rollup-enabled, whole-week profile for ``tz``; unset tz counts as the default."""
    candidates = TimeProfileRepository(db).find_all(TimeProfile.rollup_daily_metrics.is_(True))
    for profile in candidates:
        if profile.is_entire_timezone() and profile.tz_or_default() == tz:
            return profile
    return None
