"""TimeProfile ORM model — day/hour/timezone selection for daily rollups."""
import enum
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

import pytz
from sqlalchemy import BigInteger, Boolean, Column, DateTime, Integer, JSON, String, Enum as SAEnum
from sqlalchemy.orm import validates
from sqlalchemy.sql import func

from time_profiles.config import settings
from time_profiles.database import Base
from time_profiles.region import region_of

ALL_DAYS = tuple(range(7))    # Sunday = 0
ALL_HOURS = tuple(range(24))
DEFAULT_TZ = settings.DEFAULT_TZ


class TimeProfileValidationError(ValueError):
    """Raised when a profile attribute is outside its allowed values."""


class ProfileType(str, enum.Enum):
    user = "user"
    global_ = "global"


def _normalize_selector(name: str, values: Iterable[Any], upper: int) -> list[int]:
    if values is None:
        raise TimeProfileValidationError(f"{name} must be a list of integers, got None")
    result = set()
    for value in values:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TimeProfileValidationError(f"{name} must contain integers, got {value!r}")
        if not 0 <= value < upper:
            raise TimeProfileValidationError(f"{name} value {value} is outside 0..{upper - 1}")
        result.add(value)
    return sorted(result)


class TimeProfile(Base):
    __tablename__ = "time_profiles"

    ALL_DAYS = ALL_DAYS
    ALL_HOURS = ALL_HOURS
    DEFAULT_TZ = DEFAULT_TZ

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    description = Column(String(255), nullable=True, index=True)
    days = Column(JSON, nullable=False)
    hours = Column(JSON, nullable=False)
    tz = Column(String(100), nullable=True, index=True)
    profile_type = Column(
        SAEnum(ProfileType, name="profile_type", values_callable=lambda e: [m.value for m in e]),
        nullable=True,
    )
    profile_key = Column(String(255), nullable=True, index=True)
    rollup_daily_metrics = Column(Boolean, nullable=False, default=False)
    # True only on the seeded row; NULL elsewhere so the unique index allows many
    system_default = Column(Boolean, nullable=True, unique=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __init__(self, **kwargs):
        kwargs.setdefault("days", list(ALL_DAYS))
        kwargs.setdefault("hours", list(ALL_HOURS))
        kwargs.setdefault("rollup_daily_metrics", False)
        super().__init__(**kwargs)

    @classmethod
    def default(cls) -> "TimeProfile":
        """An unsaved profile covering the whole week in the system timezone."""
        return cls()

    @validates("days")
    def _validate_days(self, key, value):
        return _normalize_selector(key, value, 7)

    @validates("hours")
    def _validate_hours(self, key, value):
        return _normalize_selector(key, value, 24)

    @validates("profile_type")
    def _validate_profile_type(self, key, value):
        if value is None:
            return None
        try:
            return ProfileType(value)
        except ValueError:
            raise TimeProfileValidationError(
                f"profile_type must be one of {[t.value for t in ProfileType]}, got {value!r}"
            ) from None

    @validates("profile_key")
    def _validate_profile_key(self, key, value):
        # Keys arrive as user ids or names; store them uniformly
        return None if value is None else str(value)

    @validates("rollup_daily_metrics")
    def _validate_rollup_daily_metrics(self, key, value):
        if not isinstance(value, bool):
            raise TimeProfileValidationError(f"rollup_daily_metrics must be true or false, got {value!r}")
        return value

    def tz_or_default(self, fallback: str = DEFAULT_TZ) -> str:
        return self.tz or fallback

    def is_entire_timezone(self) -> bool:
        return list(self.days) == list(ALL_DAYS) and list(self.hours) == list(ALL_HOURS)

    @property
    def region_number(self) -> Optional[int]:
        if self.id is None:
            return None
        return region_of(self.id)

    def covers(self, ts: datetime) -> bool:
        """Whether ``ts`` falls on a selected day and hour in this profile's timezone."""
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        try:
            zone = pytz.timezone(self.tz_or_default())
        except pytz.UnknownTimeZoneError:
            raise TimeProfileValidationError(f"Unknown timezone {self.tz_or_default()!r}") from None
        local = ts.astimezone(zone)
        wday = (local.weekday() + 1) % 7
        return wday in self.days and local.hour in self.hours

    def __repr__(self):
        return (f"<TimeProfile(id={self.id}, description={self.description!r}, tz={self.tz!r}, "
                f"rollup_daily_metrics={self.rollup_daily_metrics})>")
