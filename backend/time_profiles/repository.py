"""Persistence boundary for TimeProfile rows."""
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from time_profiles.models.time_profile import TimeProfile
from time_profiles.region import RegionId, id_range


class TimeProfileRepository:
    """Thin CRUD wrapper over a session. The caller owns commit/rollback."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, profile_id: int) -> Optional[TimeProfile]:
        return self.db.get(TimeProfile, profile_id)

    def find_by_description(self, description: str) -> Optional[TimeProfile]:
        return (
            self.db.query(TimeProfile)
            .filter(TimeProfile.description == description)
            .order_by(TimeProfile.id)
            .first()
        )

    def find_all(self, *criteria) -> list[TimeProfile]:
        return self.db.query(TimeProfile).filter(*criteria).order_by(TimeProfile.id).all()

    def save(self, profile: TimeProfile) -> TimeProfile:
        self.db.add(profile)
        self.db.flush()
        return profile

    def delete(self, profile: TimeProfile) -> None:
        self.db.delete(profile)
        self.db.flush()

    def count(self) -> int:
        return self.db.query(TimeProfile).count()

    def next_id(self, region: int) -> int:
        """Next free id in ``region``'s block, one past its highest local sequence.

        Rows replicated from other regions never move the local sequence.
        """
        low, high = id_range(region)
        current = (
            self.db.query(func.max(TimeProfile.id))
            .filter(TimeProfile.id.between(low, high))
            .scalar()
        )
        local_id = 1 if current is None else RegionId.decode(current).local_id + 1
        return RegionId(region, local_id).encode()
