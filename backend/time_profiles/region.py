"""Region-encoded identifiers.

Every region allocates ids from its own block of the integer space:
``global_id = region * factor + local_id``. Decoding an id therefore tells
which region a row was created in, without asking any central coordinator.
"""
from dataclasses import dataclass
from typing import Optional

from time_profiles.config import settings


def _factor(factor: Optional[int]) -> int:
    return settings.REGION_FACTOR if factor is None else factor


@dataclass(frozen=True)
class RegionId:
    region: int
    local_id: int

    def __post_init__(self):
        if self.region < 0:
            raise ValueError(f"region must be non-negative, got {self.region}")
        if self.local_id < 0:
            raise ValueError(f"local_id must be non-negative, got {self.local_id}")

    def encode(self, factor: Optional[int] = None) -> int:
        factor = _factor(factor)
        if self.local_id >= factor:
            raise ValueError(f"local_id {self.local_id} does not fit below region factor {factor}")
        return self.region * factor + self.local_id

    @classmethod
    def decode(cls, global_id: int, factor: Optional[int] = None) -> "RegionId":
        region, local_id = divmod(global_id, _factor(factor))
        return cls(region=region, local_id=local_id)


def region_of(global_id: int, factor: Optional[int] = None) -> int:
    """Region number a global id was allocated in."""
    return global_id // _factor(factor)


def id_range(region: int, factor: Optional[int] = None) -> tuple[int, int]:
    """Inclusive (low, high) bounds of the ids belonging to ``region``."""
    factor = _factor(factor)
    low = RegionId(region, 0).encode(factor)
    return low, low + factor - 1
