"""Decide which rollup job, if any, a profile mutation requires.

The functions here are pure: they compare snapshots taken before and after a
mutation and return at most one ``ScheduledAction``. Handing the action to a
queue is a separate step (``schedule``), so nothing runs inline.
"""
import enum
import logging
from dataclasses import dataclass
from typing import Any, Optional

from time_profiles.models.time_profile import TimeProfile
from time_profiles.services.job_queue import JobQueue

logger = logging.getLogger(__name__)

TARGET_TYPE = "TimeProfile"
PROFILE_FIELDS = ("days", "hours", "tz")


class RollupAction(str, enum.Enum):
    rebuild = "rebuild_daily_metrics"
    teardown = "destroy_metric_rollups"


@dataclass(frozen=True)
class ScheduledAction:
    target_type: str
    target_id: int
    action: RollupAction


def profile_snapshot(profile: TimeProfile) -> dict[str, Any]:
    """Capture the trigger-relevant attributes of a profile."""
    return {
        "id": profile.id,
        "days": list(profile.days) if profile.days is not None else None,
        "hours": list(profile.hours) if profile.hours is not None else None,
        "tz": profile.tz,
        "rollup_daily_metrics": bool(profile.rollup_daily_metrics),
    }


def _action(snapshot: dict[str, Any], action: RollupAction) -> ScheduledAction:
    return ScheduledAction(target_type=TARGET_TYPE, target_id=snapshot["id"], action=action)


def on_create(new: dict[str, Any]) -> Optional[ScheduledAction]:
    if new["rollup_daily_metrics"]:
        return _action(new, RollupAction.rebuild)
    return None


def on_update(old: dict[str, Any], new: dict[str, Any]) -> Optional[ScheduledAction]:
    if old["rollup_daily_metrics"] and not new["rollup_daily_metrics"]:
        return _action(new, RollupAction.teardown)
    if not new["rollup_daily_metrics"]:
        return None
    # Turning rollups on counts as a change, so the first rebuild is queued too
    changed = [f for f in PROFILE_FIELDS + ("rollup_daily_metrics",) if old[f] != new[f]]
    if changed:
        return _action(new, RollupAction.rebuild)
    return None


def on_destroy(old: dict[str, Any]) -> Optional[ScheduledAction]:
    if old["rollup_daily_metrics"]:
        return _action(old, RollupAction.teardown)
    return None


def evaluate(old: Optional[dict[str, Any]], new: Optional[dict[str, Any]]) -> Optional[ScheduledAction]:
    """Dispatch on the shape of the mutation: create, update or destroy."""
    if old is None and new is None:
        raise ValueError("evaluate() needs at least one snapshot")
    if old is None:
        return on_create(new)
    if new is None:
        return on_destroy(old)
    return on_update(old, new)


def schedule(queue: JobQueue, action: Optional[ScheduledAction]) -> Optional[ScheduledAction]:
    """Hand ``action`` to ``queue``; a ``None`` action is a no-op."""
    if action is None:
        return None
    queue.enqueue(action.target_type, action.target_id, action.action.value)
    logger.info("Scheduled %s for %s %s", action.action.value, action.target_type, action.target_id)
    return action
