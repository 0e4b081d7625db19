"""Tests for the rollup trigger rules, evaluated on plain snapshots."""
import pytest

from time_profiles.models.time_profile import ALL_DAYS, ALL_HOURS, TimeProfile
from time_profiles.services import rollup_triggers
from time_profiles.services.rollup_triggers import RollupAction, ScheduledAction


def _snap(rollup=False, **overrides):
    snap = {
        "id": 10,
        "days": list(ALL_DAYS),
        "hours": list(ALL_HOURS),
        "tz": "UTC",
        "rollup_daily_metrics": rollup,
    }
    snap.update(overrides)
    return snap


class RecordingQueue:
    def __init__(self):
        self.calls = []

    def enqueue(self, target_type, target_id, action_verb):
        self.calls.append((target_type, target_id, action_verb))


class TestOnCreate:

    def test_rollups_disabled(self):
        assert rollup_triggers.on_create(_snap(rollup=False)) is None

    def test_rollups_enabled(self):
        action = rollup_triggers.on_create(_snap(rollup=True))
        assert action == ScheduledAction("TimeProfile", 10, RollupAction.rebuild)


class TestOnUpdate:

    def test_description_only(self):
        for rollup in (True, False):
            assert rollup_triggers.on_update(_snap(rollup), _snap(rollup)) is None

    @pytest.mark.parametrize("field,value", [("days", [1, 2]), ("hours", [8, 9]), ("tz", "Hawaii")])
    def test_profile_change_with_rollups(self, field, value):
        action = rollup_triggers.on_update(_snap(True), _snap(True, **{field: value}))
        assert action.action == RollupAction.rebuild

    def test_profile_change_without_rollups(self):
        assert rollup_triggers.on_update(_snap(False), _snap(False, days=[1, 2])) is None

    def test_rollups_turned_off(self):
        action = rollup_triggers.on_update(_snap(True), _snap(False))
        assert action.action == RollupAction.teardown
        assert action.target_id == 10

    def test_rollups_turned_off_with_profile_change(self):
        action = rollup_triggers.on_update(_snap(True), _snap(False, days=[3]))
        assert action.action == RollupAction.teardown

    def test_rollups_turned_on(self):
        action = rollup_triggers.on_update(_snap(False), _snap(True))
        assert action.action == RollupAction.rebuild


class TestOnDestroy:

    def test_with_rollups(self):
        assert rollup_triggers.on_destroy(_snap(True)).action == RollupAction.teardown

    def test_without_rollups(self):
        assert rollup_triggers.on_destroy(_snap(False)) is None


class TestEvaluate:

    def test_dispatch(self):
        assert rollup_triggers.evaluate(None, _snap(True)).action == RollupAction.rebuild
        assert rollup_triggers.evaluate(_snap(True), None).action == RollupAction.teardown
        assert rollup_triggers.evaluate(_snap(True), _snap(True)) is None

    def test_needs_a_snapshot(self):
        with pytest.raises(ValueError):
            rollup_triggers.evaluate(None, None)


class TestSchedule:

    def test_enqueues_verb(self):
        queue = RecordingQueue()
        action = ScheduledAction("TimeProfile", 4, RollupAction.teardown)
        assert rollup_triggers.schedule(queue, action) is action
        assert queue.calls == [("TimeProfile", 4, "destroy_metric_rollups")]

    def test_none_is_noop(self):
        queue = RecordingQueue()
        assert rollup_triggers.schedule(queue, None) is None
        assert queue.calls == []


def test_profile_snapshot():
    profile = TimeProfile(id=3, days=[2, 1], tz="Hawaii", rollup_daily_metrics=True)
    assert rollup_triggers.profile_snapshot(profile) == {
        "id": 3,
        "days": [1, 2],
        "hours": list(ALL_HOURS),
        "tz": "Hawaii",
        "rollup_daily_metrics": True,
    }
