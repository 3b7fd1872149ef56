"""
Tests for the RealTimeScheduler facade.

The facade owns the registry and the last run; these tests focus on what it
adds on top of run_simulation(): validation of the run itself, state
snapshots, reset, and side-effect-free comparison.
"""

import pytest

from config.settings import settings
from models.errors import EmptyTaskSet, InvalidParameter
from scheduler.engine import RealTimeScheduler


def _hard_realtime() -> RealTimeScheduler:
    scheduler = RealTimeScheduler(pool_size=2)
    scheduler.load_preset("hard-realtime")
    return scheduler


def test_simulate_without_tasks_fails():
    with pytest.raises(EmptyTaskSet):
        RealTimeScheduler().simulate("rms")


def test_analyze_without_tasks_fails():
    with pytest.raises(EmptyTaskSet, match="No tasks to analyze"):
        RealTimeScheduler().analyze()


@pytest.mark.parametrize("end_time", [0, -5])
def test_non_positive_simulation_time_fails(end_time):
    with pytest.raises(InvalidParameter):
        _hard_realtime().simulate("edf", end_time)


def test_simulation_time_above_maximum_fails(monkeypatch):
    monkeypatch.setattr(settings, "MAX_SIMULATION_TIME", 50)
    with pytest.raises(InvalidParameter, match="exceeds the maximum"):
        _hard_realtime().simulate("edf", 51)


def test_unknown_policy_fails():
    with pytest.raises(ValueError):
        _hard_realtime().simulate("round-robin")


def test_failed_run_leaves_state_untouched():
    scheduler = _hard_realtime()
    scheduler.simulate("rms", 7)
    before = scheduler.get_state()

    with pytest.raises(InvalidParameter):
        scheduler.simulate("rms", 0)

    assert scheduler.get_state() == before


def test_simulation_time_defaults_to_hyperperiod():
    result = _hard_realtime().simulate("edf")
    assert result.statistics.simulation_time == 30
    assert result.statistics.hyper_period == 30


def test_policy_defaults_to_configured_one(monkeypatch):
    monkeypatch.setattr(settings, "DEFAULT_SCHEDULING_POLICY", "lst")
    assert _hard_realtime().simulate().policy == "lst"


def test_static_policy_run_updates_stored_priorities():
    scheduler = _hard_realtime()
    scheduler.simulate("rms")
    assert [t.priority for t in scheduler.tasks] == [
        pytest.approx(1 / 5), pytest.approx(1 / 10), pytest.approx(1 / 15)
    ]


def test_state_reflects_last_run():
    scheduler = _hard_realtime()
    scheduler.simulate("rms", 30)
    state = scheduler.get_state()

    assert state.current_time == 30
    t3 = next(t for t in state.tasks if t.id == "T3")
    assert t3.missed_deadlines == 2
    assert t3.completed_jobs == 0


def test_state_shows_job_on_the_cpu_at_horizon():
    scheduler = RealTimeScheduler()
    scheduler.add_task("T", 3, 10)
    scheduler.simulate("edf", 2)
    state = scheduler.get_state().to_dict()

    assert state["running_job"]["task_id"] == "T"
    assert state["running_job"]["remaining_time"] == 1
    assert state["running_job"]["status"] == "RUNNING"
    assert state["ready_queue_size"] == 0


def test_reset_keeps_tasks_but_forgets_the_run():
    scheduler = _hard_realtime()
    scheduler.simulate("rms")
    scheduler.reset()
    state = scheduler.get_state()

    assert len(state.tasks) == 3
    assert state.current_time == 0
    assert state.ready_queue_size == 0
    assert state.running_job is None
    assert all(t.completed_jobs == 0 and t.missed_deadlines == 0 for t in state.tasks)


def test_reset_then_simulate_is_reproducible():
    scheduler = _hard_realtime()
    first = scheduler.simulate("lst", 60)
    scheduler.reset()
    second = scheduler.simulate("lst", 60)

    assert [e.to_dict() for e in first.schedule] == [e.to_dict() for e in second.schedule]
    assert first.statistics == second.statistics


def test_same_tasks_in_a_fresh_scheduler_give_the_same_run():
    a = _hard_realtime().simulate("dms")
    b = RealTimeScheduler()
    b.add_task("T1", 2, 5, 5)
    b.add_task("T2", 3, 10, 8)
    b.add_task("T3", 4, 15, 12)

    assert a.statistics == b.simulate("dms").statistics


def test_clear_drops_tasks():
    scheduler = _hard_realtime()
    scheduler.simulate("edf")
    scheduler.clear()

    assert scheduler.tasks == ()
    assert scheduler.hyper_period == 0
    assert scheduler.get_state().current_time == 0


def test_compare_runs_all_policies_in_order():
    comparison = _hard_realtime().compare(end_time=30)

    assert comparison.algorithms == ["rms", "edf", "dms", "lst"]
    assert [row.algorithm for row in comparison.results] == ["RMS", "EDF", "DMS", "LST"]
    rows = {row.algorithm: row for row in comparison.results}
    assert rows["RMS"].missed_deadlines == 2
    assert rows["EDF"].missed_deadlines == 0
    assert rows["DMS"].schedulable is None
    assert set(comparison.detailed_results) == {"rms", "edf", "dms", "lst"}


def test_compare_matches_individual_runs():
    scheduler = _hard_realtime()
    comparison = scheduler.compare(["rms", "lst"], 45)

    for name in ("rms", "lst"):
        single = scheduler.simulate(name, 45)
        assert comparison.detailed_results[name].statistics == single.statistics


def test_compare_does_not_change_state():
    scheduler = _hard_realtime()
    before = scheduler.get_state()
    scheduler.compare(["edf", "lst"])
    assert scheduler.get_state() == before


def test_compare_to_dict_can_drop_schedules():
    data = _hard_realtime().compare(["edf"], 10).to_dict(include_schedule=False)
    assert "schedule" not in data["detailed_results"]["edf"]
    assert data["results"][0]["algorithm"] == "EDF"


def test_load_preset_replaces_tasks():
    scheduler = RealTimeScheduler()
    scheduler.add_task("X", 1, 3)
    scheduler.load_preset("periodic")
    assert [t.id for t in scheduler.tasks] == ["T1", "T2", "T3"]
    assert scheduler.hyper_period == 60


def test_load_unknown_preset_fails():
    with pytest.raises(KeyError):
        RealTimeScheduler().load_preset("nope")


def test_non_integer_simulation_time_fails():
    with pytest.raises(InvalidParameter, match="whole number of ticks"):
        _hard_realtime().simulate("edf", 10.5)


def test_compare_with_empty_selection_fails():
    with pytest.raises(InvalidParameter, match="At least one policy"):
        _hard_realtime().compare([])
