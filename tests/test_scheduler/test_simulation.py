"""
Tests for the tick-driven simulation loop.

Expected schedules below were worked out by hand, tick by tick. Each
scenario pins down one rule of the loop: release before preemption,
completion before the miss sweep, strict-improvement preemption, and the
deterministic tie-break.
"""

import pytest

from models.enums import JobStatus, ScheduleAction, SchedulingPolicy
from scheduler.presets import preset_tasks
from scheduler.simulation import Simulation, run_simulation
from scheduler.registry import create_policy
from scheduler.task_registry import build_task


def _tasks(*params):
    return [build_task(*p) for p in params]


def _ticks(result) -> list[str]:
    """Task id running at each tick ('IDLE' when the CPU was idle)."""
    return [
        e.task_id for e in result.schedule
        if e.action in (ScheduleAction.EXECUTING, ScheduleAction.IDLE)
    ]


def _events(result, action: ScheduleAction) -> list:
    return [e for e in result.schedule if e.action == action]


# ── Basic runs ─────────────────────────────────────────────────


@pytest.mark.parametrize("policy", ["rms", "edf"])
def test_periodic_set_over_hyperperiod(policy):
    result = run_simulation(policy, preset_tasks("periodic"), 60)
    stats = result.statistics

    assert stats.missed_deadlines == 0
    assert stats.completed_jobs == 13
    assert stats.total_jobs == 13
    assert stats.pending_jobs == 0
    assert stats.success_rate == 100.0
    assert stats.preemptions == 0
    assert stats.context_switches == 13
    assert stats.cpu_utilization == pytest.approx(29 / 60 * 100)
    assert result.is_schedulable is True


def test_periodic_response_times():
    result = run_simulation("rms", preset_tasks("periodic"), 60)
    by_task = {t.task_id: t for t in result.statistics.task_statistics}

    assert by_task["T1"].average_response_time == 0.0
    assert by_task["T2"].average_response_time == pytest.approx(1.5)
    assert by_task["T2"].worst_response_time == 3
    assert by_task["T3"].average_response_time == pytest.approx(11 / 3)
    assert by_task["T3"].worst_response_time == 5


@pytest.mark.parametrize("policy", list(SchedulingPolicy))
@pytest.mark.parametrize("preset", ["periodic", "hard-realtime", "schedulability-demo"])
def test_exactly_one_cpu_event_per_tick(policy, preset):
    tasks = preset_tasks(preset)
    result = run_simulation(policy, tasks, 60)

    cpu_times = [
        e.time for e in result.schedule
        if e.action in (ScheduleAction.EXECUTING, ScheduleAction.IDLE)
    ]
    assert cpu_times == list(range(60))


@pytest.mark.parametrize("policy", list(SchedulingPolicy))
def test_job_accounting_adds_up(policy):
    """Every released job ends up completed, missed, or pending — never lost."""
    tasks = preset_tasks("hard-realtime")
    result = run_simulation(policy, tasks, 45)
    stats = result.statistics

    released = sum(len(range(0, 45, t.period)) for t in tasks)
    assert stats.completed_jobs + stats.missed_deadlines + stats.pending_jobs == released


def test_schedule_events_are_time_ordered():
    result = run_simulation("lst", preset_tasks("hard-realtime"), 60)
    times = [e.time for e in result.schedule]
    assert times == sorted(times)


# ── Preemption ─────────────────────────────────────────────────


@pytest.mark.parametrize("policy", list(SchedulingPolicy))
def test_short_job_preempts_long_job(policy):
    """
    L(C=4,T=10) registered first, S(C=1,T=3). At t=3 S's second job is
    released and every policy ranks it above L's remaining work.
    """
    tasks = _tasks(("L", 4, 10), ("S", 1, 3))
    result = run_simulation(policy, tasks, 10)

    assert _ticks(result) == ["S", "L", "L", "S", "L", "L", "S", "IDLE", "IDLE", "S"]
    assert result.statistics.preemptions == 1
    assert result.statistics.context_switches == 7
    assert result.statistics.completed_jobs == 5
    assert result.statistics.cpu_utilization == pytest.approx(80.0)


def test_preempted_job_keeps_its_first_start_time():
    tasks = _tasks(("L", 4, 10), ("S", 1, 3))
    result = run_simulation("rms", tasks, 10)

    long_job = result.simulation.records[0].history[0]
    assert long_job.task_id == "L"
    assert long_job.start_time == 1
    assert long_job.response_time == 1
    assert long_job.completion_time == 6


def test_lst_preempts_on_strictly_smaller_slack():
    """
    A(C=5,D=9) starts with slack 4 against B's 5. At t=1 both have 4 (no
    preemption); at t=2 B drops to 3 and takes the CPU.
    """
    tasks = _tasks(("A", 5, 10, 9), ("B", 1, 10, 6))
    result = run_simulation("lst", tasks, 10)

    assert _ticks(result) == ["A", "A", "B", "A", "A", "A", "IDLE", "IDLE", "IDLE", "IDLE"]
    assert result.statistics.preemptions == 1
    assert result.statistics.missed_deadlines == 0

    executing = _events(result, ScheduleAction.EXECUTING)
    assert executing[0].slack_time == 4
    assert executing[2].task_id == "B"
    assert executing[2].slack_time == 3


@pytest.mark.parametrize("policy", ["edf", "dms"])
def test_deadline_based_policies_run_the_tighter_job_first(policy):
    tasks = _tasks(("A", 5, 10, 9), ("B", 1, 10, 6))
    result = run_simulation(policy, tasks, 10)

    assert _ticks(result)[:6] == ["B", "A", "A", "A", "A", "A"]
    assert result.statistics.preemptions == 0


def test_equal_static_priority_uses_registration_order():
    """Same period → tie; A was registered first, runs first, and is never preempted."""
    tasks = _tasks(("A", 5, 10, 9), ("B", 1, 10, 6))
    result = run_simulation("rms", tasks, 10)

    assert _ticks(result)[:6] == ["A", "A", "A", "A", "A", "B"]
    assert result.statistics.preemptions == 0
    # B completes at t=6, exactly on its deadline.
    assert result.statistics.missed_deadlines == 0


# ── Deadlines ──────────────────────────────────────────────────


def test_completion_on_the_deadline_is_not_a_miss():
    result = run_simulation("edf", _tasks(("T", 3, 5, 3)), 5)

    completed = _events(result, ScheduleAction.COMPLETED)
    assert [(e.time, e.job_number) for e in completed] == [(3, 1)]
    assert result.statistics.missed_deadlines == 0


def test_running_job_can_miss():
    """C=3 > D=2: the job is still on the CPU when its deadline passes."""
    result = run_simulation("rms", _tasks(("T", 3, 4, 2)), 4)

    assert [(e.time, e.action) for e in result.schedule] == [
        (0, ScheduleAction.EXECUTING),
        (1, ScheduleAction.EXECUTING),
        (2, ScheduleAction.DEADLINE_MISSED),
        (2, ScheduleAction.IDLE),
        (3, ScheduleAction.IDLE),
    ]
    stats = result.statistics
    assert stats.missed_deadlines == 1
    assert stats.completed_jobs == 0
    assert stats.success_rate == 0.0
    assert stats.cpu_utilization == pytest.approx(50.0)


def test_rms_misses_on_the_hard_realtime_set():
    """
    T3's first job is preempted at t=10 by T1 and still has a tick of work
    left when its deadline (12) arrives.
    """
    result = run_simulation("rms", preset_tasks("hard-realtime"), 30)
    stats = result.statistics

    first_miss = _events(result, ScheduleAction.DEADLINE_MISSED)[0]
    assert (first_miss.time, first_miss.task_id, first_miss.job_number) == (12, "T3", 1)
    assert stats.missed_deadlines == 2
    assert stats.completed_jobs == 9
    assert stats.success_rate == pytest.approx(9 / 11 * 100)
    assert stats.preemptions == 2
    assert result.is_schedulable is False


def test_edf_meets_every_deadline_on_the_hard_realtime_set():
    result = run_simulation("edf", preset_tasks("hard-realtime"), 30)
    stats = result.statistics

    assert stats.missed_deadlines == 0
    assert stats.completed_jobs == 11
    assert stats.success_rate == 100.0
    assert stats.preemptions == 1


@pytest.mark.parametrize("preset", ["periodic", "hard-realtime", "schedulability-demo"])
def test_edf_never_misses_more_than_rms(preset):
    tasks = preset_tasks(preset)
    rms = run_simulation("rms", tasks, 120)
    edf = run_simulation("edf", tasks, 120)
    assert edf.statistics.missed_deadlines <= rms.statistics.missed_deadlines


def test_missed_job_is_recorded_in_history():
    result = run_simulation("rms", _tasks(("T", 3, 4, 2)), 4)
    record = result.simulation.records[0]

    assert record.missed_deadlines == 1
    assert [j.status for j in record.history] == [JobStatus.MISSED]


# ── Horizon / numbering ────────────────────────────────────────


def test_job_numbers_count_up_per_task():
    result = run_simulation("edf", _tasks(("T", 1, 2)), 6)
    completed = _events(result, ScheduleAction.COMPLETED)
    assert [e.job_number for e in completed] == [1, 2, 3]


def test_unfinished_work_at_horizon_is_pending():
    result = run_simulation("rms", _tasks(("T", 3, 10)), 2)
    stats = result.statistics

    assert stats.pending_jobs == 1
    assert stats.completed_jobs == 0
    assert stats.missed_deadlines == 0
    assert stats.success_rate == 0.0
    assert result.simulation.running_job.remaining_time == 1


def test_step_advances_one_tick():
    policy = create_policy("rms")
    simulation = Simulation(policy, _tasks(("T", 2, 4)), end_time=4)

    simulation.step()
    assert simulation.current_time == 1
    assert simulation.running_job is not None
    assert not simulation.finished

    simulation.run()
    assert simulation.current_time == 4
    assert simulation.finished


# ── Result ─────────────────────────────────────────────────────


def test_result_carries_prepared_priorities():
    result = run_simulation("rms", preset_tasks("periodic"), 60)
    assert [t.priority for t in result.tasks] == [
        pytest.approx(1 / 10), pytest.approx(1 / 15), pytest.approx(1 / 20)
    ]


def test_result_to_dict():
    data = run_simulation("rms", preset_tasks("periodic"), 60).to_dict()

    assert data["policy"] == "rms"
    assert data["algorithm"] == "Rate Monotonic Scheduling"
    assert data["utilization_bound"] == pytest.approx(0.7798, abs=1e-4)
    assert data["schedule"][0] == {
        "time": 0,
        "action": "executing",
        "task_id": "T1",
        "job_number": 1,
        "remaining_time": 3,
        "deadline": 10,
    }
    assert data["statistics"]["completed_jobs"] == 13


def test_result_to_dict_without_schedule_or_bound():
    data = run_simulation("edf", preset_tasks("periodic"), 60).to_dict(include_schedule=False)
    assert "schedule" not in data
    assert "utilization_bound" not in data


def test_unknown_policy_raises():
    with pytest.raises(ValueError, match="Unknown scheduling policy"):
        run_simulation("fifo", preset_tasks("periodic"), 10)
