"""
Schedulability analysis and post-run statistics.

Two utilization tests:

    Liu & Layland (RMS):  U <= n * (2^(1/n) - 1)
        Sufficient, not necessary. False does NOT prove the set misses
        deadlines — only the simulated miss count is authoritative.
        The bound shrinks toward ln 2 ≈ 0.693 as n grows.

    EDF:                  U <= 1.0
        Exact for implicit deadlines (D = T). With D < T it is only a
        heuristic, so it is reported but never trusted over the simulation.

compute_statistics() turns a finished Simulation into the numbers the
caller actually reads: success rate, CPU utilization, preemptions, context
switches, and per-task response times.
"""

import math
from dataclasses import dataclass, asdict
from functools import reduce
from typing import Iterable, Optional, TYPE_CHECKING

from models.enums import ScheduleAction
from models.task import Task, TaskRecord

if TYPE_CHECKING:
    from scheduler.simulation import Simulation


def total_utilization(tasks: Iterable[Task]) -> float:
    return sum(task.utilization for task in tasks)


def hyper_period(tasks: Iterable[Task]) -> int:
    """LCM of all periods, folded pairwise with gcd. 0 for an empty set."""
    periods = [task.period for task in tasks]
    if not periods:
        return 0
    return reduce(lambda acc, p: acc * p // math.gcd(acc, p), periods, 1)


def rms_utilization_bound(n: int) -> float:
    if n <= 0:
        return 0.0
    return n * (2 ** (1 / n) - 1)


def rms_utilization_bound_test(tasks: Iterable[Task]) -> bool:
    tasks = list(tasks)
    return total_utilization(tasks) <= rms_utilization_bound(len(tasks))


def edf_utilization_test(tasks: Iterable[Task]) -> bool:
    return total_utilization(tasks) <= 1.0


# ── Statistics ─────────────────────────────────────────────────


@dataclass
class TaskStatistics:
    task_id: str
    period: int
    execution_time: int
    deadline: int
    utilization: float
    completed_jobs: int
    missed_deadlines: int
    success_rate: float
    average_response_time: float
    worst_response_time: Optional[int]


@dataclass
class Statistics:
    total_utilization: float
    hyper_period: int
    simulation_time: int
    total_jobs: int          # completed + missed (pending jobs are not counted)
    completed_jobs: int
    missed_deadlines: int
    pending_jobs: int        # still READY / RUNNING when the horizon was reached
    success_rate: float
    preemptions: int
    context_switches: int
    cpu_utilization: float
    task_statistics: list[TaskStatistics]

    def to_dict(self) -> dict:
        return asdict(self)


def _percentage(part: int, whole: int) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def _task_statistics(record: TaskRecord) -> TaskStatistics:
    task = record.task
    response_times = [
        job.response_time for job in record.history
        if job.completion_time is not None and job.response_time is not None
    ]
    return TaskStatistics(
        task_id=task.id,
        period=task.period,
        execution_time=task.execution_time,
        deadline=task.deadline,
        utilization=task.utilization,
        completed_jobs=record.completed_jobs,
        missed_deadlines=record.missed_deadlines,
        success_rate=_percentage(record.completed_jobs, record.finished_jobs),
        average_response_time=(
            sum(response_times) / len(response_times) if response_times else 0.0
        ),
        worst_response_time=max(response_times) if response_times else None,
    )


def compute_statistics(simulation: "Simulation") -> Statistics:
    records = simulation.records
    completed = sum(r.completed_jobs for r in records)
    missed = sum(r.missed_deadlines for r in records)
    executing_ticks = sum(
        1 for event in simulation.schedule if event.action == ScheduleAction.EXECUTING
    )
    tasks = [r.task for r in records]

    return Statistics(
        total_utilization=total_utilization(tasks),
        hyper_period=hyper_period(tasks),
        simulation_time=simulation.current_time,
        total_jobs=completed + missed,
        completed_jobs=completed,
        missed_deadlines=missed,
        pending_jobs=simulation.pending_jobs,
        success_rate=_percentage(completed, completed + missed),
        preemptions=simulation.preemptions,
        context_switches=simulation.context_switches,
        cpu_utilization=_percentage(executing_ticks, simulation.current_time),
        task_statistics=[_task_statistics(r) for r in records],
    )


# ── Schedulability report ──────────────────────────────────────


@dataclass
class TaskAnalysis:
    task_id: str
    utilization: float
    period: int
    deadline: int
    execution_time: int
    deadline_test: bool     # C <= D: the job can fit before its own deadline


@dataclass
class SchedulabilityReport:
    total_utilization: float
    rms_utilization_bound: float
    rms_schedulable: bool
    edf_schedulable: bool
    hyper_period: int
    task_count: int
    task_analysis: list[TaskAnalysis]

    def to_dict(self) -> dict:
        return asdict(self)


def analyze_schedulability(tasks: Iterable[Task]) -> SchedulabilityReport:
    tasks = list(tasks)
    return SchedulabilityReport(
        total_utilization=total_utilization(tasks),
        rms_utilization_bound=rms_utilization_bound(len(tasks)),
        rms_schedulable=rms_utilization_bound_test(tasks),
        edf_schedulable=edf_utilization_test(tasks),
        hyper_period=hyper_period(tasks),
        task_count=len(tasks),
        task_analysis=[
            TaskAnalysis(
                task_id=t.id,
                utilization=t.utilization,
                period=t.period,
                deadline=t.deadline,
                execution_time=t.execution_time,
                deadline_test=t.execution_time <= t.deadline,
            )
            for t in tasks
        ],
    )
