"""
RealTimeScheduler — the facade callers talk to.

There is no module-level scheduler: whoever needs one creates it and owns
it (the API keeps one on app.state, the CLI builds its own, tests build a
fresh one per test).

    caller
      │ add_task()            → TaskRegistry (validate, recompute hyperperiod / U)
      │ simulate(policy)      → snapshot tasks → Simulation.run() → SimulationResult
      │ compare([policies])   → snapshot tasks → SimulationPool (one thread per policy)
      │ get_state() / reset() / analyze() / load_preset()

Every run works on a SNAPSHOT of the task set (frozen Task values), never
on the registry itself. A run either completes and replaces the stored
"last run", or fails validation before it starts and leaves state untouched.
"""

import logging
import threading
from dataclasses import dataclass, asdict
from typing import Iterable, Optional

from config.settings import settings
from models.enums import SchedulingPolicy
from models.errors import EmptyTaskSet, InvalidParameter
from models.task import Task
from scheduler.analysis import SchedulabilityReport, analyze_schedulability
from scheduler.presets import PRESETS, preset_tasks
from scheduler.simulation import Simulation, SimulationResult, run_simulation
from scheduler.task_registry import TaskRegistry, is_tick_count
from worker.pool import SimulationPool

logger = logging.getLogger(__name__)


@dataclass
class TaskState:
    id: str
    execution_time: int
    period: int
    deadline: int
    priority: float
    utilization: float
    completed_jobs: int
    missed_deadlines: int


@dataclass
class SchedulerState:
    tasks: list[TaskState]
    total_utilization: float
    hyper_period: int
    ready_queue_size: int
    running_job: Optional[dict]
    current_time: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ComparisonRow:
    algorithm: str
    schedulable: Optional[bool]
    success_rate: float
    missed_deadlines: int
    preemptions: int
    context_switches: int
    cpu_utilization: float


@dataclass
class ComparisonResult:
    algorithms: list[str]
    results: list[ComparisonRow]
    detailed_results: dict[str, SimulationResult]

    def to_dict(self, include_schedule: bool = True) -> dict:
        return {
            "algorithms": self.algorithms,
            "results": [asdict(row) for row in self.results],
            "detailed_results": {
                name: result.to_dict(include_schedule=include_schedule)
                for name, result in self.detailed_results.items()
            },
        }


class RealTimeScheduler:

    def __init__(self, pool_size: Optional[int] = None):
        self._registry = TaskRegistry()
        self._last_run: Optional[Simulation] = None
        self._pool_size = pool_size or settings.SIMULATION_POOL_SIZE
        self._lock = threading.Lock()

    # ── Task registry ───────────────────────────────────────────

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self._registry.snapshot()

    @property
    def hyper_period(self) -> int:
        return self._registry.hyper_period

    @property
    def total_utilization(self) -> float:
        return self._registry.utilization

    def add_task(
        self,
        task_id: str,
        execution_time: int,
        period: int,
        deadline: Optional[int] = None,
        priority: float = 0.0,
    ) -> Task:
        """Register a periodic task. Raises InvalidParameter / InfeasibleTask."""
        with self._lock:
            task = self._registry.add_task(task_id, execution_time, period, deadline, priority)
        logger.info(
            f"Task {task.id} added (C={task.execution_time}, T={task.period}, "
            f"D={task.deadline}); U={self._registry.utilization:.4f}, "
            f"hyperperiod={self._registry.hyper_period}"
        )
        return task

    def load_preset(self, name: str) -> tuple[Task, ...]:
        """Replace the task set with a named preset. Raises KeyError if unknown."""
        tasks = preset_tasks(name)
        with self._lock:
            self._registry.replace_all(tasks)
            self._last_run = None
        logger.info(f"Loaded preset '{name}': {PRESETS[name]['description']}")
        return self._registry.snapshot()

    # ── Simulation ──────────────────────────────────────────────

    def _resolve_end_time(self, end_time: Optional[int]) -> int:
        if end_time is None:
            end_time = self._registry.hyper_period
        if not is_tick_count(end_time):
            raise InvalidParameter("Simulation time must be a whole number of ticks")
        if end_time <= 0:
            raise InvalidParameter("Simulation time must be positive")
        if end_time > settings.MAX_SIMULATION_TIME:
            raise InvalidParameter(
                f"Simulation time {end_time} exceeds the maximum of "
                f"{settings.MAX_SIMULATION_TIME} ticks"
            )
        return end_time

    def _snapshot_for_run(self, end_time: Optional[int]) -> tuple[tuple[Task, ...], int]:
        if len(self._registry) == 0:
            raise EmptyTaskSet()
        return self._registry.snapshot(), self._resolve_end_time(end_time)

    def simulate(
        self,
        policy: Optional[SchedulingPolicy | str] = None,
        end_time: Optional[int] = None,
    ) -> SimulationResult:
        """
        Run one policy from t=0 to end_time (default: the hyperperiod).

        `policy` defaults to settings.DEFAULT_SCHEDULING_POLICY. Raises
        EmptyTaskSet with no tasks, InvalidParameter for a bad end_time,
        ValueError for an unknown policy. Deadline misses are not errors;
        they show up in result.statistics.
        """
        policy = policy or settings.DEFAULT_SCHEDULING_POLICY
        with self._lock:
            tasks, end_time = self._snapshot_for_run(end_time)

        result = run_simulation(policy, tasks, end_time)
        stats = result.statistics

        with self._lock:
            self._registry.update_priorities(result.tasks)
            self._last_run = result.simulation

        logger.info(
            f"{result.algorithm}: {end_time} ticks, {stats.completed_jobs} completed, "
            f"{stats.missed_deadlines} missed, {stats.preemptions} preemptions, "
            f"{stats.context_switches} context switches"
        )
        if stats.missed_deadlines:
            logger.warning(
                f"{result.algorithm} missed {stats.missed_deadlines} deadline(s) "
                f"(success rate {stats.success_rate:.1f}%)"
            )
        return result

    def compare(
        self,
        policies: Optional[Iterable[SchedulingPolicy | str]] = None,
        end_time: Optional[int] = None,
    ) -> ComparisonResult:
        """
        Run several policies on the same snapshot, concurrently.

        Does not touch the stored last run: comparing is read-only with
        respect to scheduler state.
        """
        selected = (
            list(SchedulingPolicy) if policies is None
            else [SchedulingPolicy(p) for p in policies]
        )
        if not selected:
            raise InvalidParameter("At least one policy is required")
        with self._lock:
            tasks, end_time = self._snapshot_for_run(end_time)

        with SimulationPool(max_workers=self._pool_size) as pool:
            results = pool.run_all(tasks, selected, end_time)

        logger.info(
            f"Compared {', '.join(p.value for p in selected)} over {end_time} ticks"
        )
        return ComparisonResult(
            algorithms=[p.value for p in selected],
            results=[
                ComparisonRow(
                    algorithm=r.policy.upper(),
                    schedulable=r.is_schedulable,
                    success_rate=r.statistics.success_rate,
                    missed_deadlines=r.statistics.missed_deadlines,
                    preemptions=r.statistics.preemptions,
                    context_switches=r.statistics.context_switches,
                    cpu_utilization=r.statistics.cpu_utilization,
                )
                for r in results
            ],
            detailed_results={r.policy: r for r in results},
        )

    # ── State ───────────────────────────────────────────────────

    def analyze(self) -> SchedulabilityReport:
        tasks = self._registry.snapshot()
        if not tasks:
            raise EmptyTaskSet("No tasks to analyze")
        return analyze_schedulability(tasks)

    def get_state(self) -> SchedulerState:
        run = self._last_run
        counters = {}
        if run is not None:
            counters = {
                r.task.id: (r.completed_jobs, r.missed_deadlines) for r in run.records
            }

        return SchedulerState(
            tasks=[
                TaskState(
                    id=task.id,
                    execution_time=task.execution_time,
                    period=task.period,
                    deadline=task.deadline,
                    priority=task.priority,
                    utilization=task.utilization,
                    completed_jobs=counters.get(task.id, (0, 0))[0],
                    missed_deadlines=counters.get(task.id, (0, 0))[1],
                )
                for task in self._registry.snapshot()
            ],
            total_utilization=self._registry.utilization,
            hyper_period=self._registry.hyper_period,
            ready_queue_size=run.ready_queue.size() if run else 0,
            running_job=(
                run.running_job.to_dict() if run and run.running_job else None
            ),
            current_time=run.current_time if run else 0,
        )

    def reset(self) -> None:
        """Forget the last run (queues, counters, histories). Tasks stay registered."""
        with self._lock:
            self._last_run = None
        logger.info("Scheduler state reset")

    def clear(self) -> None:
        """Drop every task definition as well as the last run."""
        with self._lock:
            self._registry.clear()
            self._last_run = None
        logger.info("All tasks removed")
