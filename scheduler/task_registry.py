"""
Task registry — the set of periodic task definitions.

Every add_task() validates first and stores second, so a rejected task
leaves the registry exactly as it was. After each successful change the
two derived values are recomputed:

    hyper_period  = LCM of all periods  (the natural simulation horizon)
    utilization   = Σ C_i / T_i
"""

from typing import Iterable, Iterator, Optional

from models.errors import InfeasibleTask, InvalidParameter
from models.task import Task
from scheduler.analysis import hyper_period, total_utilization


def is_tick_count(value) -> bool:
    """Whole number of ticks. bool is an int subclass but never a duration."""
    return isinstance(value, int) and not isinstance(value, bool)


def build_task(
    task_id: str,
    execution_time: int,
    period: int,
    deadline: Optional[int] = None,
    priority: float = 0.0,
) -> Task:
    """Validate parameters and build a Task. Raises InvalidParameter / InfeasibleTask."""
    if not task_id:
        raise InvalidParameter("Task ID is required")
    if not is_tick_count(execution_time) or not is_tick_count(period):
        raise InvalidParameter("Execution time and period must be whole ticks")
    if deadline is not None and not is_tick_count(deadline):
        raise InvalidParameter("Deadline must be a whole number of ticks")
    if execution_time <= 0 or period <= 0:
        raise InvalidParameter("Execution time and period must be positive")
    if deadline is None:
        deadline = period
    elif deadline <= 0:
        raise InvalidParameter("Deadline must be positive")
    if deadline > period:
        raise InfeasibleTask("Deadline cannot be greater than period")

    return Task(
        id=task_id,
        execution_time=execution_time,
        period=period,
        deadline=deadline,
        priority=priority,
    )


class TaskRegistry:

    def __init__(self):
        self._tasks: list[Task] = []
        self.hyper_period: int = 0
        self.utilization: float = 0.0

    def add_task(
        self,
        task_id: str,
        execution_time: int,
        period: int,
        deadline: Optional[int] = None,
        priority: float = 0.0,
    ) -> Task:
        task = build_task(task_id, execution_time, period, deadline, priority)
        if self.get(task.id) is not None:
            raise InvalidParameter(f"Task '{task.id}' is already registered")

        self._store(self._tasks + [task])
        return task

    def replace_all(self, tasks: Iterable[Task]) -> None:
        """Swap in a whole task set. Validates every task before storing any."""
        validated: list[Task] = []
        for t in tasks:
            task = build_task(t.id, t.execution_time, t.period, t.deadline, t.priority)
            if any(v.id == task.id for v in validated):
                raise InvalidParameter(f"Task '{task.id}' is already registered")
            validated.append(task)

        self._store(validated)

    def update_priorities(self, tasks: Iterable[Task]) -> None:
        """Store re-prioritized task values produced by a run."""
        by_id = {task.id: task for task in tasks}
        self._tasks = [by_id.get(task.id, task) for task in self._tasks]

    def clear(self) -> None:
        self._store([])

    def get(self, task_id: str) -> Optional[Task]:
        return next((t for t in self._tasks if t.id == task_id), None)

    def snapshot(self) -> tuple[Task, ...]:
        """Owned copy of the task set, in registration order."""
        return tuple(self._tasks)

    def _store(self, tasks: list[Task]) -> None:
        # derived values first: nothing below the assignments can raise
        new_hyper_period = hyper_period(tasks)
        new_utilization = total_utilization(tasks)
        self._tasks = tasks
        self.hyper_period = new_hyper_period
        self.utilization = new_utilization

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.snapshot())
