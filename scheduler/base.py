"""
Abstract base class for all real-time scheduling policies (Strategy pattern).

The simulation loop only knows about AbstractPolicy. Each tick it asks two
questions, without caring whether the policy is RMS, EDF, DMS or LST:

    - priority_of(job, now)          → which ready job is most urgent?
    - should_preempt(running, cand)  → does the candidate kick the running job off?

To add a new policy:
1. Create a class that inherits AbstractPolicy
2. Implement priority_of(), policy_name and display_name
3. Register it in scheduler/registry.py

Priority keys are a small tagged union instead of one untyped number:

    StaticPriority(rank)        RMS (rank = period), DMS (rank = relative deadline)
    AbsoluteDeadline(deadline)  EDF
    Slack(slack)                LST

All three are ordered dataclasses where SMALLER = MORE URGENT, and all hold
integers. Comparing periods directly is the same ordering as comparing
1/period with the direction flipped, just without floating-point surprises.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, Optional, Union

from models.job import Job
from models.task import Task


@dataclass(frozen=True, order=True)
class StaticPriority:
    rank: int


@dataclass(frozen=True, order=True)
class AbsoluteDeadline:
    deadline: int


@dataclass(frozen=True, order=True)
class Slack:
    slack: int


PriorityKey = Union[StaticPriority, AbsoluteDeadline, Slack]


class AbstractPolicy(ABC):
    """
    Interface that all real-time policies implement.

    The ready queue calls priority_of() to pick the next job; the simulation
    loop calls should_preempt() once per tick while a job is running.
    """

    def __init__(self):
        self._tasks: dict[str, Task] = {}

    def prepare(self, tasks: Iterable[Task]) -> tuple[Task, ...]:
        """
        Assign per-run priorities before the first tick.

        Dynamic policies leave tasks untouched; static ones return new Task
        values carrying their display priority.
        """
        return tuple(tasks)

    def bind(self, tasks: Iterable[Task]) -> None:
        """Give the policy the (prepared) task set it will be asked about."""
        self._tasks = {task.id: task for task in tasks}

    def task_for(self, job: Job) -> Task:
        return self._tasks[job.task_id]

    @abstractmethod
    def priority_of(self, job: Job, now: int) -> PriorityKey:
        """Key for this job at time `now`. Smaller = scheduled first."""
        ...

    def should_preempt(self, running: Job, candidate: Job, now: int) -> bool:
        """
        Preempt only on a STRICTLY more urgent key.

        On equal keys the incumbent keeps the CPU — otherwise two equal jobs
        could ping-pong every tick and inflate the context switch count.
        """
        return self.priority_of(candidate, now) < self.priority_of(running, now)

    def refresh(self, jobs: Iterable[Job], now: int) -> None:
        """Per-tick hook for policies whose keys change over time (LST)."""
        return None

    def is_schedulable(self, tasks: Iterable[Task]) -> Optional[bool]:
        """Utilization-based admission test, or None if the policy has none."""
        return None

    @property
    @abstractmethod
    def policy_name(self) -> str:
        """Unique name for this policy (e.g., 'rms', 'edf')."""
        ...

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Human-readable name (e.g., 'Rate Monotonic Scheduling')."""
        ...
