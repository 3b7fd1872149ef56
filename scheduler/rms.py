"""
Rate Monotonic Scheduling (RMS).

Static priorities: the shorter a task's period, the higher its priority.
Priorities are assigned once, before the first tick, and never change
during the run.

Preemption: the moment a job with a strictly shorter period is ready
(just released, or waiting), it takes the CPU — before that tick executes.
Equal periods never preempt each other; the incumbent keeps running.

Schedulability: the Liu & Layland bound U <= n(2^(1/n) - 1) is a
SUFFICIENT test. Passing it guarantees zero misses; failing it proves
nothing — plenty of sets above the bound still run clean.

When to use: fixed-priority systems where priorities must be known offline
(most commercial RTOSes). RMS is optimal among fixed-priority policies when
deadlines equal periods.
"""

from dataclasses import replace
from typing import Iterable, Optional

from models.job import Job
from models.task import Task
from scheduler.analysis import rms_utilization_bound_test
from scheduler.base import AbstractPolicy, StaticPriority


class RMSPolicy(AbstractPolicy):

    def prepare(self, tasks: Iterable[Task]) -> tuple[Task, ...]:
        return tuple(replace(task, priority=1 / task.period) for task in tasks)

    def priority_of(self, job: Job, now: int) -> StaticPriority:
        return StaticPriority(self.task_for(job).period)

    def is_schedulable(self, tasks: Iterable[Task]) -> Optional[bool]:
        return rms_utilization_bound_test(tasks)

    @property
    def policy_name(self) -> str:
        return "rms"

    @property
    def display_name(self) -> str:
        return "Rate Monotonic Scheduling"
