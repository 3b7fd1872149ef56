"""
Deadline Monotonic Scheduling (DMS).

Same mechanics as RMS — static priorities, immediate preemption by a
strictly higher-priority job — but ranked by RELATIVE DEADLINE instead of
period. When every deadline equals its period, DMS and RMS produce the
exact same schedule.

DMS is the better fixed-priority choice when D < T: a task that must
finish quickly after release gets the CPU first even if it is released
rarely.
"""

from dataclasses import replace
from typing import Iterable

from models.job import Job
from models.task import Task
from scheduler.base import AbstractPolicy, StaticPriority


class DMSPolicy(AbstractPolicy):

    def prepare(self, tasks: Iterable[Task]) -> tuple[Task, ...]:
        return tuple(replace(task, priority=1 / task.deadline) for task in tasks)

    def priority_of(self, job: Job, now: int) -> StaticPriority:
        return StaticPriority(self.task_for(job).deadline)

    @property
    def policy_name(self) -> str:
        return "dms"

    @property
    def display_name(self) -> str:
        return "Deadline Monotonic Scheduling"
