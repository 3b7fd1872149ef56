"""
Earliest Deadline First (EDF).

Dynamic priorities: whichever ready job has the earliest ABSOLUTE deadline
runs. Each job's deadline is fixed at release (release_time + D), so the
key never has to be recomputed — priority changes only because new jobs
arrive.

Preemption: checked every tick a job is running and the ready queue is not
empty. A ready job preempts only if its deadline is strictly earlier.

Schedulability: U <= 1.0 is necessary and sufficient on one processor when
deadlines equal periods. EDF is optimal there: if any policy can meet every
deadline, EDF can too. With D < T the test becomes a heuristic.
"""

from typing import Iterable, Optional

from models.job import Job
from models.task import Task
from scheduler.analysis import edf_utilization_test
from scheduler.base import AbstractPolicy, AbsoluteDeadline


class EDFPolicy(AbstractPolicy):

    def priority_of(self, job: Job, now: int) -> AbsoluteDeadline:
        return AbsoluteDeadline(job.absolute_deadline)

    def is_schedulable(self, tasks: Iterable[Task]) -> Optional[bool]:
        return edf_utilization_test(tasks)

    @property
    def policy_name(self) -> str:
        return "edf"

    @property
    def display_name(self) -> str:
        return "Earliest Deadline First"
