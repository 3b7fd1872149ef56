"""
Job factory — turns a periodic task into a concrete job at a release instant.

A task releases a job whenever `now % period == 0`, including now == 0.
Because every deadline satisfies D <= T, the previous job of the same task
is always finished (completed or missed) before the next one is released,
so "finished jobs + 1" is a valid sequence number.
"""

from models.enums import JobStatus
from models.job import Job
from models.task import Task


def is_release_instant(task: Task, now: int) -> bool:
    return now % task.period == 0


def release(task: Task, now: int, prior_jobs: int) -> Job:
    """
    Create the next job of `task`, released at `now`.

    Args:
        task: the owning task definition
        now: the release tick
        prior_jobs: how many jobs of this task already completed or missed
    """
    return Job(
        task_id=task.id,
        job_number=prior_jobs + 1,
        release_time=now,
        absolute_deadline=now + task.deadline,
        execution_time=task.execution_time,
        remaining_time=task.execution_time,
        status=JobStatus.READY,
    )
