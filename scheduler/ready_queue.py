"""
Ready queue — released jobs waiting for the CPU.

Same enqueue / dequeue / peek / size contract as any scheduler queue, but
the ORDER comes from the active policy: dequeue() hands back the job with
the smallest policy key at time `now`.

Data structure: plain list with a linear min() scan.
Why not a heap? LST keys change every tick (waiting jobs lose slack), which
would invalidate heap order on every tick anyway. Ready queues in a
uniprocessor simulation hold a handful of jobs, so O(n) is fine.

Tie-break on equal keys (fully deterministic):
    1. earliest release time
    2. task registration order
    3. lowest job number
"""

from typing import Iterator, Optional

from models.job import Job
from scheduler.base import AbstractPolicy


class ReadyQueue:

    def __init__(self, policy: AbstractPolicy, task_order: dict[str, int]):
        self._policy = policy
        self._task_order = task_order
        self._jobs: list[Job] = []

    def _sort_key(self, job: Job, now: int) -> tuple:
        return (
            self._policy.priority_of(job, now),
            job.release_time,
            self._task_order[job.task_id],
            job.job_number,
        )

    def enqueue(self, job: Job) -> None:
        self._jobs.append(job)

    def peek(self, now: int) -> Optional[Job]:
        if not self._jobs:
            return None
        return min(self._jobs, key=lambda job: self._sort_key(job, now))

    def dequeue(self, now: int) -> Optional[Job]:
        job = self.peek(now)
        if job is not None:
            self.remove(job)
        return job

    def remove(self, job: Job) -> None:
        # by identity: two Job dataclasses may compare equal field-by-field
        self._jobs = [j for j in self._jobs if j is not job]

    def size(self) -> int:
        return len(self._jobs)

    def __iter__(self) -> Iterator[Job]:
        # iterate over a copy so callers may remove() while looping
        return iter(list(self._jobs))

    def __len__(self) -> int:
        return len(self._jobs)
