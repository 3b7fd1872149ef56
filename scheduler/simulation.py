"""
Simulation loop — the discrete-time driver.

One call to step() processes exactly one tick, always in this order:

    1. release      every task whose period divides now → new READY job
    2. refresh      policy hook (LST recomputes slack for all live jobs)
    3. preempt      running job vs. best ready job, per policy rule
    4. dispatch     CPU idle → pop the policy-minimal ready job
    5. execute      log `executing` (or `idle`), remaining_time -= 1, now += 1
    6. complete     remaining_time == 0 → COMPLETED, log `completed`
    7. miss sweep   any READY/RUNNING job with absolute_deadline <= now → MISSED

The order matters: a job released at t can preempt at t,
and a job that finishes exactly on its deadline is completed (step 6) before
the sweep (step 7) could call it missed.

The run stops when now == end_time, whatever is still outstanding. Jobs
left in the ready queue or on the CPU are reported as `pending_jobs`:
neither completed nor missed.

Everything here is private to one Simulation instance — queue, counters,
schedule log, task records — so separate instances can run on separate
threads without locks.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from models.enums import JobStatus, ScheduleAction, SchedulingPolicy
from models.job import Job, ScheduleEvent
from models.task import Task, TaskRecord
from scheduler.analysis import Statistics, compute_statistics, rms_utilization_bound
from scheduler.base import AbstractPolicy
from scheduler.job_factory import is_release_instant, release
from scheduler.ready_queue import ReadyQueue
from scheduler.registry import create_policy

logger = logging.getLogger(__name__)


class Simulation:

    def __init__(self, policy: AbstractPolicy, tasks: Iterable[Task], end_time: int):
        self.policy = policy
        self.tasks: tuple[Task, ...] = policy.prepare(tasks)
        policy.bind(self.tasks)

        self.end_time = end_time
        self.current_time = 0
        self.records = [TaskRecord(task) for task in self.tasks]
        self._records_by_id = {record.task.id: record for record in self.records}
        self.ready_queue = ReadyQueue(
            policy, {task.id: index for index, task in enumerate(self.tasks)}
        )
        self.running_job: Optional[Job] = None
        self.schedule: list[ScheduleEvent] = []
        self.preemptions = 0
        self.context_switches = 0

    @property
    def finished(self) -> bool:
        return self.current_time >= self.end_time

    @property
    def pending_jobs(self) -> int:
        return self.ready_queue.size() + (1 if self.running_job else 0)

    def run(self) -> "Simulation":
        """Process the remaining ticks up to end_time."""
        while not self.finished:
            self.step()
        return self

    def step(self) -> None:
        now = self.current_time
        self._release_jobs(now)
        self.policy.refresh(self._live_jobs(), now)
        self._check_preemption(now)
        self._dispatch(now)
        self._execute(now)
        self._check_completion()
        self._check_missed_deadlines()

    # ── Tick phases ─────────────────────────────────────────────

    def _release_jobs(self, now: int) -> None:
        for record in self.records:
            if is_release_instant(record.task, now):
                self.ready_queue.enqueue(release(record.task, now, record.finished_jobs))

    def _live_jobs(self) -> list[Job]:
        jobs = list(self.ready_queue)
        if self.running_job is not None:
            jobs.append(self.running_job)
        return jobs

    def _check_preemption(self, now: int) -> None:
        if self.running_job is None or self.ready_queue.size() == 0:
            return

        candidate = self.ready_queue.peek(now)
        if not self.policy.should_preempt(self.running_job, candidate, now):
            return

        logger.debug(
            f"t={now}: {candidate.task_id}#{candidate.job_number} preempts "
            f"{self.running_job.task_id}#{self.running_job.job_number}"
        )
        self.running_job.status = JobStatus.READY
        self.ready_queue.enqueue(self.running_job)
        self.running_job = None
        self.preemptions += 1
        self.context_switches += 1

    def _dispatch(self, now: int) -> None:
        if self.running_job is not None:
            return

        job = self.ready_queue.dequeue(now)
        if job is None:
            return

        job.status = JobStatus.RUNNING
        if job.start_time is None:
            job.start_time = now
            job.response_time = now - job.release_time
        self.running_job = job
        self.context_switches += 1

    def _execute(self, now: int) -> None:
        job = self.running_job
        if job is None:
            self.schedule.append(ScheduleEvent(
                time=now,
                action=ScheduleAction.IDLE,
                task_id=ScheduleEvent.IDLE_TASK_ID,
            ))
        else:
            self.schedule.append(ScheduleEvent(
                time=now,
                action=ScheduleAction.EXECUTING,
                task_id=job.task_id,
                job_number=job.job_number,
                remaining_time=job.remaining_time,
                deadline=job.absolute_deadline,
                slack_time=job.slack_time,
            ))
            job.remaining_time -= 1

        self.current_time += 1

    def _check_completion(self) -> None:
        job = self.running_job
        if job is None or job.remaining_time > 0:
            return

        job.status = JobStatus.COMPLETED
        job.completion_time = self.current_time
        record = self._records_by_id[job.task_id]
        record.completed_jobs += 1
        record.history.append(job)
        self.schedule.append(ScheduleEvent(
            time=self.current_time,
            action=ScheduleAction.COMPLETED,
            task_id=job.task_id,
            job_number=job.job_number,
        ))
        self.running_job = None

    def _check_missed_deadlines(self) -> None:
        now = self.current_time
        for job in self.ready_queue:
            if job.absolute_deadline <= now:
                self.ready_queue.remove(job)
                self._mark_missed(job)

        if self.running_job is not None and self.running_job.absolute_deadline <= now:
            self._mark_missed(self.running_job)
            self.running_job = None

    def _mark_missed(self, job: Job) -> None:
        job.status = JobStatus.MISSED
        record = self._records_by_id[job.task_id]
        record.missed_deadlines += 1
        record.history.append(job)
        self.schedule.append(ScheduleEvent(
            time=self.current_time,
            action=ScheduleAction.DEADLINE_MISSED,
            task_id=job.task_id,
            job_number=job.job_number,
        ))
        logger.debug(
            f"t={self.current_time}: {job.task_id}#{job.job_number} missed its "
            f"deadline ({job.remaining_time} tick(s) of work left)"
        )


# ── One-shot runner ────────────────────────────────────────────


@dataclass
class SimulationResult:
    policy: str
    algorithm: str
    is_schedulable: Optional[bool]       # utilization test; None if the policy has none
    utilization_bound: Optional[float]   # Liu & Layland bound, RMS only
    schedule: list[ScheduleEvent]
    statistics: Statistics
    simulation: Simulation = field(repr=False, compare=False)

    @property
    def tasks(self) -> tuple[Task, ...]:
        """Task values as prepared for this run (static priorities assigned)."""
        return self.simulation.tasks

    def to_dict(self, include_schedule: bool = True) -> dict:
        data = {
            "policy": self.policy,
            "algorithm": self.algorithm,
            "is_schedulable": self.is_schedulable,
            "statistics": self.statistics.to_dict(),
        }
        if self.utilization_bound is not None:
            data["utilization_bound"] = self.utilization_bound
        if include_schedule:
            data["schedule"] = [event.to_dict() for event in self.schedule]
        return data


def run_simulation(
    policy: SchedulingPolicy | str,
    tasks: Iterable[Task],
    end_time: int,
) -> SimulationResult:
    """
    Run one policy over a task snapshot, start to finish.

    Builds a fresh policy and a fresh Simulation, so calling this from
    several threads at once is safe as long as `tasks` is immutable.
    """
    active = create_policy(policy)
    tasks = tuple(tasks)
    simulation = Simulation(active, tasks, end_time).run()

    return SimulationResult(
        policy=active.policy_name,
        algorithm=active.display_name,
        is_schedulable=active.is_schedulable(tasks),
        utilization_bound=(
            rms_utilization_bound(len(tasks))
            if active.policy_name == SchedulingPolicy.RMS.value else None
        ),
        schedule=simulation.schedule,
        statistics=compute_statistics(simulation),
        simulation=simulation,
    )
