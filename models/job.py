"""
Job — one released instance of a periodic task.

Lifecycle (owned by the simulation loop):

    release ──> READY ──dispatch──> RUNNING ──remaining_time == 0──> COMPLETED
                  ▲                    │
                  └────preemption──────┘
    READY / RUNNING ──absolute_deadline <= now──> MISSED

COMPLETED and MISSED are terminal: the job is moved into its task's history
and never looked at by the scheduler again.

ScheduleEvent is the append-only trace entry the loop writes every tick.
"""

from dataclasses import dataclass, asdict
from typing import Optional

from models.enums import JobStatus, ScheduleAction


@dataclass
class Job:
    task_id: str
    job_number: int            # 1-based sequence number within the task
    release_time: int
    absolute_deadline: int     # release_time + relative deadline
    execution_time: int
    remaining_time: int
    status: JobStatus = JobStatus.READY
    start_time: Optional[int] = None
    completion_time: Optional[int] = None
    response_time: Optional[int] = None   # start_time - release_time
    slack_time: Optional[int] = None      # only maintained under LST

    def to_dict(self) -> dict:
        data = asdict(self)
        data["status"] = self.status.value
        return data


@dataclass(frozen=True)
class ScheduleEvent:
    time: int
    action: ScheduleAction
    task_id: str
    job_number: Optional[int] = None
    remaining_time: Optional[int] = None
    deadline: Optional[int] = None
    slack_time: Optional[int] = None

    IDLE_TASK_ID = "IDLE"

    def to_dict(self) -> dict:
        data = {k: v for k, v in asdict(self).items() if v is not None}
        data["action"] = self.action.value
        return data
