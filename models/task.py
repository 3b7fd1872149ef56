"""
Periodic task definition.

A Task is a VALUE: frozen once created. Every simulate() call works on a
snapshot of these values, so two runs (even on different threads) can never
step on each other's data.

The only "mutation" a task ever sees is its priority being recomputed for a
static policy (RMS → 1/period, DMS → 1/deadline). That happens through
dataclasses.replace(), which returns a NEW Task and leaves the old one alone.

Per-run counters (completed jobs, missed deadlines, job history) are not
stored here — they live in TaskRecord, which the simulation creates fresh
for each run.
"""

from dataclasses import dataclass, field

from models.job import Job


@dataclass(frozen=True)
class Task:
    id: str
    execution_time: int    # C: worst-case execution time per job (ticks)
    period: int            # T: release interval (ticks)
    deadline: int          # D: relative deadline, 0 < D <= T
    priority: float = 0.0  # display value only; ordering uses integer keys

    @property
    def utilization(self) -> float:
        return self.execution_time / self.period

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "execution_time": self.execution_time,
            "period": self.period,
            "deadline": self.deadline,
            "priority": self.priority,
            "utilization": self.utilization,
        }


@dataclass
class TaskRecord:
    """Per-run bookkeeping for one task."""
    task: Task
    completed_jobs: int = 0
    missed_deadlines: int = 0
    history: list[Job] = field(default_factory=list)

    @property
    def finished_jobs(self) -> int:
        return self.completed_jobs + self.missed_deadlines
