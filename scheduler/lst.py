"""
Least Slack Time First (LST), also known as Least Laxity First.

    slack = absolute_deadline - now - remaining_time

Slack is how long a job can still afford to wait. A job that is waiting
loses one unit of slack per tick; the running job's slack stays constant
(both `now` and `remaining_time` move by one).

That asymmetry is the whole story of LST:
- It reacts to urgency better than EDF for jobs with a lot of work left
- Two jobs with similar slack keep overtaking each other, so LST produces
  noticeably more preemptions and context switches than the other policies

refresh() recomputes slack for every ready job AND the running job once per
tick, before the preemption check. Preemption needs strictly smaller slack.
"""

from typing import Iterable

from models.job import Job
from scheduler.base import AbstractPolicy, Slack


def slack_of(job: Job, now: int) -> int:
    return job.absolute_deadline - now - job.remaining_time


class LSTPolicy(AbstractPolicy):

    def priority_of(self, job: Job, now: int) -> Slack:
        return Slack(slack_of(job, now))

    def refresh(self, jobs: Iterable[Job], now: int) -> None:
        for job in jobs:
            job.slack_time = slack_of(job, now)

    @property
    def policy_name(self) -> str:
        return "lst"

    @property
    def display_name(self) -> str:
        return "Least Slack Time First"
