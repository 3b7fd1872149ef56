"""
Error taxonomy for the real-time scheduler.

Only configuration problems are exceptions. A missed deadline is NOT an
error: it is a normal simulation outcome, recorded in the statistics and
the schedule log, and the run keeps going.

    SchedulerError
    ├── InvalidParameter   non-positive C / T / D, duplicate id, bad end_time
    ├── InfeasibleTask     deadline greater than period
    └── EmptyTaskSet       simulate / compare / analyze with no tasks

The two parameter errors also inherit ValueError, so callers that only
know "bad input" can catch the builtin.
"""


class SchedulerError(Exception):
    """Base class for every error raised by the scheduler core."""


class InvalidParameter(SchedulerError, ValueError):
    pass


class InfeasibleTask(SchedulerError, ValueError):
    pass


class EmptyTaskSet(SchedulerError):
    def __init__(self, message: str = "No tasks to schedule"):
        super().__init__(message)
