"""
Shared enumerations used across the entire project.

Using Python enums (inheriting from str) means:
- They serialize to JSON automatically ("rms", not "SchedulingPolicy.RMS")
- They work as FastAPI path and body parameters
- Typos become immediate errors instead of silent bugs
"""

import enum


class JobStatus(str, enum.Enum):
    READY = "READY"            # released, waiting in the ready queue
    RUNNING = "RUNNING"        # occupying the CPU this tick
    COMPLETED = "COMPLETED"    # remaining_time reached 0 before the deadline
    MISSED = "MISSED"          # absolute deadline passed with work left


class SchedulingPolicy(str, enum.Enum):
    RMS = "rms"    # Rate Monotonic: static priority, shorter period wins
    EDF = "edf"    # Earliest Deadline First: dynamic, earliest absolute deadline wins
    DMS = "dms"    # Deadline Monotonic: static priority, shorter relative deadline wins
    LST = "lst"    # Least Slack Time First: dynamic, smallest slack wins


class ScheduleAction(str, enum.Enum):
    EXECUTING = "executing"
    IDLE = "idle"
    COMPLETED = "completed"
    DEADLINE_MISSED = "deadline_missed"
