"""
Predefined task sets for demos.

    periodic             T1(3,10)  T2(2,15)  T3(1,20)          U ≈ 0.483, below the RMS bound
    hard-realtime        T1(2,5)   T2(3,10,8) T3(4,15,12)      U ≈ 0.967, above the RMS bound
    schedulability-demo  T1(1,4)   T2(2,6)   T3(1,8)           U ≈ 0.708, just below the RMS bound

Tuples are (id, execution_time, period, deadline).
"""

from models.task import Task
from scheduler.task_registry import build_task

PRESETS: dict[str, dict] = {
    "periodic": {
        "description": "Standard periodic tasks: T1(3,10), T2(2,15), T3(1,20)",
        "tasks": [("T1", 3, 10, 10), ("T2", 2, 15, 15), ("T3", 1, 20, 20)],
    },
    "hard-realtime": {
        "description": (
            "Hard real-time tasks with tight deadlines: "
            "T1(2,5), T2(3,10,8), T3(4,15,12)"
        ),
        "tasks": [("T1", 2, 5, 5), ("T2", 3, 10, 8), ("T3", 4, 15, 12)],
    },
    "schedulability-demo": {
        "description": "Task set close to the RMS utilization bound: T1(1,4), T2(2,6), T3(1,8)",
        "tasks": [("T1", 1, 4, 4), ("T2", 2, 6, 6), ("T3", 1, 8, 8)],
    },
}


def preset_names() -> list[str]:
    return list(PRESETS)


def preset_tasks(name: str) -> list[Task]:
    """Build the task list for a preset. Raises KeyError for an unknown name."""
    if name not in PRESETS:
        raise KeyError(f"Unknown preset: '{name}'. Available: {preset_names()}")
    return [build_task(*params) for params in PRESETS[name]["tasks"]]
