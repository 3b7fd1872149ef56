"""
Seed script — registers a sample task set against a running API.

Usage:
    uvicorn api.main:app            # in another terminal
    python -m scripts.seed_tasks

This creates the hard real-time set (deadlines shorter than periods), which
is the interesting one: RMS misses deadlines on it, EDF does not.
"""

import httpx

from config.settings import settings

TASKS = [
    {"task_id": "T1", "execution_time": 2, "period": 5},
    {"task_id": "T2", "execution_time": 3, "period": 10, "deadline": 8},
    {"task_id": "T3", "execution_time": 4, "period": 15, "deadline": 12},
]


def seed(base_url: str = settings.API_BASE_URL) -> None:
    client = httpx.Client(base_url=base_url, timeout=10.0)

    print(f"Registering {len(TASKS)} tasks at {base_url}...\n")

    for task in TASKS:
        resp = client.post("/realtime/task", json=task)
        resp.raise_for_status()
        data = resp.json()
        print(
            f"  {data['task']['id']}: C={data['task']['execution_time']} "
            f"T={data['task']['period']} D={data['task']['deadline']} "
            f"(U={data['task']['utilization']:.3f})"
        )

    state = data["system_state"]
    print(
        f"\nTotal utilization {state['total_utilization']:.4f}, "
        f"hyperperiod {state['hyper_period']}"
    )
    print(f"Run RMS:   curl -X POST {base_url}/realtime/schedule/rms")
    print(f"Compare:   curl -X POST {base_url}/realtime/compare -H 'Content-Type: application/json' -d '{{}}'")


if __name__ == "__main__":
    seed()
