"""
Real-time scheduling endpoints.

GET    /realtime/info                      → What the simulator offers
GET    /realtime/state                     → Tasks, utilization, last run's queue / CPU
POST   /realtime/reset                     → Forget the last run (tasks stay)
DELETE /realtime/tasks                     → Remove every task
POST   /realtime/task                      → Register a periodic task
POST   /realtime/schedule/{policy}         → Run rms / edf / dms / lst
GET    /realtime/analysis/schedulability   → Utilization-bound tests
POST   /realtime/compare                   → Run several policies side by side
POST   /realtime/presets/{name}            → Load a predefined task set
POST   /realtime/demo/schedulability       → RMS vs EDF near the utilization bound
GET    /realtime/statistics                → System overview

The API layer is intentionally thin:
- Validate input (Pydantic does this automatically)
- Call the RealTimeScheduler
- Turn SchedulerError into HTTP 400, unknown presets into 404

Handlers that run simulations are plain `def`: FastAPI executes them in its
threadpool, so a long run never blocks the event loop.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_scheduler
from api.schemas.realtime import (
    CompareRequest,
    ResetResponse,
    SchedulerStateResponse,
    SimulationRequest,
    TaskCreate,
    TaskCreatedResponse,
    TaskResponse,
)
from models.enums import SchedulingPolicy
from models.errors import SchedulerError
from scheduler.analysis import rms_utilization_bound
from scheduler.engine import RealTimeScheduler
from scheduler.presets import PRESETS

router = APIRouter(prefix="/realtime", tags=["realtime"])

DEMO_SIMULATION_TIME = 24


def _state(scheduler: RealTimeScheduler) -> SchedulerStateResponse:
    return SchedulerStateResponse.model_validate(scheduler.get_state().to_dict())


@router.get("/info")
async def get_info() -> dict:
    return {
        "name": "Real-Time Scheduling Algorithms",
        "description": "CPU scheduling algorithms for periodic tasks with timing constraints",
        "features": [
            "Deadline-aware scheduling",
            "Schedulability analysis",
            "Preemptive algorithms",
            "Utilization bound testing",
            "Slack time calculation",
            "Deadline miss detection",
            "Response time analysis",
        ],
        "algorithms": [
            {
                "policy": SchedulingPolicy.RMS.value,
                "name": "Rate Monotonic Scheduling (RMS)",
                "description": "Static priority assignment based on task periods",
                "characteristics": ["Fixed priority", "Preemptive", "Optimal for fixed priorities"],
            },
            {
                "policy": SchedulingPolicy.EDF.value,
                "name": "Earliest Deadline First (EDF)",
                "description": "Dynamic priority based on absolute deadlines",
                "characteristics": ["Dynamic priority", "Preemptive", "Optimal for single processor"],
            },
            {
                "policy": SchedulingPolicy.DMS.value,
                "name": "Deadline Monotonic Scheduling (DMS)",
                "description": "Static priority assignment based on relative deadlines",
                "characteristics": ["Fixed priority", "Preemptive", "Generalization of RMS"],
            },
            {
                "policy": SchedulingPolicy.LST.value,
                "name": "Least Slack Time First (LST)",
                "description": "Dynamic priority based on slack time",
                "characteristics": ["Dynamic priority", "Preemptive", "High overhead"],
            },
        ],
        "presets": {name: preset["description"] for name, preset in PRESETS.items()},
    }


@router.get("/state", response_model=SchedulerStateResponse)
async def get_state(
    scheduler: RealTimeScheduler = Depends(get_scheduler),
) -> SchedulerStateResponse:
    return _state(scheduler)


@router.post("/reset", response_model=ResetResponse)
async def reset_scheduler(
    scheduler: RealTimeScheduler = Depends(get_scheduler),
) -> ResetResponse:
    scheduler.reset()
    return ResetResponse(
        message="Real-time scheduler reset successfully",
        state=_state(scheduler),
    )


@router.delete("/tasks", status_code=204)
async def clear_tasks(
    scheduler: RealTimeScheduler = Depends(get_scheduler),
) -> None:
    scheduler.clear()


@router.post("/task", response_model=TaskCreatedResponse)
async def add_task(
    task_in: TaskCreate,
    scheduler: RealTimeScheduler = Depends(get_scheduler),
) -> TaskCreatedResponse:
    """
    Register a periodic task.

    On top of the core's checks, the API refuses a task whose execution time
    exceeds its deadline: every job of such a task would be a guaranteed miss.
    """
    effective_deadline = task_in.deadline if task_in.deadline is not None else task_in.period
    if 0 < effective_deadline < task_in.execution_time:
        raise HTTPException(status_code=400, detail="Execution time cannot exceed deadline")

    try:
        task = scheduler.add_task(
            task_in.task_id,
            task_in.execution_time,
            task_in.period,
            task_in.deadline,
            task_in.priority,
        )
    except SchedulerError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return TaskCreatedResponse(
        message=f"Real-time task {task.id} added successfully",
        task=TaskResponse.model_validate(task),
        system_state=_state(scheduler),
    )


@router.post("/schedule/{policy}")
def run_schedule(
    policy: SchedulingPolicy,
    body: SimulationRequest | None = None,
    scheduler: RealTimeScheduler = Depends(get_scheduler),
) -> dict:
    """Run one policy. Body is optional; simulation_time defaults to the hyperperiod."""
    simulation_time = body.simulation_time if body else None
    try:
        result = scheduler.simulate(policy, simulation_time)
    except SchedulerError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"message": f"{result.algorithm} completed", **result.to_dict()}


@router.get("/analysis/schedulability")
async def get_schedulability(
    scheduler: RealTimeScheduler = Depends(get_scheduler),
) -> dict:
    try:
        report = scheduler.analyze()
    except SchedulerError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "analysis": "Real-Time Schedulability Analysis",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        **report.to_dict(),
    }


@router.post("/compare")
def compare_policies(
    body: CompareRequest | None = None,
    scheduler: RealTimeScheduler = Depends(get_scheduler),
) -> dict:
    body = body or CompareRequest()
    try:
        comparison = scheduler.compare(body.algorithms, body.simulation_time)
    except SchedulerError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {
        "message": "Real-time scheduling algorithm comparison completed",
        **comparison.to_dict(include_schedule=body.include_schedule),
    }


@router.post("/presets/{name}")
async def load_preset(
    name: str,
    scheduler: RealTimeScheduler = Depends(get_scheduler),
) -> dict:
    if name not in PRESETS:
        raise HTTPException(
            status_code=404,
            detail=f"Unknown preset '{name}'. Available: {list(PRESETS)}",
        )

    scheduler.load_preset(name)
    return {
        "message": f"Preset '{name}' loaded",
        "description": PRESETS[name]["description"],
        "system_state": _state(scheduler).model_dump(),
    }


@router.post("/demo/schedulability")
def schedulability_demo(
    scheduler: RealTimeScheduler = Depends(get_scheduler),
) -> dict:
    """Load the near-bound preset and compare RMS against EDF over 24 ticks."""
    scheduler.load_preset("schedulability-demo")
    comparison = scheduler.compare(
        [SchedulingPolicy.RMS, SchedulingPolicy.EDF], DEMO_SIMULATION_TIME
    )
    state = scheduler.get_state()
    return {
        "demo": "Schedulability Analysis Demo",
        "description": "Compare RMS and EDF for tasks near utilization bound",
        "total_utilization": state.total_utilization,
        "rms_utilization_bound": rms_utilization_bound(len(state.tasks)),
        **comparison.to_dict(),
    }


@router.get("/statistics")
async def get_statistics(
    scheduler: RealTimeScheduler = Depends(get_scheduler),
) -> dict:
    state = scheduler.get_state()
    if not state.tasks:
        return {"message": "No tasks available for statistics", "task_count": 0}

    bound = rms_utilization_bound(len(state.tasks))
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "system_overview": {
            "task_count": len(state.tasks),
            "total_utilization": state.total_utilization,
            "hyper_period": state.hyper_period,
            "current_time": state.current_time,
        },
        "utilization_analysis": {
            "utilization_percentage": state.total_utilization * 100,
            "rms_utilization_bound": bound,
            "edf_utilization_bound": 1.0,
            "is_rms_schedulable": state.total_utilization <= bound,
            "is_edf_schedulable": state.total_utilization <= 1.0,
        },
        "task_details": [
            {
                "task_id": task.id,
                "period": task.period,
                "execution_time": task.execution_time,
                "deadline": task.deadline,
                "utilization": task.utilization,
                "utilization_percentage": task.utilization * 100,
                "completed_jobs": task.completed_jobs,
                "missed_deadlines": task.missed_deadlines,
            }
            for task in state.tasks
        ],
    }
