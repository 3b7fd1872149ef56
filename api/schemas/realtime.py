"""
Pydantic schemas for the /realtime endpoints.

These are NOT the core's dataclasses — they define the HTTP API contract:
- TaskCreate: request body for registering a periodic task
- SimulationRequest / CompareRequest: request bodies for running policies
- TaskResponse / SchedulerStateResponse: what we send back

Range checks on C / T / D are deliberately left to the core (which raises
InvalidParameter / InfeasibleTask → HTTP 400). Pydantic only enforces types,
so a non-integer period is a 422, but period=0 is a 400 with the core's message.
"""

from typing import Optional

from pydantic import BaseModel, Field

from models.enums import SchedulingPolicy


class TaskCreate(BaseModel):
    """Request body for POST /realtime/task."""

    task_id: str = Field(..., min_length=1, max_length=64, examples=["T1"])
    execution_time: int = Field(..., description="C: ticks of work per job")
    period: int = Field(..., description="T: ticks between releases")
    deadline: Optional[int] = Field(
        default=None,
        description="D: relative deadline, defaults to the period",
    )
    priority: float = 0.0


class SimulationRequest(BaseModel):
    """Request body for POST /realtime/schedule/{policy}."""

    simulation_time: Optional[int] = Field(
        default=None,
        description="Ticks to simulate; defaults to the hyperperiod",
    )


class CompareRequest(BaseModel):
    """Request body for POST /realtime/compare."""

    simulation_time: Optional[int] = None
    algorithms: list[SchedulingPolicy] = Field(
        default_factory=lambda: list(SchedulingPolicy),
        min_length=1,
    )
    include_schedule: bool = True


class TaskResponse(BaseModel):
    id: str
    execution_time: int
    period: int
    deadline: int
    priority: float
    utilization: float

    # read straight from the frozen Task dataclass (utilization is a property)
    model_config = {"from_attributes": True}


class TaskStateResponse(TaskResponse):
    completed_jobs: int
    missed_deadlines: int


class SchedulerStateResponse(BaseModel):
    """Response body for GET /realtime/state."""

    tasks: list[TaskStateResponse]
    total_utilization: float
    hyper_period: int
    ready_queue_size: int
    running_job: Optional[dict] = None
    current_time: int


class TaskCreatedResponse(BaseModel):
    message: str
    task: TaskResponse
    system_state: SchedulerStateResponse


class ResetResponse(BaseModel):
    message: str
    state: SchedulerStateResponse
