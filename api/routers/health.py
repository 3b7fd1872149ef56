"""
Health check endpoint.

The simulator has no external services to ping, so "healthy" means the app
is up and a scheduler instance is attached to it.
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_scheduler
from scheduler.engine import RealTimeScheduler

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(
    scheduler: RealTimeScheduler = Depends(get_scheduler),
) -> dict:
    return {"status": "healthy", "task_count": len(scheduler.tasks)}
