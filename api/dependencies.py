"""
FastAPI dependency injection.

An endpoint declares `scheduler: RealTimeScheduler = Depends(get_scheduler)`
and receives the instance created during startup. Tests replace it through
app.dependency_overrides, so every test gets a fresh, isolated scheduler.
"""

from fastapi import Request

from scheduler.engine import RealTimeScheduler


async def get_scheduler(request: Request) -> RealTimeScheduler:
    """Returns the scheduler stored on the app during startup."""
    return request.app.state.scheduler
