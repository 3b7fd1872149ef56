"""
Shared test fixtures.

The scheduler core has no infrastructure to fake: a RealTimeScheduler is a
plain in-memory object. The API client talks to the FastAPI app in-process:
- HTTP server → httpx.AsyncClient with ASGI transport (no network)
- app.state.scheduler → a fresh RealTimeScheduler per test via dependency_overrides

This means tests:
- Run in milliseconds
- Are fully isolated (each test gets its own scheduler)
"""

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from api.main import create_app
from api.dependencies import get_scheduler
from scheduler.engine import RealTimeScheduler


@pytest.fixture
def scheduler() -> RealTimeScheduler:
    return RealTimeScheduler(pool_size=2)


@pytest_asyncio.fixture
async def client(scheduler):
    """
    Test HTTP client bound to a FastAPI app whose routes all share the
    `scheduler` fixture, so tests can also inspect it directly.
    """
    app = create_app()

    async def override_get_scheduler():
        return scheduler

    app.dependency_overrides[get_scheduler] = override_get_scheduler

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
