"""
Pytest configuration and fixtures for Ganttline tests.
"""

from datetime import date

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from ganttline.main import app
from ganttline.models import ScheduleConfiguration, Task

# Monday, ISO week 33
PROJECT_START = date(2025, 8, 11)


@pytest.fixture
def config() -> ScheduleConfiguration:
    """Mon-Fri calendar, 8 hour days, starting on a Monday."""
    return ScheduleConfiguration(project_start_date=PROJECT_START)


@pytest.fixture
def make_task():
    """Factory for tasks with sensible defaults."""
    def _make(task_id, hours=8.0, assignee="Ana", deps=(), **kwargs) -> Task:
        return Task(
            id=task_id,
            estimated_hours=hours,
            assignee=assignee,
            dependency_ids=list(deps),
            **kwargs,
        )
    return _make


@pytest_asyncio.fixture(scope="function")
async def client():
    """Async test client bound to the ASGI app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
