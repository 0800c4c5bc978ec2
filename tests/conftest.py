from collections.abc import AsyncGenerator
from datetime import date, time

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from coachplanner.database import Base, get_db
from coachplanner.main import app
from coachplanner.models.session import SCHEDULED, CourseSession
from coachplanner.scheduling.overlap import duration_minutes

test_engine = create_async_engine("sqlite+aiosqlite://", echo=False)
test_session = async_sessionmaker(test_engine, expire_on_commit=False)


async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with test_session() as session:
        yield session


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
async def setup_db() -> AsyncGenerator[None, None]:
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def make_session(
    coach_id: int,
    day: date,
    start: time,
    end: time,
    status: str = SCHEDULED,
    classroom_id: int | None = None,
    title: str = "French B1",
) -> CourseSession:
    return CourseSession(
        coach_id=coach_id,
        classroom_id=classroom_id,
        title=title,
        scheduled_date=day,
        start_time=start,
        end_time=end,
        duration_minutes=duration_minutes(start, end),
        status=status,
    )
