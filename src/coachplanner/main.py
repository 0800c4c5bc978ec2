import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

import coachplanner.models  # noqa: F401  registers all models with Base.metadata
from coachplanner.api.routes.availability import router as availability_router
from coachplanner.api.routes.calendar import router as calendar_router
from coachplanner.api.routes.sessions import router as sessions_router
from coachplanner.config import get_settings
from coachplanner.database import Base, engine
from coachplanner.schemas.system import StatusResponse


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Create tables on startup (dev convenience; migrations for production)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


def create_app() -> FastAPI:
    settings = get_settings()
    logging.getLogger("coachplanner").setLevel(settings.log_level.upper())

    app = FastAPI(
        title="CoachPlanner",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    app.include_router(availability_router)
    app.include_router(calendar_router)
    app.include_router(sessions_router)

    @app.get("/api/system/status", response_model=StatusResponse)
    async def system_status() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
