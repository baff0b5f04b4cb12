"""FastAPI application entry point."""
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from workout_map.logging_config import configure_logging
from workout_map.routers import session as session_router
from workout_map.routers import workouts
from workout_map.session import WorkoutSession


templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open one workout session for the life of the process."""
    configure_logging()
    session = WorkoutSession.open()
    app.state.workout_session = session
    await session.locate()
    try:
        yield
    finally:
        session.close()


app = FastAPI(title="Workout Map", lifespan=lifespan)


@app.get("/", response_class=HTMLResponse, tags=["dashboard"])
async def dashboard(request: Request) -> HTMLResponse:
    """Workout list plus the settings the browser needs to draw the map."""
    session: WorkoutSession = request.app.state.workout_session
    settings = session.settings
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "rows": session.list_renderer.rows,
            "markers": session.map_renderer.markers,
            "view": session.map_renderer.view,
            "message": session.controller.message,
            "tile_url": settings.map_tile_url,
            "attribution": settings.map_attribution,
        },
    )


@app.get("/health", tags=["system"])
async def health_check() -> dict[str, str]:
    """Simple health probe for liveness checks."""
    return {"status": "ok"}


app.include_router(session_router.router)
app.include_router(workouts.router)
