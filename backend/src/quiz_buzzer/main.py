"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from quiz_buzzer.api.routes.state import router as state_router
from quiz_buzzer.api.websockets.quiz_ws import quiz_websocket
from quiz_buzzer.config import settings
from quiz_buzzer.services.quiz_context import QuizContext

logger = logging.getLogger(__name__)


def create_quiz_context() -> QuizContext:
    """Build the quiz context from settings."""
    if not settings.admin_token:
        logger.warning("ADMIN_TOKEN not set - any connection may register as admin!")
    return QuizContext(
        admin_token=settings.admin_token,
        default_color=settings.default_team_color,
        send_timeout=settings.send_timeout_seconds,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup: tests may install their own context beforehand
    if not hasattr(app.state, "quiz"):
        app.state.quiz = create_quiz_context()
    yield


app = FastAPI(
    title="Quiz Buzzer",
    description="Live quiz buzzer - first-buzz ranking per question round",
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"ok": True}


app.include_router(state_router)


@app.websocket("/ws")
async def websocket_quiz(websocket: WebSocket):
    """WebSocket endpoint for admin, team and guest clients."""
    await quiz_websocket(websocket, app.state.quiz)


# Static pages go last so they never shadow the API routes
static_dir = Path(settings.static_dir)
if static_dir.is_dir():
    app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")


def run() -> None:
    """Run the server with uvicorn."""
    import uvicorn

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(f"Server listening on port {settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level)


if __name__ == "__main__":
    run()
