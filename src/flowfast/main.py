"""FastAPI application for the FlowFast coaching app."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import get_settings
from .api.routes import coach, plans, sessions, feedback, profile
from .api.exception_handlers import register_exception_handlers
from .utils.log_sanitizer import configure_logging


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info(f"Starting FlowFast Coach v{__version__}")
    logger.info(f"History DB: {settings.history_db_path}")
    logger.info(f"Local cache: {settings.local_cache_path}")
    yield
    logger.info("Shutting down FlowFast Coach")


app = FastAPI(
    title="FlowFast Coach API",
    description="Adaptive workout recommendations, plans and session playback",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(coach.router, prefix="/api/v1/coach", tags=["coach"])
app.include_router(plans.router, prefix="/api/v1/plans", tags=["plans"])
app.include_router(sessions.router, prefix="/api/v1/sessions", tags=["sessions"])
app.include_router(feedback.router, prefix="/api/v1/feedback", tags=["feedback"])
app.include_router(profile.router, prefix="/api/v1", tags=["profile"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "FlowFast Coach API",
        "version": __version__,
        "status": "healthy",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


def run() -> None:
    import uvicorn

    uvicorn.run(
        "flowfast.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
