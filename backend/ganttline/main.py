"""
Ganttline - dependency-aware task scheduling for Gantt views.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from ganttline.config import get_settings
from ganttline.exceptions import register_exception_handlers
from ganttline.logging_config import get_logger, setup_logging
from ganttline.routes import schedule

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    logger.info("Starting Ganttline API...")
    yield
    logger.info("Shutting down Ganttline API...")


app = FastAPI(
    title=get_settings().app_name,
    description="Dependency-aware task scheduler: critical path, resource leveling, manual pins",
    version="0.1.0",
    lifespan=lifespan,
)

# Register custom exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(schedule.router, prefix="/schedule", tags=["Schedule"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
