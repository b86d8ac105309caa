"""
Main FastAPI application for the member statistics API.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from member_stats import __version__
from member_stats.core.config import settings
from member_stats.core.database import init_database
from member_stats.core.logging import configure_logging

from member_stats.api.error_handlers import register_error_handlers
from member_stats.api.middleware import BodySizeMiddleware, LoggingMiddleware, RequestIDMiddleware
from member_stats.api.routers import health, skills, statistics

configure_logging(level=settings.LOG_LEVEL, format_type=settings.LOG_FORMAT)
logger = logging.getLogger(__name__)


# ============================================================================
# LIFESPAN
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    logger.info("Starting member statistics API")

    try:
        await init_database()
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

    logger.info(f"API Documentation: http://{settings.API_HOST}:{settings.API_PORT}/docs")

    yield

    logger.info("Shutting down member statistics API...")


app = FastAPI(
    title="Member Statistics API",
    description="Member profile statistics, rating history and skills",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

register_error_handlers(app)


# ============================================================================
# MIDDLEWARE
# ============================================================================

# Order matters - last added = first executed
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)
app.add_middleware(BodySizeMiddleware)
app.add_middleware(RequestIDMiddleware)


# ============================================================================
# ROUTERS
# ============================================================================

app.include_router(health.router)
app.include_router(statistics.router)
app.include_router(skills.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "member_stats.api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        log_level=settings.LOG_LEVEL.lower()
    )
