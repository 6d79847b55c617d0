# backend/skillswap/main.py
"""
SkillSwap API application.

Run locally with:
    uvicorn skillswap.main:app --reload
"""

from contextlib import asynccontextmanager
import logging
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__, models  # noqa: F401
from .core.config import settings
from .errors import register_error_handlers
from .routes.v1 import admin as admin_v1
from .routes.v1 import health as health_v1
from .routes.v1 import prometheus as prometheus_v1
from .routes.v1 import reviews as reviews_v1
from .routes.v1 import sessions as sessions_v1

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def app_lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup/shutdown."""
    logger.info("SkillSwap API starting up...")
    logger.info(f"Environment: {settings.environment}")
    if settings.redis_enabled:
        logger.info("Redis session locks enabled")
    else:
        logger.info("Redis not configured; relying on database row locks only")
    yield
    logger.info("SkillSwap API shutting down...")


app = FastAPI(
    title="SkillSwap API",
    description="Peer-to-peer skill exchange: booking, session lifecycle and reviews",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=app_lifespan,
)

# Register unified error envelope handlers
register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["*"],
)

api_v1 = APIRouter(prefix="/api/v1")
api_v1.include_router(sessions_v1.router, prefix="/sessions")
api_v1.include_router(reviews_v1.router, prefix="/reviews")
api_v1.include_router(admin_v1.router, prefix="/admin")

app.include_router(api_v1)
app.include_router(health_v1.router)
app.include_router(prometheus_v1.router)
