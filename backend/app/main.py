"""
Study Assistant API

FastAPI application exposing study sessions, goals with progress and
reminders, and learning analytics.

Run with:
    uvicorn app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.db.redis import close_redis_pool
from app.middleware import setup_error_handling
from app.routers import analytics_router, goals_router, health_router, sessions_router

logger = logging.getLogger(__name__)


def setup_logging(debug: bool = False) -> None:
    """Configure logging based on debug flag."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    if not debug:
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.APP_NAME} (storage: {settings.STORAGE_BACKEND})")
    yield
    if settings.uses_redis:
        await close_redis_pool()
    logger.info(f"{settings.APP_NAME} stopped")


setup_logging(settings.DEBUG)

app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_error_handling(app, debug=settings.DEBUG)

app.include_router(health_router.router)
app.include_router(sessions_router.router)
app.include_router(goals_router.router)
app.include_router(analytics_router.router)


@app.get("/")
async def root():
    return {"message": settings.APP_NAME}
