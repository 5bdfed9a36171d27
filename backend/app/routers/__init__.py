"""API Routers package."""

from app.routers import analytics as analytics_router
from app.routers import goals as goals_router
from app.routers import health as health_router
from app.routers import sessions as sessions_router

__all__ = ["analytics_router", "goals_router", "health_router", "sessions_router"]
