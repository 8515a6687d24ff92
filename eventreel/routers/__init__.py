"""API routers."""

from eventreel.routers.auth import router as auth_router
from eventreel.routers.events import router as events_router
from eventreel.routers.password import router as password_router

__all__ = ["auth_router", "password_router", "events_router"]
