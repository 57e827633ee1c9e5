"""API routers."""

from app.routers.appointments import router as appointments_router
from app.routers.auth import router as auth_router
from app.routers.users import router as users_router

__all__ = ["appointments_router", "auth_router", "users_router"]
