"""
API V1 Endpoints Package
Exports routers used by main app
"""
from .auth import router as auth_router
from .companies import router as companies_router
from .reminders import router as reminders_router
from .scheduler import router as scheduler_router

__all__ = [
    "auth_router",
    "companies_router",
    "reminders_router",
    "scheduler_router",
]
