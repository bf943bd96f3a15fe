from fastapi import FastAPI

from .auth import router as auth_router
from .loads import router as loads_router
from .notifications import router as notifications_router
from .ratings import router as ratings_router
from .realtime import router as realtime_router


def register_routes(app: FastAPI) -> None:
    """Register every API router on the FastAPI application."""

    app.include_router(auth_router)
    app.include_router(loads_router)
    app.include_router(notifications_router)
    app.include_router(ratings_router)
    app.include_router(realtime_router)
