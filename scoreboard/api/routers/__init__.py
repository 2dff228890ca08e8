"""Aggregate API routers."""

from fastapi import APIRouter

from .auth import router as auth_router
from .scores import router as scores_router
from .system import router as system_router
from .tracks import router as tracks_router
from .users import router as users_router

ALL_ROUTERS: tuple[APIRouter, ...] = (
    system_router,
    auth_router,
    tracks_router,
    scores_router,
    users_router,
)

__all__ = ["ALL_ROUTERS"]
