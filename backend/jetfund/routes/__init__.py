from __future__ import annotations

from fastapi import APIRouter

from . import auth, earnings, hackatime, health, projects, sessions, upload, user

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(sessions.router)
api_router.include_router(projects.router)
api_router.include_router(user.router)
api_router.include_router(earnings.router)
api_router.include_router(hackatime.router)
api_router.include_router(upload.router)

__all__ = ["api_router"]
