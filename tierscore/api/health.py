"""Liveness endpoint (no dependencies)."""

from fastapi import APIRouter

from tierscore.core.config import settings

root_router = APIRouter(tags=["health"])


@root_router.get("/healthz")
def healthz():
    return {"status": "ok", "env": settings.ENV}
