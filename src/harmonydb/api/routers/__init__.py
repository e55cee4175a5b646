"""API router initialization."""

# Hey future me, this aggregates the routers main.py mounts. release/edit routes carry their full
# paths (HTML under /release and /edit, JSON under /api/...), health gets the /health prefix here.

from fastapi import APIRouter

from harmonydb.api.routers import edit, health, release

app_router = APIRouter()
app_router.include_router(release.router)
app_router.include_router(edit.router)
app_router.include_router(health.router, prefix="/health", tags=["Health"])

__all__ = [
    "app_router",
    "edit",
    "health",
    "release",
]
