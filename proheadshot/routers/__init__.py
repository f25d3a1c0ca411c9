"""Router package exposing all API routers."""

from fastapi import APIRouter

from .headshot.router import router as headshot_router

router = APIRouter()
router.include_router(headshot_router)

__all__ = ["router", "headshot_router"]
