"""API routes."""

from fastapi import APIRouter

from .health import router as health_router
from .bot import router as bot_router

router = APIRouter()
router.include_router(health_router)
router.include_router(bot_router)
