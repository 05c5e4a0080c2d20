"""Health check and welcome endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from panai_sage.generator import ResponseGenerator
from panai_sage.store.conversations import utcnow
from panai_sage.summit import SERVICE_NAME

from .dependencies import get_generator

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "timestamp": utcnow().isoformat(),
    }


@router.get("/health/llm")
async def health_llm(generator: ResponseGenerator = Depends(get_generator)) -> dict:
    """
    Single round trip to the text generation backend.

    - OK: {"success": true, "message": "...", "model": "..."}
    - Failure: 503 with the backend error
    """
    result = await generator.test_connection()
    if not result.get("success"):
        raise HTTPException(status_code=503, detail=result.get("error") or "llm_unavailable")
    return result


@router.get("/")
async def welcome() -> dict:
    return {
        "message": "Welcome to PanAI Sage API - Your intelligent guide to PanAfrican AI Summit",
        "endpoints": {
            "bot": "/api/bot/chat",
            "health": "/health",
            "info": "/api/bot/info",
        },
    }
