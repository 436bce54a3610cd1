import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from slant3d_mock.api.deps import get_settings
from slant3d_mock.core.config import Settings

router = APIRouter(tags=["meta"])

PUBLIC_ENDPOINTS = [
    "GET /api/filament",
    "POST /api/slicer",
    "POST /api/order/estimate",
    "POST /api/order/estimateShipping",
    "POST /api/order",
    "GET /api/order",
    "GET /api/order/{id}/get-tracking",
    "DELETE /api/order/{id}",
    "POST /api/customer/subscribeWebhook",
]


@router.get("/", response_class=PlainTextResponse)
async def banner():
    return "Mock Slant3D API - Development Server"


@router.get("/health")
async def health(request: Request, settings: Settings = Depends(get_settings)):
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "uptime": int(time.monotonic() - request.app.state.started_at),
        "version": settings.VERSION,
    }


@router.get("/api")
async def api_index(settings: Settings = Depends(get_settings)):
    return {
        "message": "Mock Slant3D API - Official Format Only",
        "version": settings.VERSION,
        "endpoints": PUBLIC_ENDPOINTS,
        "format": "Official Slant3D API - snake_case fields, array-based requests",
    }
