"""
Service-level API routes: health check and echo.
"""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Request


router = APIRouter(prefix="/api", tags=["service"])


@router.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.post("/echo")
async def echo(request: Request):
    """
    Echo the incoming request back to the caller.

    Useful as a local target when trying out the executor.
    """
    raw = await request.body()
    body: Any = None
    if raw:
        try:
            body = await request.json()
        except ValueError:
            body = raw.decode("utf-8", errors="replace")

    return {
        "status": "ok",
        "method": request.method,
        "url": str(request.url),
        "headers": dict(request.headers),
        "body": body,
    }
