import httpx

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Request


USER_AGENT = "Slant3D-Mock-API/1.0"


def default_timeout(seconds: float) -> httpx.Timeout:
    return httpx.Timeout(seconds, connect=min(seconds, 5.0))


@asynccontextmanager
async def lifespan_http_client(timeout_seconds: float = 10.0) -> AsyncIterator[httpx.AsyncClient]:
    """Outbound client for webhook test deliveries. No retries: one attempt, bounded timeout."""
    async with httpx.AsyncClient(
        timeout=default_timeout(timeout_seconds),
        headers={"User-Agent": USER_AGENT},
        follow_redirects=True,
    ) as client:
        yield client  # closed automatically on exit


def get_http_client(request: Request) -> httpx.AsyncClient:
    client = getattr(request.app.state, "http_client", None)
    assert client is not None, "HTTP client not initialized (startup not run)."
    return client
