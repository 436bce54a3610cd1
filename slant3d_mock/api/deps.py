"""FastAPI dependencies shared by the routers."""

import logging
from typing import Any, Optional

from fastapi import Depends, Header, Request

from slant3d_mock.core.config import Settings
from slant3d_mock.core.errors import AuthError, MalformedInputError
from slant3d_mock.core.observability import RequestTrace
from slant3d_mock.domain.identifiers import RandomIdAllocator
from slant3d_mock.domain.store import EntityStore
from slant3d_mock.domain.validators import is_valid_api_key

logger = logging.getLogger("slant3d.api")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> EntityStore:
    return request.app.state.store


def require_api_key(api_key: Optional[str] = Header(default=None, alias="api-key")) -> str:
    """Any non-empty key is accepted; it is recorded, never checked."""
    if not api_key or not is_valid_api_key(api_key):
        raise AuthError()
    return api_key


def open_trace(
    request: Request,
    api_key: str = Depends(require_api_key),
    store: EntityStore = Depends(get_store),
) -> RequestTrace:
    path = request.url.path.rstrip("/") or "/"
    trace = RequestTrace(store.logs, request.method, path, api_key=api_key)
    request.state.trace = trace
    return trace


def next_order_id(
    store: EntityStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> Optional[str]:
    """
    Order id for a new order, or None to let the store count sequentially.
    """
    if settings.ORDER_ID_STRATEGY == "sequential":
        return None
    return RandomIdAllocator(taken=store.orders.exists).next_id()


async def read_json_body(request: Request, *, as_validation: bool = False) -> Any:
    try:
        return await request.json()
    except ValueError as exc:
        logger.debug(f"[REQUEST] Unparsable body on {request.url.path}: {exc}")
        raise MalformedInputError(as_validation=as_validation)
