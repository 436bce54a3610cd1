"""
Dashboard read/write endpoints.

These mirror the entity store directly and are not part of the mocked public
API: no api-key, no ledger entries.
"""

import logging
import time
from typing import Optional
from urllib.parse import unquote

from fastapi import APIRouter, Depends, Query, Request

from slant3d_mock.api.deps import get_settings, get_store, read_json_body
from slant3d_mock.core.config import Settings
from slant3d_mock.core.errors import ConflictError, NotFoundError, RequestValidationFailed
from slant3d_mock.domain.filaments import get_filaments
from slant3d_mock.domain.identifiers import generate_tracking_number
from slant3d_mock.domain.models import OrderStatus, TERMINAL_STATUSES
from slant3d_mock.domain.store import EntityStore

logger = logging.getLogger("slant3d.router.dashboard")

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

_STATUS_VALUES = [s.value for s in OrderStatus]


@router.get("/stats")
async def dashboard_stats(request: Request, store: EntityStore = Depends(get_store)):
    stats = store.stats()
    by_status = stats["orders"]["byStatus"]
    return {
        "totalRequests": stats["requestLogs"]["total"],
        "activeOrders": by_status[OrderStatus.PENDING.value] + by_status[OrderStatus.PRINTING.value],
        "registeredWebhooks": stats["webhooks"]["total"],
        "apiStatus": "healthy",
        "uptime": int(time.monotonic() - request.app.state.started_at),
    }


@router.get("/orders")
async def dashboard_orders(status: Optional[str] = None, store: EntityStore = Depends(get_store)):
    orders = store.orders.get_by_status(status) if status else store.orders.get_all()
    return {"orders": [o.to_api() for o in orders], "totalCount": len(orders)}


@router.get("/webhooks")
async def dashboard_webhooks(store: EntityStore = Depends(get_store)):
    webhooks = store.webhooks.get_all()
    return {"webhooks": [w.to_api() for w in webhooks], "totalCount": len(webhooks)}


@router.get("/logs")
async def dashboard_logs(
    limit: Optional[int] = Query(default=None, ge=0),
    status_code: Optional[int] = Query(default=None, alias="statusCode"),
    path: Optional[str] = None,
    store: EntityStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    if status_code is not None:
        logs = store.logs.get_by_status(status_code)
    elif path:
        logs = store.logs.get_by_path(path)
    else:
        logs = store.logs.get_recent(settings.DASHBOARD_LOG_LIMIT if limit is None else limit)
    return {"logs": [e.to_api() for e in logs], "totalCount": len(logs)}


@router.delete("/logs")
async def clear_logs(store: EntityStore = Depends(get_store)):
    store.logs.clear()
    return {"message": "Request logs cleared"}


@router.delete("/webhooks/{end_point:path}")
async def remove_webhook(end_point: str, store: EntityStore = Depends(get_store)):
    end_point = unquote(end_point)
    if not store.webhooks.delete(end_point):
        raise NotFoundError("Webhook not found")
    logger.info(f"[WEBHOOK] Removed {end_point} from dashboard")
    return {"message": "Webhook removed successfully", "endpoint": end_point}


@router.put("/orders/{order_id}/status")
async def update_order_status(order_id: str, request: Request, store: EntityStore = Depends(get_store)):
    body = await read_json_body(request)
    new_status = body.get("status") if isinstance(body, dict) else None
    if new_status not in _STATUS_VALUES:
        raise RequestValidationFailed.for_field(
            "status",
            f"Status must be one of: {', '.join(_STATUS_VALUES)}",
            "INVALID_STATUS",
        )

    order = store.orders.get(order_id)
    if order is None:
        raise NotFoundError("Order not found")

    updates = {"status": new_status}
    if new_status == OrderStatus.SHIPPED.value and not order.tracking_numbers:
        updates["tracking_numbers"] = [generate_tracking_number()]
    store.orders.update(order_id, updates)
    logger.info(f"[ORDER] {order_id}: {order.status} -> {new_status}")

    return {"message": "Order status updated", "order": store.orders.get(order_id).to_api()}


@router.post("/orders/{order_id}/cancel")
async def cancel_order(order_id: str, store: EntityStore = Depends(get_store)):
    order = store.orders.get(order_id)
    if order is None:
        raise NotFoundError("Order not found")
    if order.status in {s.value for s in TERMINAL_STATUSES}:
        raise ConflictError("Order cannot be cancelled in current status")

    store.orders.update_status(order_id, OrderStatus.CANCELLED)
    logger.info(f"[ORDER] Cancelled order {order_id} from dashboard")
    return {"message": "Order cancelled successfully", "orderId": order_id}


@router.get("/filaments")
async def dashboard_filaments():
    return {"filaments": get_filaments()}


@router.post("/reset")
async def reset_store(store: EntityStore = Depends(get_store), settings: Settings = Depends(get_settings)):
    if not settings.ENABLE_RESET_ENDPOINT:
        raise NotFoundError("Endpoint not found")
    store.reset_for_testing()
    return {"message": "Storage reset"}
