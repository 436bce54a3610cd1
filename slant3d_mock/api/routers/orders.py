import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request

from slant3d_mock.api.deps import get_store, next_order_id, open_trace, read_json_body
from slant3d_mock.core.errors import ConflictError, NotFoundError, RequestValidationFailed
from slant3d_mock.core.observability import RequestTrace
from slant3d_mock.domain.models import Address, Order, OrderStatus
from slant3d_mock.domain.pricing import estimate_order
from slant3d_mock.domain.store import EntityStore
from slant3d_mock.domain.validators import validate_order_items

logger = logging.getLogger("slant3d.router.orders")

router = APIRouter(prefix="/api/order", tags=["order"])


def build_order(item: Dict[str, Any], order_id: Optional[str]) -> Dict[str, Any]:
    """Map one validated order item onto the stored order fields."""
    prices = estimate_order(item)

    billing = Address.from_full_name(
        item["name"],
        address1=item["bill_to_street_1"],
        address2=item.get("bill_to_street_2") or None,
        city=item["bill_to_city"],
        state=item["bill_to_state"],
        zip=item["bill_to_zip"],
        country=item["bill_to_country_as_iso"],
        phone=item.get("phone") or None,
    )
    shipping = Address.from_full_name(
        item["ship_to_name"],
        address1=item["ship_to_street_1"],
        address2=item.get("ship_to_street_2") or None,
        city=item["ship_to_city"],
        state=item["ship_to_state"],
        zip=item["ship_to_zip"],
        country=item["ship_to_country_as_iso"],
    )

    return {
        "order_id": order_id,
        "order_number": item["orderNumber"],
        "status": OrderStatus.PENDING.value,
        "filename": item["filename"],
        "file_url": item["fileURL"],
        "quantity": str(item["order_quantity"]),
        "color": item["order_item_color"],
        "profile": item.get("profile") or "PLA",
        "printing_cost": prices["printingCost"],
        "shipping_cost": prices["shippingCost"],
        "total_price": prices["totalPrice"],
        "billing_address": billing,
        "shipping_address": shipping,
        "email": item["email"],
        "residential": item.get("ship_to_is_US_residential") == "true",
    }


def order_timestamp(order: Order) -> Dict[str, int]:
    """Firestore-style ``{_seconds, _nanoseconds}`` for ``created_at``."""
    millis = int(order.created_at.timestamp() * 1000)
    return {"_seconds": millis // 1000, "_nanoseconds": (millis % 1000) * 1_000_000}


def numeric_order_id(order_id: str) -> Optional[int]:
    return int(order_id) if order_id.isdigit() else None


@router.post("")
@router.post("/", include_in_schema=False)
async def create_order(
    request: Request,
    trace: RequestTrace = Depends(open_trace),
    store: EntityStore = Depends(get_store),
    order_id: Optional[str] = Depends(next_order_id),
):
    """Create an order from the first item; responds with ``{orderId}`` only."""
    body = await read_json_body(request)
    trace.request_body = body

    violation = validate_order_items(body)
    if violation is not None:
        raise RequestValidationFailed(violation)

    order = store.orders.create(build_order(body[0], order_id))
    logger.info(f"[ORDER] Created order {order.order_id} total={order.total_price}")

    response = {"orderId": order.order_id}
    trace.finish(200, response_body=response)
    return response


@router.get("")
@router.get("/", include_in_schema=False)
async def list_orders(
    trace: RequestTrace = Depends(open_trace),
    store: EntityStore = Depends(get_store),
):
    orders_data = [
        {
            # numeric here, unlike every other response
            "orderId": numeric_order_id(order.order_id),
            "orderTimestamp": order_timestamp(order),
        }
        for order in store.orders.get_all()
    ]
    trace.finish(200, response_body={"orderCount": len(orders_data)})
    return {"ordersData": orders_data}


@router.delete("/{order_id}")
async def cancel_order(
    order_id: str,
    trace: RequestTrace = Depends(open_trace),
    store: EntityStore = Depends(get_store),
):
    order = store.orders.get(order_id)
    if order is None:
        raise NotFoundError("Order not found")
    if order.status == OrderStatus.SHIPPED.value:
        raise ConflictError("Cannot cancel shipped order")
    if order.status == OrderStatus.CANCELLED.value:
        raise ConflictError("Order already cancelled")

    store.orders.update_status(order_id, OrderStatus.CANCELLED)
    logger.info(f"[ORDER] Cancelled order {order_id}")

    response = {"status": "Order cancelled"}
    trace.finish(200, response_body=response)
    return response


@router.get("/{order_id}/get-tracking")
async def get_tracking(
    order_id: str,
    trace: RequestTrace = Depends(open_trace),
    store: EntityStore = Depends(get_store),
):
    order = store.orders.get(order_id)
    if order is None:
        raise NotFoundError("Order not found")

    response = {"status": order.status, "trackingNumbers": list(order.tracking_numbers)}
    trace.finish(200, response_body=response)
    return response
