"""Order domain engine: validation, pricing, identifiers and the entity store."""

from .validators import FieldViolation, validate_order_items
from .pricing import (
    complexity_factor,
    printing_cost,
    shipping_cost,
    total_price,
    estimate_order,
)
from .identifiers import (
    IdAllocator,
    SequentialIdAllocator,
    RandomIdAllocator,
    generate_order_id,
    generate_order_number,
    generate_tracking_number,
)
from .models import Address, Order, OrderStatus, RequestLog, Webhook
from .store import EntityStore, OrderStore, WebhookStore, RequestLedger

__all__ = [
    "FieldViolation",
    "validate_order_items",
    "complexity_factor",
    "printing_cost",
    "shipping_cost",
    "total_price",
    "estimate_order",
    "IdAllocator",
    "SequentialIdAllocator",
    "RandomIdAllocator",
    "generate_order_id",
    "generate_order_number",
    "generate_tracking_number",
    "Address",
    "Order",
    "OrderStatus",
    "RequestLog",
    "Webhook",
    "EntityStore",
    "OrderStore",
    "WebhookStore",
    "RequestLedger",
]
