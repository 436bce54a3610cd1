"""
In-memory entity store: orders, webhooks and the request-log ledger.

One ``EntityStore`` is built per application and handed to routes through
dependency injection. Nothing is persisted; ``reset_for_testing`` returns the
store to its boot state.

Each map is guarded by its own lock. Callers never receive the stored objects
themselves, only deep copies, so a caller mutating a result cannot change
what the store holds.
"""

import logging
import threading
from collections import deque
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from typing import Any, Deque, Dict, Iterator, List, Mapping, Optional, Union

from slant3d_mock.domain.identifiers import SequentialIdAllocator, generate_request_id
from slant3d_mock.domain.models import Order, OrderStatus, RequestLog, Webhook, utcnow


logger = logging.getLogger("slant3d.store")

MAX_REQUEST_LOGS = 1000
DEFAULT_RECENT_LOGS = 100


def _status_value(status: Union[str, OrderStatus]) -> str:
    return status.value if isinstance(status, Enum) else str(status)


def _advance(previous: datetime) -> datetime:
    """Current time, never earlier than ``previous``."""
    now = utcnow()
    return now if now >= previous else previous


# ============================================================================
# ORDERS
# ============================================================================

class OrderStore:
    """Orders keyed by ``order_id``, in insertion order."""

    def __init__(self, sequence: Optional[SequentialIdAllocator] = None):
        self._orders: Dict[str, Order] = {}
        self._lock = threading.Lock()
        self.sequence = sequence or SequentialIdAllocator()

    def create(self, data: Union[Order, Mapping[str, Any]]) -> Order:
        """
        Store a new order.

        A caller-supplied ``order_id`` is used as-is and leaves the sequence
        untouched; otherwise the next sequential id is allocated. Status
        defaults to pending, tracking numbers to an empty list and both
        timestamps are stamped now.
        """
        fields = data.model_dump() if isinstance(data, Order) else _by_field_name(data)

        with self._lock:
            order_id = fields.get("order_id") or self.sequence.next_id()
            order_id = str(order_id)
            now = utcnow()
            fields.update(
                order_id=order_id,
                order_number=fields.get("order_number") or f"ORD-{order_id}",
                status=_status_value(fields.get("status") or OrderStatus.PENDING),
                tracking_numbers=list(fields.get("tracking_numbers") or []),
                created_at=now,
                updated_at=now,
            )
            order = Order.model_validate(fields)
            self._orders[order_id] = order
            logger.debug(f"[ORDER] Stored order {order_id}")
            return order.model_copy(deep=True)

    def get(self, order_id: str) -> Optional[Order]:
        with self._lock:
            order = self._orders.get(order_id)
            return order.model_copy(deep=True) if order else None

    def get_all(self) -> List[Order]:
        with self._lock:
            return [o.model_copy(deep=True) for o in self._orders.values()]

    def get_by_status(self, status: Union[str, OrderStatus]) -> List[Order]:
        wanted = _status_value(status)
        with self._lock:
            return [o.model_copy(deep=True) for o in self._orders.values() if o.status == wanted]

    def exists(self, order_id: str) -> bool:
        with self._lock:
            return order_id in self._orders

    def update_status(self, order_id: str, status: Union[str, OrderStatus]) -> bool:
        """Replace the status; the store does not police transitions."""
        with self._lock:
            order = self._orders.get(order_id)
            if order is None:
                return False
            self._orders[order_id] = order.model_copy(update={
                "status": _status_value(status),
                "updated_at": _advance(order.updated_at),
            })
            return True

    def update(self, order_id: str, updates: Mapping[str, Any]) -> bool:
        """Merge ``updates`` into the order. ``order_id`` and ``created_at`` are kept."""
        changes = _by_field_name(updates)
        changes.pop("order_id", None)
        changes.pop("created_at", None)
        if "status" in changes:
            changes["status"] = _status_value(changes["status"])

        with self._lock:
            order = self._orders.get(order_id)
            if order is None:
                return False
            merged = {**order.model_dump(), **changes, "updated_at": _advance(order.updated_at)}
            self._orders[order_id] = Order.model_validate(merged)
            return True

    def delete(self, order_id: str) -> bool:
        with self._lock:
            return self._orders.pop(order_id, None) is not None

    def count_by_status(self) -> Dict[str, int]:
        with self._lock:
            counts = {status.value: 0 for status in OrderStatus}
            for order in self._orders.values():
                if order.status in counts:
                    counts[order.status] += 1
            return counts

    def __len__(self) -> int:
        with self._lock:
            return len(self._orders)

    def clear(self) -> None:
        with self._lock:
            self._orders.clear()
            self.sequence.reset()


# ============================================================================
# WEBHOOKS
# ============================================================================

class WebhookStore:
    """
    Webhook subscriptions keyed by endpoint URL.

    ``create`` overwrites an existing registration for the same URL;
    rejecting duplicates is up to the caller, which should hold ``lock()``
    across its exists-then-create sequence.
    """

    def __init__(self):
        self._webhooks: Dict[str, Webhook] = {}
        self._lock = threading.RLock()

    @contextmanager
    def lock(self) -> Iterator["WebhookStore"]:
        with self._lock:
            yield self

    def create(self, end_point: str, api_key: str) -> Webhook:
        webhook = Webhook(end_point=end_point, api_key=api_key)
        with self._lock:
            self._webhooks[end_point] = webhook
        return webhook.model_copy(deep=True)

    def get(self, end_point: str) -> Optional[Webhook]:
        with self._lock:
            webhook = self._webhooks.get(end_point)
            return webhook.model_copy(deep=True) if webhook else None

    def get_all(self) -> List[Webhook]:
        with self._lock:
            return [w.model_copy(deep=True) for w in self._webhooks.values()]

    def get_by_url(self, url: str) -> List[Webhook]:
        webhook = self.get(url)
        return [webhook] if webhook else []

    def exists(self, end_point: str) -> bool:
        with self._lock:
            return end_point in self._webhooks

    def delete(self, end_point: str) -> bool:
        with self._lock:
            return self._webhooks.pop(end_point, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._webhooks)

    def clear(self) -> None:
        with self._lock:
            self._webhooks.clear()


# ============================================================================
# REQUEST LOG LEDGER
# ============================================================================

class RequestLedger:
    """Bounded FIFO of request logs; the oldest entry is evicted past ``capacity``."""

    def __init__(self, capacity: int = MAX_REQUEST_LOGS):
        self.capacity = capacity
        self._logs: Deque[RequestLog] = deque()
        self._lock = threading.Lock()

    def log(
        self,
        *,
        method: str,
        path: str,
        status_code: int,
        duration: float,
        api_key: Optional[str] = None,
        request_body: Any = None,
        response_body: Any = None,
    ) -> RequestLog:
        entry = RequestLog(
            id=generate_request_id(),
            timestamp=utcnow(),
            method=method,
            path=path,
            status_code=status_code,
            duration=duration,
            api_key=api_key,
            request_body=request_body,
            response_body=response_body,
        )
        with self._lock:
            self._logs.append(entry)
            while len(self._logs) > self.capacity:
                self._logs.popleft()
        return entry.model_copy(deep=True)

    def get_all(self) -> List[RequestLog]:
        with self._lock:
            return [e.model_copy(deep=True) for e in self._logs]

    def get_recent(self, count: int = DEFAULT_RECENT_LOGS) -> List[RequestLog]:
        """The last ``count`` entries, oldest first."""
        if count <= 0:
            return []
        with self._lock:
            recent = list(self._logs)[-count:]
        return [e.model_copy(deep=True) for e in recent]

    def get_by_status(self, status_code: int) -> List[RequestLog]:
        with self._lock:
            return [e.model_copy(deep=True) for e in self._logs if e.status_code == status_code]

    def get_by_path(self, path: str) -> List[RequestLog]:
        with self._lock:
            return [e.model_copy(deep=True) for e in self._logs if e.path == path]

    def clear(self) -> None:
        with self._lock:
            self._logs.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._logs)


# ============================================================================
# AGGREGATE
# ============================================================================

class EntityStore:
    """Owns every entity kind for the lifetime of the process."""

    def __init__(self, log_capacity: int = MAX_REQUEST_LOGS):
        self.orders = OrderStore()
        self.webhooks = WebhookStore()
        self.logs = RequestLedger(capacity=log_capacity)

    def stats(self) -> Dict[str, Any]:
        return {
            "orders": {
                "total": len(self.orders),
                "byStatus": self.orders.count_by_status(),
            },
            "webhooks": {"total": len(self.webhooks)},
            "requestLogs": {"total": len(self.logs)},
            "nextOrderId": self.orders.sequence.peek(),
        }

    def raw_state(self) -> Dict[str, Any]:
        """Debug snapshot of everything held, serialized."""
        return {
            "orders": {o.order_id: o.to_api() for o in self.orders.get_all()},
            "webhooks": {w.end_point: w.to_api() for w in self.webhooks.get_all()},
            "requestLogs": [e.to_api() for e in self.logs.get_all()],
            "nextOrderId": self.orders.sequence.peek(),
        }

    def reset_for_testing(self) -> None:
        self.orders.clear()
        self.webhooks.clear()
        self.logs.clear()
        logger.info("[LEDGER] Store reset")


def _by_field_name(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Accept either python field names or API aliases (orderId, fileURL, ...)."""
    aliases = {field.alias: name for name, field in Order.model_fields.items() if field.alias}
    return {aliases.get(key, key): value for key, value in dict(data).items()}
