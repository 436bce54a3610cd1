"""
Identifier generation: order ids, order numbers, tracking numbers, opaque ids.

Order ids come from one of two allocators. ``SequentialIdAllocator`` is owned
by the entity store and counts up from 1,000,000; ``RandomIdAllocator`` draws
10-digit ids the way the real service does. Which one a route uses is decided
by configuration (see ``Settings.ORDER_ID_STRATEGY``).
"""

import random
import string
import threading
import time
from typing import Callable, Optional, Protocol


ORDER_ID_MIN = 1_000_000_000
ORDER_ID_MAX = 9_999_999_999
SEQUENTIAL_START = 1_000_000

TRACKING_PREFIXES = ("1Z", "92", "94")  # UPS, USPS, FedEx-like

_BASE36 = string.digits + string.ascii_lowercase


class IdAllocator(Protocol):
    def next_id(self) -> str: ...


class SequentialIdAllocator:
    """Monotonic counter; ``next_id`` returns the current value then advances."""

    def __init__(self, start: int = SEQUENTIAL_START):
        self._start = start
        self._next = start
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            value = self._next
            self._next += 1
        return str(value)

    def peek(self) -> int:
        return self._next

    def reset(self) -> None:
        with self._lock:
            self._next = self._start


class RandomIdAllocator:
    """10-digit ids; redraws while ``taken`` reports a collision."""

    def __init__(self, taken: Optional[Callable[[str], bool]] = None):
        self._taken = taken

    def next_id(self) -> str:
        while True:
            candidate = generate_order_id()
            if self._taken is None or not self._taken(candidate):
                return candidate


def generate_order_id() -> str:
    return str(random.randint(ORDER_ID_MIN, ORDER_ID_MAX))


def generate_order_number() -> str:
    timestamp = str(_epoch_ms())[-8:]
    return f"ORD-{timestamp}-{random.randint(0, 999):03d}"


def generate_tracking_number() -> str:
    carrier = random.choice(TRACKING_PREFIXES)
    if carrier == "1Z":
        return (
            "1Z"
            + _random_chars(string.digits, 6)
            + _random_chars(string.ascii_uppercase, 2)
            + _random_chars(string.digits, 10)
        )
    return carrier + _random_chars(string.digits, 20)


def generate_opaque_id(prefix: str) -> str:
    """``<prefix>_<epoch-ms>_<9 base36 chars>``"""
    return f"{prefix}_{_epoch_ms()}_{_random_chars(_BASE36, 9)}"


def generate_webhook_id() -> str:
    return generate_opaque_id("wh")


def generate_log_id() -> str:
    return generate_opaque_id("log")


def generate_request_id() -> str:
    return generate_opaque_id("req")


def generate_delay(min_ms: int, max_ms: int) -> int:
    """Uniform integer delay in [min_ms, max_ms]."""
    if max_ms < min_ms:
        min_ms, max_ms = max_ms, min_ms
    return random.randint(min_ms, max_ms)


def _random_chars(alphabet: str, length: int) -> str:
    return "".join(random.choice(alphabet) for _ in range(length))


def _epoch_ms() -> int:
    return int(time.time() * 1000)
