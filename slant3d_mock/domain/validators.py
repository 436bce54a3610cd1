"""
Request validation for order-item payloads.

Order creation, order estimates and shipping estimates all accept the same
array-of-order-items body and share one short-circuiting validator: the first
violation found (items in order, fields in declared order) is returned and
scanning stops.
"""

import re
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional
from urllib.parse import urlparse


REQUIRED_ORDER_ITEM_FIELDS = (
    "email",
    "phone",
    "name",
    "orderNumber",
    "filename",
    "fileURL",
    "bill_to_street_1",
    "bill_to_city",
    "bill_to_state",
    "bill_to_zip",
    "bill_to_country_as_iso",
    "ship_to_name",
    "ship_to_street_1",
    "ship_to_city",
    "ship_to_state",
    "ship_to_zip",
    "ship_to_country_as_iso",
    "order_item_name",
    "order_quantity",
    "order_item_color",
)

# Optional fields copied into stored text columns when present
OPTIONAL_TEXT_FIELDS = ("bill_to_street_2", "ship_to_street_2", "profile")

# ASCII digits only, matched against the whole value
_QUANTITY_RE = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class FieldViolation:
    """A single validation failure: which field, why, and a machine code."""
    field: str
    message: str
    code: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


# ============================================================================
# ORDER ITEM VALIDATION
# ============================================================================

def validate_order_items(payload: Any) -> Optional[FieldViolation]:
    """
    Validate an order/estimate request body.

    Args:
        payload: Decoded JSON body; expected to be a non-empty list of dicts.

    Returns:
        None when valid, otherwise the first FieldViolation encountered.
    """
    if not isinstance(payload, list) or not payload:
        return FieldViolation(
            field="order",
            message="Order must be a non-empty array of order items",
            code="INVALID_FORMAT",
        )

    for index, item in enumerate(payload):
        prefix = f"order[{index}]"

        if not isinstance(item, dict):
            return FieldViolation(
                field=prefix,
                message="Order item must be an object",
                code="INVALID_FORMAT",
            )

        for field in REQUIRED_ORDER_ITEM_FIELDS:
            if not item.get(field):
                return FieldViolation(
                    field=f"{prefix}.{field}",
                    message=f"{field} is required",
                    code="REQUIRED_FIELD",
                )
            if not isinstance(item[field], str):
                return _not_text(prefix, field)

        for field in OPTIONAL_TEXT_FIELDS:
            if item.get(field) is not None and not isinstance(item[field], str):
                return _not_text(prefix, field)

        if not _QUANTITY_RE.fullmatch(item["order_quantity"]):
            return FieldViolation(
                field=f"{prefix}.order_quantity",
                message="Quantity must be a positive integer string",
                code="INVALID_QUANTITY",
            )

    return None


def _not_text(prefix: str, field: str) -> FieldViolation:
    return FieldViolation(
        field=f"{prefix}.{field}",
        message=f"{field} must be a string",
        code="INVALID_FORMAT",
    )


# ============================================================================
# FIELD HELPERS
# ============================================================================

def is_valid_url(value: Any) -> bool:
    """Absolute URL with a scheme and a host."""
    if not isinstance(value, str) or not value:
        return False
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def is_valid_api_key(value: Any) -> bool:
    """Any non-blank string is accepted."""
    return isinstance(value, str) and len(value.strip()) > 0
