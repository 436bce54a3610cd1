"""
Pricing engine: printing cost, shipping cost and totals.

All currency amounts are rounded half-up to the cent. The only source of
non-determinism is ``complexity_factor``, which stands in for real geometry
analysis.
"""

import random
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Mapping


BASE_PRINT_PRICE = 2.50
COMPLEXITY_FACTORS = (0.8, 1.0, 1.3, 1.8, 2.5)

BASE_SHIPPING_COST = 5.62
MIN_SHIPPING_COST = 3.99
RESIDENTIAL_SURCHARGE = 0.05
DEFAULT_REGION_MODIFIER = 1.0

_REGIONS = (
    # West coast (CA, OR, WA, NV)
    (("90", "91", "92", "93", "94", "95", "96", "97", "98", "89"), 1.2),
    # East coast
    (("10", "11", "06", "07", "08", "09", "02", "03", "04", "05"), 1.0),
    # Midwest
    (("60", "61", "46", "47", "43", "44", "48", "49"), 0.9),
    # South
    (("77", "78", "79", "33", "34", "32", "30", "31"), 1.0),
    # Mountain / central
    (("80", "81", "82", "83", "84", "85", "86", "87", "88"), 1.15),
)

REGION_MODIFIERS: Dict[str, float] = {
    prefix: modifier for prefixes, modifier in _REGIONS for prefix in prefixes
}


def round2(value: float) -> float:
    """Round to the nearest cent, halves away from zero."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def complexity_factor() -> float:
    """Uniform draw from COMPLEXITY_FACTORS."""
    return random.choice(COMPLEXITY_FACTORS)


def printing_cost(quantity: int) -> float:
    return round2(BASE_PRINT_PRICE * complexity_factor() * quantity)


def slice_price() -> float:
    """Single-unit price quoted by the slicer endpoint."""
    return round2(BASE_PRINT_PRICE * complexity_factor())


def region_modifier(zip_code: str) -> float:
    return REGION_MODIFIERS.get(str(zip_code)[:2], DEFAULT_REGION_MODIFIER)


def shipping_cost(zip_code: str, residential: str, *, base_cost: float = BASE_SHIPPING_COST) -> float:
    """
    Shipping cost for a destination ZIP.

    Args:
        zip_code: Destination ZIP; only the first two characters matter.
        residential: The literal string "true" adds the residential surcharge.
        base_cost: Flat rate before the regional modifier.

    Returns:
        Cost rounded to the cent, never below MIN_SHIPPING_COST.
    """
    modifier = region_modifier(zip_code)
    if residential == "true":
        modifier += RESIDENTIAL_SURCHARGE
    return max(round2(base_cost * modifier), MIN_SHIPPING_COST)


def total_price(printing: float, shipping: float) -> float:
    return round2(printing + shipping)


def estimate_order(item: Mapping[str, Any]) -> Dict[str, float]:
    """Price one validated order item; keys match the estimate response."""
    printing = printing_cost(int(item["order_quantity"]))
    shipping = shipping_cost(item["ship_to_zip"], item.get("ship_to_is_US_residential"))
    return {
        "totalPrice": total_price(printing, shipping),
        "shippingCost": shipping,
        "printingCost": printing,
    }
