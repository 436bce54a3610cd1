import logging

from fastapi import APIRouter, Depends, Request

from slant3d_mock.api.deps import open_trace, read_json_body
from slant3d_mock.core.errors import RequestValidationFailed
from slant3d_mock.core.observability import RequestTrace
from slant3d_mock.domain.pricing import estimate_order, shipping_cost
from slant3d_mock.domain.validators import validate_order_items

logger = logging.getLogger("slant3d.router.estimate")

router = APIRouter(prefix="/api/order", tags=["estimate"])


async def _validated_items(request: Request, trace: RequestTrace) -> list:
    body = await read_json_body(request)
    violation = validate_order_items(body)
    if violation is not None:
        trace.request_body = body
        raise RequestValidationFailed(violation)
    return body


@router.post("/estimate")
async def estimate_order_price(request: Request, trace: RequestTrace = Depends(open_trace)):
    """Printing, shipping and total price for the first order item."""
    items = await _validated_items(request, trace)
    item = items[0]

    response = estimate_order(item)
    logger.info(f"[ESTIMATE] order estimate {response}")

    trace.finish(
        200,
        response_body=response,
        request_body={
            "fileURL": item.get("fileURL"),
            "quantity": item.get("order_quantity"),
            "color": item.get("order_item_color"),
            "profile": item.get("profile"),
            "residential": item.get("ship_to_is_US_residential"),
            "shipZip": item.get("ship_to_zip"),
        },
    )
    return response


@router.post("/estimateShipping")
async def estimate_shipping(request: Request, trace: RequestTrace = Depends(open_trace)):
    items = await _validated_items(request, trace)
    item = items[0]

    response = {
        "shippingCost": shipping_cost(item["ship_to_zip"], item.get("ship_to_is_US_residential")),
        "currencyCode": "usd",
    }
    logger.info(f"[ESTIMATE] shipping estimate {response}")

    trace.finish(
        200,
        response_body=response,
        request_body={
            "residential": item.get("ship_to_is_US_residential"),
            "shipZip": item.get("ship_to_zip"),
            "quantity": item.get("order_quantity"),
        },
    )
    return response
