import logging
from urllib.parse import unquote

import httpx
from fastapi import APIRouter, Depends, Request

from slant3d_mock.api.deps import get_store, open_trace, read_json_body
from slant3d_mock.core.errors import (
    ConflictError,
    DeliveryFailed,
    MockApiError,
    NotFoundError,
    RequestValidationFailed,
    classify_error,
)
from slant3d_mock.core.http import get_http_client
from slant3d_mock.core.observability import RequestTrace
from slant3d_mock.domain.store import EntityStore
from slant3d_mock.domain.validators import is_valid_url

logger = logging.getLogger("slant3d.router.webhooks")

router = APIRouter(prefix="/api", tags=["webhooks"])

TEST_PAYLOAD = {
    "orderId": "1234567890",
    "status": "SHIPPED",
    "trackingNumber": "ABCDEF123456",
    "carrierCode": "usps",
}


@router.post("/customer/subscribeWebhook")
async def subscribe_webhook(
    request: Request,
    trace: RequestTrace = Depends(open_trace),
    store: EntityStore = Depends(get_store),
):
    body = await read_json_body(request, as_validation=True)
    trace.request_body = body
    end_point = body.get("endPoint") if isinstance(body, dict) else None

    if not end_point:
        raise RequestValidationFailed.for_field("endPoint", "Endpoint URL is required", "REQUIRED_FIELD")
    if not is_valid_url(end_point):
        raise RequestValidationFailed.for_field("endPoint", "Invalid URL format", "INVALID_URL")

    # exists-then-create must not interleave with another registration
    with store.webhooks.lock() as webhooks:
        if webhooks.exists(end_point):
            raise ConflictError("Webhook endpoint already registered")
        webhooks.create(end_point, trace.api_key)

    logger.info(f"[WEBHOOK] Registered {end_point}")
    response = {"message": "Endpoint Configured", "endPoint": end_point}
    trace.finish(200, response_body=response)
    return response


@router.get("/webhooks")
async def list_webhooks(
    trace: RequestTrace = Depends(open_trace),
    store: EntityStore = Depends(get_store),
):
    webhooks = [w.to_api() for w in store.webhooks.get_all()]
    trace.finish(200, response_body={"totalCount": len(webhooks)})
    return {"webhooks": webhooks, "totalCount": len(webhooks)}


@router.post("/webhooks/test")
async def test_webhook(request: Request, client: httpx.AsyncClient = Depends(get_http_client)):
    """Send the fixed test payload to ``endPoint`` and report what happened. Public."""
    body = await read_json_body(request)
    end_point = body.get("endPoint") if isinstance(body, dict) else None

    if not end_point:
        raise MockApiError("endPoint is required")
    if not is_valid_url(end_point):
        raise MockApiError("Invalid URL format")

    logger.info(f"[WEBHOOK] Testing delivery to {end_point}")
    try:
        resp = await client.post(end_point, json=TEST_PAYLOAD)
    except httpx.HTTPError as exc:
        logger.warning(f"[WEBHOOK] Test delivery failed ({classify_error(exc).value}): {exc}")
        raise DeliveryFailed(str(exc) or type(exc).__name__, end_point)

    logger.info(f"[WEBHOOK] Test delivery completed: {resp.status_code}")
    return {
        "success": True,
        "statusCode": resp.status_code,
        "message": "Test payload sent successfully",
        "payload": TEST_PAYLOAD,
        "endPoint": end_point,
    }


@router.delete("/webhooks/{end_point:path}")
async def delete_webhook(
    end_point: str,
    trace: RequestTrace = Depends(open_trace),
    store: EntityStore = Depends(get_store),
):
    end_point = unquote(end_point)
    if not store.webhooks.delete(end_point):
        raise NotFoundError("Webhook not found")

    logger.info(f"[WEBHOOK] Deleted {end_point}")
    response = {"message": "Webhook deleted successfully", "endPoint": end_point}
    trace.finish(200, response_body=response)
    return response
