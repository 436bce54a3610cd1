import asyncio
import logging

from fastapi import APIRouter, Depends, Request

from slant3d_mock.api.deps import get_settings, open_trace, read_json_body
from slant3d_mock.core.config import Settings
from slant3d_mock.core.errors import MockApiError
from slant3d_mock.core.observability import RequestTrace
from slant3d_mock.domain.identifiers import generate_delay
from slant3d_mock.domain.pricing import slice_price

logger = logging.getLogger("slant3d.router.slicer")

router = APIRouter(prefix="/api/slicer", tags=["slicer"])


@router.post("")
@router.post("/", include_in_schema=False)
async def slice_file(
    request: Request,
    trace: RequestTrace = Depends(open_trace),
    settings: Settings = Depends(get_settings),
):
    body = await read_json_body(request)
    if not isinstance(body, dict) or not body.get("fileURL"):
        raise MockApiError("fileURL is required")
    if not isinstance(body["fileURL"], str):
        raise MockApiError("fileURL must be a string")

    delay_ms = generate_delay(settings.SLICER_MIN_DELAY_MS, settings.SLICER_MAX_DELAY_MS)
    logger.info(f"[SLICER] Slicing {body['fileURL']} ({delay_ms}ms)")
    if delay_ms > 0:
        await asyncio.sleep(delay_ms / 1000)

    response = {
        "message": "Slicing successful",
        "data": {"price": f"${slice_price():.2f}"},
    }
    trace.finish(200, response_body=response, request_body={"fileURL": body["fileURL"]})
    return response
