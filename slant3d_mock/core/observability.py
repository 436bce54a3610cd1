import time
import uuid
import logging
from typing import Any, Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from slant3d_mock.core.logging import set_request_id
from slant3d_mock.domain.store import RequestLedger

logger = logging.getLogger("slant3d.http")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id and logs method, path, status and latency."""

    async def dispatch(self, request: Request, call_next):
        rid = request.headers.get("x-request-id") or uuid.uuid4().hex
        set_request_id(rid)
        request.state.request_id = rid
        start = time.perf_counter()
        response = await call_next(request)
        dur_ms = (time.perf_counter() - start) * 1000
        response.headers["x-request-id"] = rid
        logger.info("%s %s %s %.1fms", request.method, request.url.path, response.status_code, dur_ms)
        return response


class RequestTrace:
    """
    Times one API request and writes its outcome to the ledger exactly once.

    Routes call ``finish`` on success; the error handlers call it for failures
    raised after the trace was opened. Ledger write failures are logged and
    never reach the caller.
    """

    def __init__(
        self,
        ledger: RequestLedger,
        method: str,
        path: str,
        api_key: Optional[str] = None,
    ):
        self.ledger = ledger
        self.method = method
        self.path = path
        self.api_key = api_key
        self.request_body: Any = None
        self.finished = False
        self._start = time.perf_counter()

    @property
    def elapsed_ms(self) -> int:
        return int((time.perf_counter() - self._start) * 1000)

    def finish(self, status_code: int, response_body: Any = None, request_body: Any = None) -> None:
        if self.finished:
            return
        self.finished = True
        if request_body is not None:
            self.request_body = request_body
        try:
            self.ledger.log(
                method=self.method,
                path=self.path,
                status_code=status_code,
                duration=self.elapsed_ms,
                api_key=self.api_key,
                request_body=self.request_body,
                response_body=response_body,
            )
        except Exception as exc:
            logger.warning(f"[LEDGER] Failed to record {self.method} {self.path}: {exc}")
