"""
Error taxonomy and FastAPI exception handlers.

Every domain failure is raised as a ``MockApiError`` subclass at the point of
detection and rendered here into the exact body shape the real service uses.
"""

import logging
from enum import Enum
from typing import Optional, Dict, Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from slant3d_mock.domain.validators import FieldViolation


logger = logging.getLogger("slant3d.errors")


# ============================================================================
# Error Categories
# ============================================================================

class ErrorCategory(str, Enum):
    """Error categories used when logging failures."""

    VALIDATION = "validation_error"
    AUTHENTICATION = "authentication_error"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    BAD_REQUEST = "bad_request"
    INTERNAL = "internal_error"
    GATEWAY_ERROR = "gateway_error"
    TIMEOUT = "timeout_error"


# ============================================================================
# Exceptions
# ============================================================================

class MockApiError(Exception):
    """Base class for errors that map onto a client-visible response."""

    status_code = status.HTTP_400_BAD_REQUEST
    category = ErrorCategory.BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def body(self) -> Dict[str, Any]:
        return {"error": self.message}


class AuthError(MockApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    category = ErrorCategory.AUTHENTICATION

    def __init__(self, message: str = "API key required"):
        super().__init__(message)


class RequestValidationFailed(MockApiError):
    """First-failure-only validation error with a single detail entry."""

    category = ErrorCategory.VALIDATION

    def __init__(self, violation: FieldViolation):
        super().__init__("Validation failed")
        self.violation = violation

    @classmethod
    def for_field(cls, field: str, message: str, code: str = "INVALID_FORMAT") -> "RequestValidationFailed":
        return cls(FieldViolation(field=field, message=message, code=code))

    def body(self) -> Dict[str, Any]:
        return {"error": self.message, "details": [self.violation.to_dict()]}


class NotFoundError(MockApiError):
    status_code = status.HTTP_404_NOT_FOUND
    category = ErrorCategory.NOT_FOUND


class ConflictError(MockApiError):
    """Operation conflicts with current state (terminal order, duplicate webhook)."""

    category = ErrorCategory.CONFLICT


class MalformedInputError(MockApiError):
    """Request body could not be parsed as JSON."""

    def __init__(self, message: str = "Invalid JSON in request body", *, as_validation: bool = False):
        super().__init__(message)
        self.as_validation = as_validation

    def body(self) -> Dict[str, Any]:
        if self.as_validation:
            violation = FieldViolation(field="body", message=self.message, code="INVALID_JSON")
            return {"error": "Validation failed", "details": [violation.to_dict()]}
        return {"error": self.message}


class DeliveryFailed(MockApiError):
    """Outbound webhook test call failed."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    category = ErrorCategory.GATEWAY_ERROR

    def __init__(self, message: str, end_point: str):
        super().__init__(message)
        self.end_point = end_point

    def body(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error": "Failed to deliver test payload",
            "message": self.message,
            "endPoint": self.end_point,
        }


# ============================================================================
# Handlers
# ============================================================================

def _finish_trace(request: Request, status_code: int, body: Optional[Dict[str, Any]]) -> None:
    """Close the request's ledger trace, if the route opened one."""
    trace = getattr(request.state, "trace", None)
    if trace is not None and not trace.finished:
        trace.finish(status_code, response_body=body)


async def handle_mock_api_error(request: Request, exc: MockApiError) -> JSONResponse:
    body = exc.body()
    if exc.status_code >= 500:
        logger.error(f"[ERROR] {exc.category.value}: {exc.message}")
    else:
        logger.info(f"[{_tag_for(exc.category)}] {request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    _finish_trace(request, exc.status_code, body)
    return JSONResponse(status_code=exc.status_code, content=body)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        body = {"error": "Endpoint not found"}
    elif exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        body = {"error": "Method not allowed"}
    else:
        body = {"error": str(exc.detail)}
    return JSONResponse(status_code=exc.status_code, content=body, headers=getattr(exc, "headers", None))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"[ERROR] Unexpected error on {request.method} {request.url.path}: {exc}", exc_info=True)
    body = {"error": "Internal server error"}
    _finish_trace(request, status.HTTP_500_INTERNAL_SERVER_ERROR, body)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=body)


def _tag_for(category: ErrorCategory) -> str:
    if category is ErrorCategory.AUTHENTICATION:
        return "AUTH"
    if category is ErrorCategory.VALIDATION:
        return "VALIDATION"
    return "REQUEST"


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MockApiError, handle_mock_api_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)


# ============================================================================
# Utility Functions
# ============================================================================

def classify_error(error: Exception) -> ErrorCategory:
    """Classify an exception into an error category."""
    if isinstance(error, MockApiError):
        return error.category

    error_msg = str(error).lower()
    error_type = type(error).__name__.lower()

    if "timeout" in error_msg or "timeout" in error_type:
        return ErrorCategory.TIMEOUT

    if "connect" in error_msg or "connect" in error_type:
        return ErrorCategory.GATEWAY_ERROR

    return ErrorCategory.INTERNAL
