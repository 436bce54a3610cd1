"""
Unit tests for settings, log formatting, error bodies and the CLI.
"""

import json
import logging

from click.testing import CliRunner

from slant3d_mock import __version__
from slant3d_mock.cli import cli
from slant3d_mock.core.config import Settings
from slant3d_mock.core.errors import (
    AuthError,
    ConflictError,
    DeliveryFailed,
    ErrorCategory,
    MalformedInputError,
    RequestValidationFailed,
    classify_error,
)
from slant3d_mock.core.logging import JSONFormatter, StructuredFormatter, request_id_cv
from slant3d_mock.core.observability import RequestTrace
from slant3d_mock.domain.store import RequestLedger


def _record(msg, name="slant3d.test"):
    return logging.LogRecord(name, logging.INFO, __file__, 1, msg, None, None)


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.SERVER_PORT == 4000
        assert settings.ORDER_ID_STRATEGY == "random"
        assert settings.cors_origins() == ["*"]
        assert not hasattr(settings, "API_PREFIX")

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("ORDER_ID_STRATEGY", "sequential")
        monkeypatch.setenv("BACKEND_CORS_RAW_ORIGINS", "http://a.test, http://b.test")
        settings = Settings(_env_file=None)
        assert settings.ORDER_ID_STRATEGY == "sequential"
        assert settings.cors_origins() == ["http://a.test", "http://b.test"]


class TestFormatters:
    def test_structured_line(self):
        line = StructuredFormatter().format(_record("[ORDER] created"))
        assert "INFO" in line
        assert "slant3d.test" in line
        assert line.endswith("created")

    def test_json_line(self):
        token = request_id_cv.set("rid-1")
        try:
            payload = json.loads(JSONFormatter().format(_record("hello")))
        finally:
            request_id_cv.reset(token)
        assert payload["message"] == "hello"
        assert payload["request_id"] == "rid-1"
        assert payload["logger"] == "slant3d.test"


class TestErrorBodies:
    def test_auth(self):
        err = AuthError()
        assert err.status_code == 401
        assert err.body() == {"error": "API key required"}

    def test_validation(self):
        err = RequestValidationFailed.for_field("endPoint", "Invalid URL format", "INVALID_URL")
        assert err.body() == {
            "error": "Validation failed",
            "details": [{"field": "endPoint", "message": "Invalid URL format", "code": "INVALID_URL"}],
        }

    def test_malformed(self):
        assert MalformedInputError().body() == {"error": "Invalid JSON in request body"}
        assert MalformedInputError(as_validation=True).body()["details"][0]["code"] == "INVALID_JSON"

    def test_delivery(self):
        err = DeliveryFailed("timed out", "https://h.example.com")
        assert err.status_code == 500
        assert err.body()["endPoint"] == "https://h.example.com"

    def test_classify(self):
        assert classify_error(ConflictError("x")) is ErrorCategory.CONFLICT
        assert classify_error(TimeoutError("read timeout")) is ErrorCategory.TIMEOUT
        assert classify_error(RuntimeError("boom")) is ErrorCategory.INTERNAL


class TestRequestTrace:
    def test_finishes_once(self):
        ledger = RequestLedger()
        trace = RequestTrace(ledger, "POST", "/api/order", api_key="k")
        trace.request_body = [{"a": 1}]

        trace.finish(200, response_body={"orderId": "1"})
        trace.finish(500, response_body={"error": "late"})

        (entry,) = ledger.get_all()
        assert entry.status_code == 200
        assert entry.request_body == [{"a": 1}]
        assert entry.duration >= 0

    def test_ledger_failure_is_swallowed(self):
        class BrokenLedger:
            def log(self, **kwargs):
                raise RuntimeError("disk full")

        trace = RequestTrace(BrokenLedger(), "GET", "/api/order")
        trace.finish(200)
        assert trace.finished


class TestCli:
    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_filaments(self):
        result = CliRunner().invoke(cli, ["filaments"])
        assert result.exit_code == 0
        assert "PLA BLACK" in result.output

    def test_routes(self):
        result = CliRunner().invoke(cli, ["routes"])
        assert result.exit_code == 0
        assert "/api/order" in result.output
        assert "/api/order/estimateShipping" in result.output
        assert "/api/webhooks/test" in result.output
        assert "DELETE" in result.output
