# slant3d_mock/core/logging.py
from __future__ import annotations

import contextvars
import json
import logging
import os
import re
import sys
import time
from typing import Any, Dict


class CLIColorCodes:
    GREEN = "\033[32m"
    RED = "\033[31m"
    YELLOW = "\033[33m"
    ORANGE = "\033[38;5;208m"
    CYAN = "\033[36m"
    RESET = "\033[0m"


# Tags the mock prefixes its messages with, e.g. "[ORDER] Created order 123"
DOMAIN_TAG_COLORS = {
    "ERROR": CLIColorCodes.RED,
    "AUTH": CLIColorCodes.RED,
    "VALIDATION": CLIColorCodes.ORANGE,
    "REQUEST": CLIColorCodes.YELLOW,
    "ORDER": CLIColorCodes.GREEN,
    "ESTIMATE": CLIColorCodes.CYAN,
    "SLICER": CLIColorCodes.CYAN,
    "WEBHOOK": CLIColorCodes.ORANGE,
    "LEDGER": CLIColorCodes.CYAN,
    "CONFIG": CLIColorCodes.GREEN,
}

TAG_REGEX = re.compile(r"\[([A-Z_]+)\]")

request_id_cv = contextvars.ContextVar("request_id", default="-")


def _record_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        "created": record.created,
        "level": record.levelname.upper(),
        "logger": record.name,
        "request_id": request_id_cv.get(),
        "message": record.getMessage(),
    }


def colorize_tags(msg: str) -> str:
    """Wrap every known ``[TAG]`` in its colour; unknown tags are reset-wrapped."""
    def _paint(match: re.Match) -> str:
        tag = match.group(1)
        return f"{DOMAIN_TAG_COLORS.get(tag, CLIColorCodes.RESET)}[{tag}]{CLIColorCodes.RESET}"

    return TAG_REGEX.sub(_paint, msg)


class StructuredFormatter(logging.Formatter):
    """``<time> : <LEVEL> : <logger> [<rid>] : <message>`` with coloured tags on a TTY."""

    USE_COLOR = sys.stdout.isatty() or os.getenv("FORCE_COLOR") == "1"

    def format(self, record: logging.LogRecord) -> str:
        fields = _record_fields(record)
        ts = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(fields["created"]))
        rid = fields["request_id"]
        where = fields["logger"] if rid == "-" else f"{fields['logger']} [{rid[:8]}]"
        msg = colorize_tags(fields["message"]) if self.USE_COLOR else fields["message"]

        line = f"{ts} : {fields['level']:<5} : {where} : {msg}"
        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        fields = _record_fields(record)
        payload = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(fields.pop("created"))),
            **fields,
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logging(level: str = "INFO", *, json_mode: bool = False):
    """Install one stdout handler on the root logger and quieten the server libraries."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(JSONFormatter() if json_mode else StructuredFormatter())

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(numeric_level)
    root.addHandler(handler)

    # RequestIDMiddleware already logs one line per request
    quiet = {
        "uvicorn": numeric_level if numeric_level == logging.DEBUG else logging.WARNING,
        "uvicorn.error": numeric_level if numeric_level == logging.DEBUG else logging.WARNING,
        "uvicorn.access": logging.WARNING,
        "httpx": max(numeric_level, logging.INFO),
        "fastapi": max(numeric_level, logging.INFO),
        "slant3d": numeric_level,
    }
    for name, lvl in quiet.items():
        logging.getLogger(name).setLevel(lvl)

    logging.getLogger("slant3d.core").info(
        f"[CONFIG] Logging initialized: level={level.upper()} format={'json' if json_mode else 'text'}"
    )


def set_request_id(value: str) -> None:
    request_id_cv.set(value)
