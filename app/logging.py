import json
import logging
import os
from typing import Any

from flask import g, has_app_context
from opentelemetry.trace import get_current_span

from app.version import APP_VERSION

SERVICE_NAME = "jippymart-backend"

# compared lower-cased
SENSITIVE_KEYS = {
    "password",
    "token",
    "email",
    "phone",
    "phone_number",
    "phonenumber",
    "shipping_address",
    "mapapikey",
    "googlemapkey",
    "servicejson",
}
REDACTED = "[REDACTED]"


def current_request_id() -> str:
    if not has_app_context():
        return "n/a"
    return getattr(g, "request_id", None) or "n/a"


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = current_request_id()
        return True


def current_trace_ids():
    ctx = get_current_span().get_span_context()
    if not ctx.is_valid:
        return "n/a", "n/a"
    return format(ctx.trace_id, "032x"), format(ctx.span_id, "016x")


class TraceIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id, record.span_id = current_trace_ids()
        return True


def mask(value: Any) -> Any:
    """Redact sensitive keys at any depth of dicts and lists."""
    if isinstance(value, dict):
        return {
            k: REDACTED if str(k).lower() in SENSITIVE_KEYS else mask(v)
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [mask(v) for v in value]
    return value


class MaskingFilter(logging.Filter):
    """Structured (dict) log payloads are masked unless debugging outside production."""

    def filter(self, record: logging.LogRecord) -> bool:
        env = os.getenv("APP_ENV", "development").lower()
        if record.levelno == logging.DEBUG and env != "production":
            return True
        if isinstance(record.msg, dict):
            record.msg = mask(record.msg)
        if isinstance(record.args, dict):
            record.args = mask(record.args)
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        base = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "service": SERVICE_NAME,
            "version": APP_VERSION,
            "request_id": getattr(record, "request_id", "n/a"),
            "trace_id": getattr(record, "trace_id", "n/a"),
            "span_id": getattr(record, "span_id", "n/a"),
        }
        if isinstance(record.msg, dict):
            base.update(record.msg)
        else:
            base["message"] = record.getMessage()
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base, default=str, ensure_ascii=False)


def _level(app) -> int:
    level_name = os.getenv("LOG_LEVEL")
    if level_name:
        return getattr(logging, level_name.upper(), logging.INFO)
    return logging.DEBUG if app.config.get("DEBUG") else logging.INFO


def build_handler() -> logging.Handler:
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter(datefmt="%Y-%m-%dT%H:%M:%S%z"))
    handler.addFilter(RequestIdFilter())
    handler.addFilter(TraceIdFilter())
    handler.addFilter(MaskingFilter())
    return handler


def configure_logging(app) -> None:
    """One JSON handler for the app, werkzeug and (once) the root logger."""
    handler = build_handler()
    level = _level(app)

    app.logger.handlers.clear()
    app.logger.addHandler(handler)
    app.logger.setLevel(level)

    root = logging.getLogger()
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        root.addHandler(handler)
    root.setLevel(level)

    werkzeug_logger = logging.getLogger("werkzeug")
    werkzeug_logger.setLevel(level)
    werkzeug_logger.handlers.clear()
    werkzeug_logger.addHandler(handler)

    # celery records reach the handler through the root logger
    logging.getLogger("celery").setLevel(level)
