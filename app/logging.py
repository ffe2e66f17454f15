import logging
import json
import os
from typing import Any, Dict
from opentelemetry.trace import get_current_span


SENSITIVE_KEYS = {"password", "password_hash", "token", "access_token", "refresh_token"}


def current_request_id() -> str:
    try:
        from flask import g
        rid = getattr(g, "request_id", None)
        return rid or "n/a"
    except RuntimeError:
        return "n/a"


def current_identity_fields() -> Dict[str, str]:
    """Subject, role and region of the authenticated caller, if any."""
    try:
        from flask import g
        identity = getattr(g, "identity", None)
    except RuntimeError:
        identity = None
    if identity is None:
        return {"subject_id": "n/a", "role": "n/a", "region": "n/a"}
    return {
        "subject_id": str(identity.subject_id),
        "role": identity.role,
        "region": identity.region or "*",
    }


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = current_request_id()
        return True


class IdentityFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in current_identity_fields().items():
            setattr(record, key, value)
        return True


def current_trace_ids():
    span = get_current_span()
    ctx = span.get_span_context() if span else None
    if not ctx or not ctx.is_valid:
        return "n/a", "n/a"
    return format(ctx.trace_id, "032x"), format(ctx.span_id, "016x")


class TraceIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        trace_id, span_id = current_trace_ids()
        record.trace_id = trace_id
        record.span_id = span_id
        return True


def _mask(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            key: ("[REDACTED]" if key in SENSITIVE_KEYS else _mask(item))
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_mask(item) for item in value]
    return value


class MaskingFilter(logging.Filter):
    """Redact credential fields in dict messages and dict args.

    DEBUG records keep their values outside production so request bodies can
    be inspected locally.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        env = os.getenv("APP_ENV", "development").lower()
        if record.levelno == logging.DEBUG and env != "production":
            return True
        if isinstance(record.msg, dict):
            record.msg = _mask(record.msg)
        if isinstance(record.args, dict):
            record.args = _mask(record.args)
        return True


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        base = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
            "request_id": getattr(record, "request_id", "n/a"),
            "trace_id": getattr(record, "trace_id", "n/a"),
            "span_id": getattr(record, "span_id", "n/a"),
            "subject_id": getattr(record, "subject_id", "n/a"),
            "role": getattr(record, "role", "n/a"),
            "region": getattr(record, "region", "n/a"),
        }
        if isinstance(record.msg, dict):
            base.update(record.msg)
        else:
            base["message"] = record.getMessage()
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base, default=str)


def configure_logging(app) -> None:
    datefmt = "%Y-%m-%dT%H:%M:%S%z"
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter(datefmt=datefmt))
    handler.addFilter(RequestIdFilter())
    handler.addFilter(IdentityFilter())
    handler.addFilter(TraceIdFilter())
    handler.addFilter(MaskingFilter())

    app.logger.handlers.clear()
    app.logger.addHandler(handler)

    level_name = os.getenv("LOG_LEVEL")
    if level_name:
        level = getattr(logging, level_name.upper(), logging.INFO)
    else:
        level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    app.logger.setLevel(level)

    root = logging.getLogger()
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        root.addHandler(handler)
    root.setLevel(level)

    wl = logging.getLogger("werkzeug")
    wl.setLevel(level)
    wl.handlers.clear()
    wl.addHandler(handler)
