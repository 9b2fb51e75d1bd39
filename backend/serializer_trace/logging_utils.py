from __future__ import annotations

import contextvars
import json
import logging
import logging.config
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Tuple

import yaml
from prometheus_client import Counter, REGISTRY

from .core.config import Settings

_DEFAULT_CONTEXT = "-"
_CONTEXT_FIELDS = ("trace_id", "operation")
_TRACE_ID = contextvars.ContextVar("trace_id", default=_DEFAULT_CONTEXT)
_OPERATION = contextvars.ContextVar("operation", default=_DEFAULT_CONTEXT)


def _register_error_counter() -> Counter:
    try:
        return Counter(
            "serializer_trace_log_errors_total",
            "Total log statements at error level or above",
            ["module", "level"],
            registry=REGISTRY,
        )
    except ValueError:
        existing = getattr(REGISTRY, "_names_to_collectors", {}).get("serializer_trace_log_errors_total")
        if existing:
            return existing  # type: ignore[return-value]
        raise


LOG_ERROR_COUNTER = _register_error_counter()


def bind_trace_context(trace_id: str, operation: str) -> Tuple[contextvars.Token, contextvars.Token]:
    return _TRACE_ID.set(trace_id), _OPERATION.set(operation)


def reset_trace_context(tokens: Tuple[contextvars.Token, contextvars.Token]) -> None:
    trace_token, operation_token = tokens
    _TRACE_ID.reset(trace_token)
    _OPERATION.reset(operation_token)


@contextmanager
def trace_context(trace_id: str, operation: str) -> Iterator[None]:
    """Bind the trace fields for every log line emitted inside the block."""
    tokens = bind_trace_context(trace_id, operation)
    try:
        yield
    finally:
        reset_trace_context(tokens)


def current_context() -> Dict[str, str]:
    return {
        "trace_id": _TRACE_ID.get(),
        "operation": _OPERATION.get(),
    }


def record_context(record: logging.LogRecord) -> Dict[str, str]:
    # Fields passed through ``extra=`` win over the bound context.
    bound = current_context()
    return {field: getattr(record, field, bound[field]) for field in _CONTEXT_FIELDS}


class ContextFilter(logging.Filter):
    """Inject the trace fields into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        for field, value in record_context(record).items():
            setattr(record, field, value)
        return True


class JsonFormatter(logging.Formatter):
    """Render a log record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        return serialize_log_record(record)


class PrometheusErrorHandler(logging.Handler):
    """A logging handler that increments a Prometheus counter on errors."""

    def emit(self, record: logging.LogRecord) -> None:  # noqa: D401
        try:
            LOG_ERROR_COUNTER.labels(module=record.name, level=record.levelname).inc()
        except Exception:  # pragma: no cover - never raise from logging
            pass


def setup_logging(settings: Settings) -> None:
    """Load logging.yaml and configure handlers per environment."""

    config_path = settings.log_config_path or Path(__file__).with_name("logging.yaml")
    if not config_path.exists():
        raise FileNotFoundError(f"Logging configuration not found at {config_path}")

    with config_path.open("r", encoding="utf-8") as fp:
        config: Dict[str, Any] = yaml.safe_load(fp)

    handlers = config.setdefault("handlers", {})
    if settings.enable_file_logging:
        log_dir = settings.log_dir
        log_dir.mkdir(parents=True, exist_ok=True)
        if "file" in handlers:
            handlers["file"]["filename"] = str(log_dir / "serializer_trace.log")
    else:
        handlers.pop("file", None)

    env = settings.environment.lower()

    app_handlers: list[str]
    if env == "development" or not settings.enable_json_logs:
        app_handlers = ["console", "error_metrics"]
        config["root"]["handlers"] = ["console"]
    else:
        app_handlers = ["json", "error_metrics"]
        config["root"]["handlers"] = ["json"]
    if settings.enable_file_logging and "file" in handlers:
        app_handlers.append("file")

    config.setdefault("loggers", {})
    config["loggers"]["serializer_trace"] = {
        "handlers": app_handlers,
        "level": settings.log_level.upper(),
        "propagate": False,
    }

    for handler_name in ("console", "json"):
        handler = handlers.get(handler_name)
        if handler:
            handler["level"] = settings.log_level.upper()

    logging.config.dictConfig(config)


def serialize_log_record(record: logging.LogRecord) -> str:
    payload = {
        "timestamp": record.created,
        "level": record.levelname,
        "logger": record.name,
        "message": record.getMessage(),
        "context": record_context(record),
    }
    return json.dumps(payload, ensure_ascii=False, default=str)


__all__ = [
    "bind_trace_context",
    "current_context",
    "reset_trace_context",
    "trace_context",
    "ContextFilter",
    "JsonFormatter",
    "PrometheusErrorHandler",
    "record_context",
    "serialize_log_record",
    "setup_logging",
]
