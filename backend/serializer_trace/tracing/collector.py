"""
Reference data collectors.

TraceRecordCollector turns the per-operation collect calls into TraceRecord
instances; subclasses decide what happens to each record. Retention and
display belong to whoever consumes the records.
"""

import logging
from typing import Any, Dict, Optional

from prometheus_client import Histogram, REGISTRY

from ..core.config import get_settings
from ..types import CallerInfo, TraceOperation, TraceRecord


def _register_duration_histogram() -> Histogram:
    try:
        return Histogram(
            "serializer_trace_call_duration_seconds",
            "Duration of traced serializer calls",
            ["operation"],
            registry=REGISTRY,
        )
    except ValueError:
        existing = getattr(REGISTRY, "_names_to_collectors", {}).get("serializer_trace_call_duration_seconds")
        if existing:
            return existing  # type: ignore[return-value]
        raise


TRACE_DURATION_HISTOGRAM = _register_duration_histogram()


class TraceRecordCollector:
    """Base collector building one TraceRecord per collect call."""

    def record(self, trace: TraceRecord) -> None:
        """Handle a finished trace record."""
        raise NotImplementedError

    def _collect(
        self,
        operation: TraceOperation,
        trace_id: str,
        data: Any,
        format: Optional[str],
        context: Dict[str, Any],
        time: float,
        caller: CallerInfo,
        type: Any = None,
    ) -> None:
        self.record(
            TraceRecord(
                trace_id=trace_id,
                operation=operation,
                data=data,
                type=type,
                format=format,
                context=context,
                time=time,
                caller=caller,
            )
        )

    def collect_serialize(self, trace_id, data, format, context, time, caller) -> None:
        self._collect(TraceOperation.SERIALIZE, trace_id, data, format, context, time, caller)

    def collect_deserialize(self, trace_id, data, type, format, context, time, caller) -> None:
        self._collect(TraceOperation.DESERIALIZE, trace_id, data, format, context, time, caller, type=type)

    def collect_normalize(self, trace_id, data, format, context, time, caller) -> None:
        self._collect(TraceOperation.NORMALIZE, trace_id, data, format, context, time, caller)

    def collect_denormalize(self, trace_id, data, type, format, context, time, caller) -> None:
        self._collect(TraceOperation.DENORMALIZE, trace_id, data, format, context, time, caller, type=type)

    def collect_encode(self, trace_id, data, format, context, time, caller) -> None:
        self._collect(TraceOperation.ENCODE, trace_id, data, format, context, time, caller)

    def collect_decode(self, trace_id, data, format, context, time, caller) -> None:
        self._collect(TraceOperation.DECODE, trace_id, data, format, context, time, caller)


class LoggingTraceCollector(TraceRecordCollector):
    """Logs every trace record and observes its duration."""

    def __init__(self, level: Optional[str] = None) -> None:
        level_name = (level or get_settings().trace_log_level).upper()
        self._level = logging.getLevelName(level_name)
        if not isinstance(self._level, int):
            raise ValueError(f"Unknown log level: {level_name}")
        self._logger = logging.getLogger("serializer_trace.tracing.collector")

    def record(self, trace: TraceRecord) -> None:
        operation = trace.operation.value
        TRACE_DURATION_HISTOGRAM.labels(operation=operation).observe(trace.time)
        self._logger.log(
            self._level,
            "%s format=%s took %.3fms at %s:%d",
            operation,
            trace.format or "-",
            trace.time * 1000,
            trace.caller.name,
            trace.caller.line,
            extra={"trace_id": trace.trace_id, "operation": operation},
        )
