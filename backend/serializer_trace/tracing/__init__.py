"""
Tracing module for serializer observability.

Contains:
- TraceableSerializer, the tracing proxy around a serializer engine
- Caller resolution from a bounded stack snapshot
- Reference collectors building TraceRecord instances
"""

from .caller import MAX_STACK_DEPTH, StackEntry, capture_stack, find_caller, resolve_caller, short_name
from .collector import LoggingTraceCollector, TraceRecordCollector
from .traceable_serializer import DEBUG_TRACE_ID, TraceableSerializer, generate_trace_id

__all__ = [
    "DEBUG_TRACE_ID",
    "LoggingTraceCollector",
    "MAX_STACK_DEPTH",
    "StackEntry",
    "TraceRecordCollector",
    "TraceableSerializer",
    "capture_stack",
    "find_caller",
    "generate_trace_id",
    "resolve_caller",
    "short_name",
]
