"""
Serializer tracing.

Wraps a serializer engine so that every call is timed, attributed to the code
that made it and reported to a data collector.
"""

from .protocols import (
    DataCollectorProtocol,
    DecoderInterface,
    DenormalizerInterface,
    EncoderInterface,
    NormalizerInterface,
    SerializerInterface,
)
from .tracing import DEBUG_TRACE_ID, LoggingTraceCollector, TraceableSerializer, TraceRecordCollector
from .types import CallerInfo, TraceOperation, TraceRecord

__all__ = [
    "CallerInfo",
    "DEBUG_TRACE_ID",
    "DataCollectorProtocol",
    "DecoderInterface",
    "DenormalizerInterface",
    "EncoderInterface",
    "LoggingTraceCollector",
    "NormalizerInterface",
    "SerializerInterface",
    "TraceOperation",
    "TraceRecord",
    "TraceRecordCollector",
    "TraceableSerializer",
]
