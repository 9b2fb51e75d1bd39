"""
Traceable serializer.

Wraps a serializer engine and reports every serialize, deserialize,
normalize, denormalize, encode and decode call to a data collector, together
with its duration and the code location that made it.
"""

import logging
import time
import uuid
from typing import Any, Dict, Optional, Tuple

from ..core.config import get_settings
from ..logging_utils import trace_context
from ..protocols import (
    DataCollectorProtocol,
    DecoderInterface,
    DenormalizerInterface,
    EncoderInterface,
    NormalizerInterface,
    SerializerInterface,
)
from .caller import MIN_STACK_DEPTH, resolve_caller

DEBUG_TRACE_ID = "debug_trace_id"


def generate_trace_id() -> str:
    return uuid.uuid4().hex


class TraceableSerializer:
    """
    Collects some data about serialization.

    The engine result is returned untouched and engine exceptions propagate
    as they are; a failed call is not reported. Capability checks and any
    other attribute are forwarded to the engine without tracing.

    Usage:
        serializer = TraceableSerializer(engine, collector)
        payload = serializer.serialize(order, "json")
    """

    DEBUG_TRACE_ID = DEBUG_TRACE_ID

    def __init__(
        self,
        serializer: Any,
        data_collector: DataCollectorProtocol,
        stack_depth: Optional[int] = None,
    ) -> None:
        """
        Args:
            serializer: Engine implementing the serializer, normalizer,
                denormalizer, encoder and decoder interfaces
            data_collector: Receives one report per traced call
            stack_depth: Frames inspected to resolve the caller, at least 2;
                defaults to the configured ``trace_stack_depth``

        Raises:
            ValueError: If ``stack_depth`` is below 2
        """
        self._serializer = serializer
        self._data_collector = data_collector
        if stack_depth is None:
            stack_depth = get_settings().trace_stack_depth
        if stack_depth < MIN_STACK_DEPTH:
            raise ValueError(f"stack_depth must be at least {MIN_STACK_DEPTH}, got {stack_depth}")
        self._stack_depth = stack_depth
        self._logger = logging.getLogger("serializer_trace.tracing.traceable_serializer")
        self._logger.debug(f"Tracing serializer {type(serializer).__name__}")

    @property
    def serializer(self) -> Any:
        """The wrapped engine."""
        return self._serializer

    def _with_trace_id(self, context: Optional[Dict[str, Any]]) -> Tuple[str, Dict[str, Any]]:
        trace_id = generate_trace_id()
        return trace_id, {**(context or {}), DEBUG_TRACE_ID: trace_id}

    def serialize(self, data: Any, format: str, context: Optional[Dict[str, Any]] = None) -> str:
        trace_id, context = self._with_trace_id(context)

        with trace_context(trace_id, "serialize"):
            start_time = time.perf_counter()
            result = self._serializer.serialize(data, format, context)
            elapsed = time.perf_counter() - start_time

        caller = resolve_caller("serialize", SerializerInterface, self._stack_depth)

        self._data_collector.collect_serialize(trace_id, data, format, context, elapsed, caller)

        return result

    def deserialize(
        self,
        data: Any,
        type: Any,
        format: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> Any:
        trace_id, context = self._with_trace_id(context)

        with trace_context(trace_id, "deserialize"):
            start_time = time.perf_counter()
            result = self._serializer.deserialize(data, type, format, context)
            elapsed = time.perf_counter() - start_time

        caller = resolve_caller("deserialize", SerializerInterface, self._stack_depth)

        self._data_collector.collect_deserialize(trace_id, data, type, format, context, elapsed, caller)

        return result

    def normalize(
        self,
        object: Any,
        format: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> Any:
        trace_id, context = self._with_trace_id(context)

        with trace_context(trace_id, "normalize"):
            start_time = time.perf_counter()
            result = self._serializer.normalize(object, format, context)
            elapsed = time.perf_counter() - start_time

        caller = resolve_caller("normalize", NormalizerInterface, self._stack_depth)

        self._data_collector.collect_normalize(trace_id, object, format, context, elapsed, caller)

        return result

    def denormalize(
        self,
        data: Any,
        type: Any,
        format: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> Any:
        trace_id, context = self._with_trace_id(context)

        with trace_context(trace_id, "denormalize"):
            start_time = time.perf_counter()
            result = self._serializer.denormalize(data, type, format, context)
            elapsed = time.perf_counter() - start_time

        caller = resolve_caller("denormalize", DenormalizerInterface, self._stack_depth)

        self._data_collector.collect_denormalize(trace_id, data, type, format, context, elapsed, caller)

        return result

    def encode(self, data: Any, format: str, context: Optional[Dict[str, Any]] = None) -> str:
        trace_id, context = self._with_trace_id(context)

        with trace_context(trace_id, "encode"):
            start_time = time.perf_counter()
            result = self._serializer.encode(data, format, context)
            elapsed = time.perf_counter() - start_time

        caller = resolve_caller("encode", EncoderInterface, self._stack_depth)

        self._data_collector.collect_encode(trace_id, data, format, context, elapsed, caller)

        return result

    def decode(self, data: str, format: str, context: Optional[Dict[str, Any]] = None) -> Any:
        trace_id, context = self._with_trace_id(context)

        with trace_context(trace_id, "decode"):
            start_time = time.perf_counter()
            result = self._serializer.decode(data, format, context)
            elapsed = time.perf_counter() - start_time

        caller = resolve_caller("decode", DecoderInterface, self._stack_depth)

        self._data_collector.collect_decode(trace_id, data, format, context, elapsed, caller)

        return result

    def supports_normalization(
        self,
        data: Any,
        format: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> bool:
        return self._serializer.supports_normalization(data, format, context)

    def supports_denormalization(
        self,
        data: Any,
        type: Any,
        format: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> bool:
        return self._serializer.supports_denormalization(data, type, format, context)

    def supports_encoding(self, format: str, context: Optional[Dict[str, Any]] = None) -> bool:
        return self._serializer.supports_encoding(format, context)

    def supports_decoding(self, format: str, context: Optional[Dict[str, Any]] = None) -> bool:
        return self._serializer.supports_decoding(format, context)

    def __getattr__(self, name: str) -> Any:
        """Proxies every other attribute to the wrapped engine."""
        serializer = self.__dict__.get("_serializer")
        if serializer is None or name.startswith("__"):
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")
        return getattr(serializer, name)
