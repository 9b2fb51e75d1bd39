"""
Protocol definitions for the serializer tracing layer.

The wrapped engine is expected to honour all five serialization interfaces;
the collector receives one report per traced call.
"""

from typing import Any, Dict, Optional, Protocol, runtime_checkable

from .types import CallerInfo


@runtime_checkable
class SerializerInterface(Protocol):
    """Turns values into a formatted string and back."""

    def serialize(self, data: Any, format: str, context: Optional[Dict[str, Any]] = None) -> str:
        """Serialize data into the given format.

        Args:
            data: Any value the engine can normalize
            format: Target format (e.g., "json", "xml")
            context: Options for the normalizers and encoders involved

        Returns:
            The serialized string
        """
        ...

    def deserialize(
        self,
        data: Any,
        type: Any,
        format: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Deserialize data into an instance of ``type``.

        Args:
            data: Serialized payload
            type: Target type, as a name or a class
            format: Format of ``data``
            context: Options for the decoders and denormalizers involved

        Returns:
            The deserialized value
        """
        ...


@runtime_checkable
class NormalizerInterface(Protocol):
    """Reduces objects to scalars, lists and dicts."""

    def normalize(
        self,
        object: Any,
        format: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Normalize an object into scalars, lists and dicts.

        Args:
            object: Object to normalize
            format: Format the result is headed for, if known
            context: Normalization options

        Returns:
            A scalar, list, dict or None
        """
        ...

    def supports_normalization(
        self,
        data: Any,
        format: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """Check whether ``data`` can be normalized."""
        ...


@runtime_checkable
class DenormalizerInterface(Protocol):
    """Builds objects of a given type from normalized data."""

    def denormalize(
        self,
        data: Any,
        type: Any,
        format: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Build an instance of ``type`` from normalized data.

        Args:
            data: Normalized data
            type: Target type, as a name or a class
            format: Format ``data`` came from, if known
            context: Denormalization options

        Returns:
            The denormalized value
        """
        ...

    def supports_denormalization(
        self,
        data: Any,
        type: Any,
        format: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """Check whether ``data`` can be denormalized into ``type``."""
        ...


@runtime_checkable
class EncoderInterface(Protocol):
    """Encodes normalized data into a wire format."""

    def encode(self, data: Any, format: str, context: Optional[Dict[str, Any]] = None) -> str:
        """Encode normalized data.

        Args:
            data: Normalized data
            format: Target format
            context: Encoding options

        Returns:
            The encoded string
        """
        ...

    def supports_encoding(self, format: str, context: Optional[Dict[str, Any]] = None) -> bool:
        """Check whether ``format`` can be encoded."""
        ...


@runtime_checkable
class DecoderInterface(Protocol):
    """Decodes a wire format into normalized data."""

    def decode(self, data: str, format: str, context: Optional[Dict[str, Any]] = None) -> Any:
        """Decode a string into normalized data.

        Args:
            data: Encoded payload
            format: Format of ``data``
            context: Decoding options

        Returns:
            The decoded data
        """
        ...

    def supports_decoding(self, format: str, context: Optional[Dict[str, Any]] = None) -> bool:
        """Check whether ``format`` can be decoded."""
        ...


@runtime_checkable
class DataCollectorProtocol(Protocol):
    """Receives one report per traced serializer call.

    Each method gets the trace id, the payload as the caller passed it, the
    context forwarded to the engine, the elapsed time in seconds and the
    resolved caller.
    """

    def collect_serialize(
        self,
        trace_id: str,
        data: Any,
        format: str,
        context: Dict[str, Any],
        time: float,
        caller: CallerInfo,
    ) -> None:
        """Record a serialize call."""
        ...

    def collect_deserialize(
        self,
        trace_id: str,
        data: Any,
        type: Any,
        format: str,
        context: Dict[str, Any],
        time: float,
        caller: CallerInfo,
    ) -> None:
        """Record a deserialize call."""
        ...

    def collect_normalize(
        self,
        trace_id: str,
        data: Any,
        format: Optional[str],
        context: Dict[str, Any],
        time: float,
        caller: CallerInfo,
    ) -> None:
        """Record a normalize call."""
        ...

    def collect_denormalize(
        self,
        trace_id: str,
        data: Any,
        type: Any,
        format: Optional[str],
        context: Dict[str, Any],
        time: float,
        caller: CallerInfo,
    ) -> None:
        """Record a denormalize call."""
        ...

    def collect_encode(
        self,
        trace_id: str,
        data: Any,
        format: str,
        context: Dict[str, Any],
        time: float,
        caller: CallerInfo,
    ) -> None:
        """Record an encode call."""
        ...

    def collect_decode(
        self,
        trace_id: str,
        data: Any,
        format: str,
        context: Dict[str, Any],
        time: float,
        caller: CallerInfo,
    ) -> None:
        """Record a decode call."""
        ...
