"""
Core types for serializer tracing.

A TraceRecord describes exactly one traced call. Records are immutable once
built; the payload is kept by reference, never copied.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class TraceOperation(Enum):
    """Serializer operations that produce a trace record."""
    SERIALIZE = "serialize"
    DESERIALIZE = "deserialize"
    NORMALIZE = "normalize"
    DENORMALIZE = "denormalize"
    ENCODE = "encode"
    DECODE = "decode"


class CallerInfo(BaseModel):
    """Source location that started a traced call."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Base name of the source file")
    file: str = Field(description="Full path of the source file")
    line: int = Field(description="Line number of the call")


class TraceRecord(BaseModel):
    """One traced serializer call."""
    model_config = ConfigDict(frozen=True)

    trace_id: str = Field(description="Unique identifier of the call")
    operation: TraceOperation
    data: Any = Field(default=None, description="Input payload, by reference")
    type: Any = Field(default=None, description="Target type for (de)normalization, a name or a class")
    format: Optional[str] = Field(default=None, description="Wire format, if any")
    context: Dict[str, Any] = Field(default_factory=dict, description="Context forwarded to the engine")
    time: float = Field(ge=0.0, description="Elapsed time in seconds")
    caller: CallerInfo
