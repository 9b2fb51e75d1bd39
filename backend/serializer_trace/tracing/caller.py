"""
Call-site resolution for traced serializer calls.

The tracing proxy exposes methods named exactly like the interface it wraps,
so the frame right above it is often another proxy or adapter frame. The
resolver walks a bounded stack snapshot and keeps the first frame that runs
the traced method on a class honouring the expected interface.
"""

import sys
from dataclasses import dataclass
from types import FrameType
from typing import List, Optional, Sequence

from ..types import CallerInfo

MAX_STACK_DEPTH = 8
MIN_STACK_DEPTH = 2


@dataclass(frozen=True)
class StackEntry:
    """One active call: what is running and where it was called from."""
    function: Optional[str]
    owner: Optional[type]
    file: str
    line: int


def _owner_of(frame: FrameType) -> Optional[type]:
    # Only the type of the bound receiver is kept, never argument values.
    code = frame.f_code
    if code.co_argcount == 0 or code.co_varnames[0] not in ("self", "cls"):
        return None
    qualname = getattr(code, "co_qualname", None)
    if qualname is not None and "." not in qualname:
        # Module-level function: no class to report.
        return None
    # Code objects do not name their class, so the receiver has to be read
    # from the frame's locals.
    receiver = frame.f_locals.get(code.co_varnames[0])
    if receiver is None:
        return None
    return receiver if isinstance(receiver, type) else type(receiver)


def capture_stack(limit: int = MAX_STACK_DEPTH, skip: int = 1) -> List[StackEntry]:
    """
    Snapshot at most ``limit`` active calls, innermost first.

    ``skip`` counts frames above this function; the default starts at the
    function that called ``capture_stack``. Each entry reports the location
    its function was called from.
    """
    try:
        frame: Optional[FrameType] = sys._getframe(skip)
    except ValueError:
        return []

    entries: List[StackEntry] = []
    while frame is not None and len(entries) < limit:
        parent = frame.f_back
        location = parent if parent is not None else frame
        entries.append(
            StackEntry(
                function=frame.f_code.co_name,
                owner=_owner_of(frame),
                file=location.f_code.co_filename,
                line=location.f_lineno or 0,
            )
        )
        frame = parent
    return entries


def short_name(file: str) -> str:
    """Base name of ``file`` for both ``/`` and ``\\`` separated paths."""
    name = file.replace("\\", "/")
    return name[name.rfind("/") + 1:]


def _implements(owner: type, interface: type) -> bool:
    if owner is interface:
        return True
    try:
        return issubclass(owner, interface)
    except TypeError:
        return False


def find_caller(
    stack: Sequence[StackEntry],
    method: str,
    interface: type,
    depth: int = MAX_STACK_DEPTH,
) -> CallerInfo:
    """
    Pick the external call site out of a stack snapshot.

    Entry 0 is the fallback. Entries 1 up to ``depth`` are scanned and the
    first one running ``method`` on a class implementing ``interface`` wins.
    """
    if not stack:
        return CallerInfo(name="", file="", line=0)

    file, line = stack[0].file, stack[0].line

    for entry in stack[1:depth]:
        if entry.owner is None or entry.function is None:
            continue
        if entry.function == method and _implements(entry.owner, interface):
            file, line = entry.file, entry.line
            break

    return CallerInfo(name=short_name(file), file=file, line=line)


def resolve_caller(method: str, interface: type, depth: int = MAX_STACK_DEPTH) -> CallerInfo:
    """Resolve the caller of the traced ``method`` from the live stack."""
    stack = capture_stack(limit=depth)
    return find_caller(stack, method, interface, depth=depth)
