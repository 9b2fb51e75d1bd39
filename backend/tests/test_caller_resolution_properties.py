import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

"""
Property-based tests for caller resolution.

Covers the first-match policy, the fallback to the innermost entry and the
short file name derivation.
"""

import inspect
from typing import List

import pytest
from hypothesis import given, strategies as st, settings

from serializer_trace.protocols import DecoderInterface, EncoderInterface, SerializerInterface
from serializer_trace.tracing.caller import (
    MAX_STACK_DEPTH,
    StackEntry,
    capture_stack,
    find_caller,
    short_name,
)
from serializer_trace.tracing.traceable_serializer import TraceableSerializer


# =============================================================================
# Custom Strategies
# =============================================================================

path_segment = st.text(
    alphabet=st.characters(whitelist_categories=("L", "N"), whitelist_characters="_-."),
    min_size=1,
    max_size=20
)

line_number = st.integers(min_value=1, max_value=100_000)


class UserSerializer:
    """Structural implementation of the serializer interface."""

    def serialize(self, data, format, context=None):
        return ""

    def deserialize(self, data, type, format, context=None):
        return None


class Unrelated:
    def serialize(self):
        return ""


def entry(function, owner, file, line) -> StackEntry:
    return StackEntry(function=function, owner=owner, file=file, line=line)


# =============================================================================
# find_caller
# =============================================================================

def test_external_frame_beyond_internal_frames_wins():
    stack = [
        entry("resolve_caller", None, "/app/debug/Traceable.py", 10),
        entry("_dispatch", TraceableSerializer, "/app/debug/Traceable.py", 20),
        entry("serialize", UserSerializer, "/srv/user/Controller.py", 42),
        entry("handle", None, "/srv/user/Kernel.py", 7),
    ]

    caller = find_caller(stack, "serialize", SerializerInterface)

    assert caller.file == "/srv/user/Controller.py"
    assert caller.line == 42
    assert caller.name == "Controller.py"


def test_fallback_to_innermost_entry_without_match():
    stack = [
        entry("resolve_caller", None, "/app/debug/Traceable.py", 10),
        entry("encode", Unrelated, "/srv/user/Controller.py", 42),
        entry("serialize", None, "/srv/user/Kernel.py", 7),
    ]

    caller = find_caller(stack, "serialize", SerializerInterface)

    assert caller.file == "/app/debug/Traceable.py"
    assert caller.line == 10
    assert caller.name == "Traceable.py"


def test_name_match_requires_interface():
    stack = [
        entry("resolve_caller", None, "/a/Inner.py", 1),
        entry("serialize", Unrelated, "/a/Wrong.py", 2),
        entry("serialize", UserSerializer, "/a/Right.py", 3),
    ]

    assert find_caller(stack, "serialize", SerializerInterface).name == "Right.py"


def test_interface_match_requires_method_name():
    stack = [
        entry("resolve_caller", None, "/a/Inner.py", 1),
        entry("deserialize", UserSerializer, "/a/Other.py", 2),
    ]

    assert find_caller(stack, "serialize", SerializerInterface).name == "Inner.py"


def test_interface_itself_counts_as_owner():
    stack = [
        entry("resolve_caller", None, "/a/Inner.py", 1),
        entry("decode", DecoderInterface, "/a/Abstract.py", 5),
    ]

    assert find_caller(stack, "decode", DecoderInterface).line == 5


def test_nominal_subclass_counts_as_owner():
    class JsonEncoder(EncoderInterface):
        def encode(self, data, format, context=None):
            return ""

        def supports_encoding(self, format, context=None):
            return True

    stack = [
        entry("resolve_caller", None, "/a/Inner.py", 1),
        entry("encode", JsonEncoder, "/a/JsonEncoder.py", 9),
    ]

    assert find_caller(stack, "encode", EncoderInterface).line == 9


def test_first_match_wins():
    stack = [
        entry("resolve_caller", None, "/a/Inner.py", 1),
        entry("serialize", TraceableSerializer, "/a/First.py", 2),
        entry("serialize", UserSerializer, "/a/Second.py", 3),
    ]

    assert find_caller(stack, "serialize", SerializerInterface).name == "First.py"


def test_match_beyond_depth_is_ignored():
    stack = [entry("resolve_caller", None, "/a/Inner.py", 1)]
    stack += [entry("handle", None, "/a/Filler.py", i) for i in range(2, MAX_STACK_DEPTH + 1)]
    stack.append(entry("serialize", UserSerializer, "/a/TooDeep.py", 99))

    assert len(stack) > MAX_STACK_DEPTH
    assert find_caller(stack, "serialize", SerializerInterface).name == "Inner.py"


def test_empty_stack_does_not_raise():
    caller = find_caller([], "serialize", SerializerInterface)

    assert caller.file == ""
    assert caller.line == 0


@settings(max_examples=100)
@given(
    files=st.lists(path_segment, min_size=2, max_size=MAX_STACK_DEPTH),
    lines=st.lists(line_number, min_size=MAX_STACK_DEPTH, max_size=MAX_STACK_DEPTH),
    match_at=st.integers(min_value=1, max_value=MAX_STACK_DEPTH - 1),
)
def test_first_qualifying_entry_is_reported(files: List[str], lines: List[int], match_at: int):
    """
    For any stack with a single qualifying entry within the depth bound,
    the resolved caller is that entry.
    """
    stack = [
        entry("handle", None, f"/src/{name}", line)
        for name, line in zip(files, lines)
    ]
    while len(stack) < MAX_STACK_DEPTH:
        stack.append(entry("handle", None, "/src/filler.py", 1))
    stack[match_at] = entry("serialize", UserSerializer, "/src/match.py", lines[match_at])

    caller = find_caller(stack, "serialize", SerializerInterface)

    assert caller.file == "/src/match.py"
    assert caller.line == lines[match_at]


# =============================================================================
# short_name
# =============================================================================

def test_short_name_examples():
    assert short_name("/a/b/C.ext") == "C.ext"
    assert short_name("a\\b\\C.ext") == "C.ext"
    assert short_name("C.ext") == "C.ext"
    assert short_name("C:\\app/mixed\\C.ext") == "C.ext"


@settings(max_examples=100)
@given(segments=st.lists(path_segment, min_size=1, max_size=6), separator=st.sampled_from(["/", "\\"]))
def test_short_name_is_last_segment(segments: List[str], separator: str):
    assert short_name(separator.join(segments)) == segments[-1]


# =============================================================================
# capture_stack
# =============================================================================

class Probe:
    def snapshot(self, limit=MAX_STACK_DEPTH):
        return capture_stack(limit=limit)

    @classmethod
    def class_snapshot(cls):
        return capture_stack()


def test_capture_stack_records_owner_and_call_site():
    line = inspect.currentframe().f_lineno + 1
    stack = Probe().snapshot()

    assert stack[0].function == "snapshot"
    assert stack[0].owner is Probe
    assert stack[0].line == line
    assert stack[0].file.endswith(Path(__file__).name)
    assert stack[1].function == "test_capture_stack_records_owner_and_call_site"
    assert stack[1].owner is None


def test_capture_stack_resolves_classmethod_owner():
    stack = Probe.class_snapshot()

    assert stack[0].function == "class_snapshot"
    assert stack[0].owner is Probe


def test_capture_stack_is_bounded():
    assert len(Probe().snapshot(limit=3)) == 3


def module_function(self):
    return capture_stack()


@pytest.mark.skipif(sys.version_info < (3, 11), reason="co_qualname needs Python 3.11")
def test_module_function_has_no_owner_even_with_self_argument():
    stack = module_function(Probe())

    assert stack[0].function == "module_function"
    assert stack[0].owner is None
