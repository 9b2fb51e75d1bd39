import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from serializer_trace.core.config import get_settings
from serializer_trace.tracing import TraceableSerializer

from stubs import ListCollector, StubSerializer


@pytest.fixture
def engine() -> StubSerializer:
    return StubSerializer()


@pytest.fixture
def collector() -> ListCollector:
    return ListCollector()


@pytest.fixture
def serializer(engine: StubSerializer, collector: ListCollector) -> TraceableSerializer:
    return TraceableSerializer(engine, collector)


@pytest.fixture(autouse=True)
def reset_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
