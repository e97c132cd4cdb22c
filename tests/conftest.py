"""
Pytest configuration and shared fixtures

Fun fact: 2009-11-10T23:00:00Z packs into the timestamp bytes 4a f9 f0 70,
so every identifier built from the fixtures below starts with "4af9f070".
"""

from datetime import datetime, timezone

import pytest
import structlog

from oid_space.generator import GenerationConfig
from oid_space.kernel.time import TestTimeProvider


@pytest.fixture
def test_time() -> TestTimeProvider:
    """Controllable time provider frozen at 2009-11-10 23:00:00 UTC"""
    return TestTimeProvider(datetime(2009, 11, 10, 23, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def fixed_time(test_time: TestTimeProvider) -> datetime:
    return test_time.now()


@pytest.fixture
def fixed_unix_seconds() -> int:
    return 0x4AF9F070


@pytest.fixture
def small_config(fixed_time: datetime) -> GenerationConfig:
    """4 machines x 4 processes x 10 counters = 160 identifiers"""
    return GenerationConfig.create(fixed_time, 4, 4, 10)


@pytest.fixture
def oversized_machines_config(fixed_time: datetime) -> GenerationConfig:
    """Config whose machine range does not fit in 3 bytes"""
    return GenerationConfig(
        timestamp=fixed_time, machine_count=1 << 25, process_count=1, item_count=2
    )


@pytest.fixture(autouse=True)
def clear_log_context():
    """Run ids bound by one test must not leak into the next"""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()
