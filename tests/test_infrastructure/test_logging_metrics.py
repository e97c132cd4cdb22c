"""
Test infrastructure components: logging, metrics and time providers.
"""

from datetime import datetime, timedelta, timezone

import pytest
from prometheus_client import REGISTRY

import oid_space.generator.enumeration as enumeration
from oid_space.generator import END_OF_STREAM, generate, stream
from oid_space.kernel.logging import (
    LogOperation,
    configure_logging,
    current_run_id,
    generation_run,
    get_logger,
    get_run_id,
    set_run_id,
)
from oid_space.kernel.errors import MachineCountTooLarge
from oid_space.kernel.metrics import track_generation
from oid_space.kernel.time import (
    RealTimeProvider,
    TestTimeProvider,
    to_unix_seconds,
    truncate_to_seconds,
)


def _sample(name: str, labels: dict[str, str]) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


class TestLoggingFramework:
    """Test structured logging framework."""

    def test_configure_logging_console(self) -> None:
        configure_logging(json_output=False, log_level="INFO")
        logger = get_logger(__name__)
        assert logger is not None

    def test_configure_logging_json(self) -> None:
        configure_logging(json_output=True, log_level="DEBUG")
        logger = get_logger(__name__)
        assert logger is not None

    def test_run_id(self) -> None:
        rid = get_run_id()
        assert rid

        set_run_id("run-2009-11-10")
        assert get_run_id() == "run-2009-11-10"

    def test_log_operation_context_manager(self) -> None:
        configure_logging(json_output=False, log_level="INFO")
        logger = get_logger(__name__)

        with LogOperation(logger, "test_operation", count=3):
            pass

    def test_log_operation_with_exception(self) -> None:
        configure_logging(json_output=False, log_level="INFO")
        logger = get_logger(__name__)

        with pytest.raises(ValueError):
            with LogOperation(logger, "failing_operation"):
                raise ValueError("Test error")


class TestRunScope:
    """Each generation run logs under one run id, producer thread included."""

    def test_generation_run_restores_previous_binding(self) -> None:
        set_run_id("outer")

        with generation_run("inner") as rid:
            assert rid == "inner"
            assert current_run_id() == "inner"

        assert current_run_id() == "outer"

    def test_generation_run_reuses_bound_id(self) -> None:
        set_run_id("outer")

        with generation_run() as rid:
            assert rid == "outer"

    def test_generate_scopes_a_fresh_run_id(self, small_config, monkeypatch) -> None:
        seen: list[str | None] = []
        enumerate_ids = enumeration._enumerate

        def recording(config):
            seen.append(current_run_id())
            return enumerate_ids(config)

        monkeypatch.setattr(enumeration, "_enumerate", recording)

        generate(small_config)
        generate(small_config)

        assert None not in seen
        assert seen[0] != seen[1]
        assert current_run_id() is None

    def test_generate_keeps_callers_run_id(self, small_config, monkeypatch) -> None:
        seen: list[str | None] = []
        enumerate_ids = enumeration._enumerate

        def recording(config):
            seen.append(current_run_id())
            return enumerate_ids(config)

        monkeypatch.setattr(enumeration, "_enumerate", recording)
        set_run_id("run-batch")

        generate(small_config)

        assert seen == ["run-batch"]

    def test_stream_producer_carries_callers_run_id(self, small_config, monkeypatch) -> None:
        seen: list[str | None] = []

        def fake_send(config, q, *, cancel=None):
            seen.append(current_run_id())
            q.put(END_OF_STREAM)

        monkeypatch.setattr(enumeration, "send_to_queue", fake_send)
        set_run_id("run-main")

        oids = stream(small_config)

        assert list(oids) == []
        assert seen == ["run-main"]
        assert oids.run_id == "run-main"

    def test_unbound_stream_gets_its_own_run_id(self, small_config, monkeypatch) -> None:
        seen: list[str | None] = []

        def fake_send(config, q, *, cancel=None):
            seen.append(current_run_id())
            q.put(END_OF_STREAM)

        monkeypatch.setattr(enumeration, "send_to_queue", fake_send)

        oids = stream(small_config)
        list(oids)

        assert oids.run_id is not None
        assert seen == [oids.run_id]
        assert current_run_id() is None


class TestGenerationMetrics:
    """Generation runs are counted per mode."""

    def test_batch_identifiers_counted(self, small_config) -> None:
        before = _sample("oidspace_identifiers_generated_total", {"mode": "batch"})

        generate(small_config)

        after = _sample("oidspace_identifiers_generated_total", {"mode": "batch"})
        assert after - before == 160

    def test_stream_identifiers_counted(self, small_config) -> None:
        before = _sample("oidspace_identifiers_generated_total", {"mode": "stream"})

        assert len(list(stream(small_config))) == 160

        after = _sample("oidspace_identifiers_generated_total", {"mode": "stream"})
        assert after - before == 160

    def test_validation_failure_counted(self, oversized_machines_config) -> None:
        labels = {"reason": "MachineCountTooLarge"}
        runs = {"mode": "batch", "status": "failure"}
        before = _sample("oidspace_validation_failures_total", labels)
        runs_before = _sample("oidspace_generation_runs_total", runs)

        with pytest.raises(MachineCountTooLarge):
            generate(oversized_machines_config)

        assert _sample("oidspace_validation_failures_total", labels) - before == 1
        assert _sample("oidspace_generation_runs_total", runs) - runs_before == 1

    def test_track_generation_preserves_return_value(self) -> None:
        @track_generation("test")
        def produce() -> list[int]:
            return [1, 2, 3]

        before = _sample("oidspace_generation_runs_total", {"mode": "test", "status": "success"})
        assert produce() == [1, 2, 3]
        after = _sample("oidspace_generation_runs_total", {"mode": "test", "status": "success"})
        assert after - before == 1


class TestTimeHelpers:
    def test_real_time_provider_is_utc(self) -> None:
        assert RealTimeProvider().now().tzinfo == timezone.utc

    def test_test_time_provider_advances(self, test_time: TestTimeProvider) -> None:
        start = test_time.now()
        test_time.advance_seconds(90)
        assert test_time.now() - start == timedelta(seconds=90)

    def test_truncate_to_seconds(self) -> None:
        dt = datetime(2009, 11, 10, 23, 0, 0, 750_000, tzinfo=timezone.utc)
        assert truncate_to_seconds(dt).microsecond == 0

    def test_to_unix_seconds(self, fixed_time: datetime, fixed_unix_seconds: int) -> None:
        assert to_unix_seconds(fixed_time) == fixed_unix_seconds
