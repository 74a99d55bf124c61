from __future__ import annotations

import logging

import pytest

from roleplay_sim.observability.logging import ContextFilter, log_override
from roleplay_sim.observability.middleware import (
    bind_session_id,
    get_session_id,
    short_session_id,
)
from roleplay_sim.observability.timing import timed


def test_short_session_id():
    assert short_session_id("abcdefghijkl") == "abcdefgh..."
    assert short_session_id("short") == "short"


def test_bind_session_id_is_scoped():
    with bind_session_id("abcdefghijkl"):
        assert get_session_id() == "abcdefgh..."
    assert get_session_id() == ""


def test_context_filter_injects_fields():
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "evt", None, None)
    with bind_session_id("session-xyz-123"):
        ContextFilter("roleplay_sim").filter(record)
    assert record.service == "roleplay_sim"
    assert record.session_id == "session-..."
    assert record.correlation_id == ""


def test_log_override_marks_record(caplog: pytest.LogCaptureFixture):
    logger = logging.getLogger("test.override")
    with caplog.at_level(logging.INFO, logger="test.override"):
        log_override(logger, "stall_breaker_fired", "stall_breaker", "saturated", forced="X")
    record = caplog.records[-1]
    assert record.getMessage() == "stall_breaker_fired"
    assert record.override_applied is True
    assert record.forced == "X"


def test_timed_logs_latency_even_on_error(caplog: pytest.LogCaptureFixture):
    with caplog.at_level(logging.INFO, logger="roleplay_sim.observability.timing"):
        with pytest.raises(RuntimeError):
            with timed("generation", session_id="abc"):
                raise RuntimeError("boom")
    record = caplog.records[-1]
    assert record.getMessage() == "component_latency"
    assert record.component == "generation"
    assert record.elapsed_ms >= 0
