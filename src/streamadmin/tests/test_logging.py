"""Tests for structured logging renderers."""

from __future__ import annotations

import io

import orjson
import pytest

from streamadmin.foundation.config import LoggingSettings
from streamadmin.runtime.observability import (
    BoundLogger,
    CaptureRenderer,
    ConsoleRenderer,
    JsonRenderer,
    NoOpRenderer,
    configure_from_settings,
    configure_logging,
    get_logger,
    log_context,
)


@pytest.fixture(autouse=True)
def restore_logging() -> object:
    """Put the default console renderer back after each test."""
    yield
    configure_logging("console", "INFO")


def test_console_renderer_formats_context() -> None:
    out = io.StringIO()
    log = BoundLogger(context={"operation": "create_stream"}, _renderer=ConsoleRenderer(output=out, show_timestamp=False))

    log.info("stream created", stream="orders", shards=4)

    assert out.getvalue().strip() == '[info] stream created operation="create_stream" shards=4 stream="orders"'


def test_json_renderer_writes_one_object_per_line() -> None:
    out = io.StringIO()
    log = BoundLogger(_renderer=JsonRenderer(output=out)).bind_operation("list_streams")

    log.warning("rate limited, retrying", attempt=2, delay=0.4)

    record = orjson.loads(out.getvalue())
    assert record["level"] == "warning"
    assert record["event"] == "rate limited, retrying"
    assert record["operation"] == "list_streams"
    assert record["attempt"] == 2
    assert "timestamp" in record


def test_level_filtering() -> None:
    capture = CaptureRenderer()
    log = BoundLogger(_renderer=capture, _level=30)

    log.debug("hidden")
    log.info("hidden")
    log.error("shown")

    assert capture.events() == ["shown"]


def test_bind_does_not_mutate_parent() -> None:
    parent = BoundLogger(context={"logger": "streamadmin"})
    child = parent.bind(stream="orders")
    assert parent.context == {"logger": "streamadmin"}
    assert child.context == {"logger": "streamadmin", "stream": "orders"}


def test_log_context_scope() -> None:
    capture = CaptureRenderer()
    log = BoundLogger(_renderer=capture)

    with log_context(request_id="abc"):
        log.info("inside")
    log.info("outside")

    assert capture.entries[0].context["request_id"] == "abc"
    assert "request_id" not in capture.entries[1].context


def test_configure_logging() -> None:
    out = io.StringIO()
    configure_logging("json", "WARNING", output=out)

    log = get_logger("streamadmin.test")
    log.info("dropped")
    log.error("kept", code="LIMIT_EXCEEDED")

    lines = out.getvalue().splitlines()
    assert len(lines) == 1
    assert orjson.loads(lines[0])["logger"] == "streamadmin.test"

    with pytest.raises(ValueError, match="Unknown format"):
        configure_logging("xml")


def test_configure_from_settings() -> None:
    renderer = configure_from_settings(LoggingSettings(format="none", level="ERROR"))
    assert isinstance(renderer, NoOpRenderer)
    assert get_logger("streamadmin.test")._level == 40
