"""Unit tests for structlog logging setup."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from mp_search.observability.logging import configure_logging, get_logger


@pytest.fixture()
def restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.reset_defaults()


def _render(handler: logging.Handler, record: logging.LogRecord) -> str:
    assert handler.formatter is not None
    return handler.formatter.format(record)


def _record(msg: str, *args: object, level: int = logging.WARNING) -> logging.LogRecord:
    return logging.LogRecord("mp_search.application.search.filters", level, __file__, 1, msg, args, None)


@pytest.mark.usefixtures("restore_root_logger")
class TestConfigureLogging:
    def test_installs_single_handler(self) -> None:
        configure_logging(logging.DEBUG)
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG

    def test_stdlib_records_render_as_json(self) -> None:
        configure_logging()
        handler = logging.getLogger().handlers[0]
        line = _render(handler, _record("search.filter_dropped field=%s", "active"))
        payload = json.loads(line)
        assert payload["event"] == "search.filter_dropped field=active"
        assert payload["level"] == "warning"
        assert payload["logger"] == "mp_search.application.search.filters"
        assert "timestamp" in payload

    def test_console_renderer(self) -> None:
        configure_logging(json=False)
        handler = logging.getLogger().handlers[0]
        line = _render(handler, _record("search.index_created index=%s", "logs", level=logging.INFO))
        assert "search.index_created index=logs" in line
        with pytest.raises(json.JSONDecodeError):
            json.loads(line)

    def test_reconfigure_replaces_handler(self) -> None:
        configure_logging()
        configure_logging()
        assert len(logging.getLogger().handlers) == 1


class TestGetLogger:
    def test_binds_initial_values(self) -> None:
        logger = get_logger("mp_search.test", index="logs")
        assert logger is not None
        bound = logger.bind(document_type="log")
        assert bound is not None

    def test_plain_logger(self) -> None:
        assert get_logger() is not None
