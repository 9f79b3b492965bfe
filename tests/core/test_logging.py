"""Tests for structured logging."""

import json
import logging
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

from tagwatch.config.models import LoggingConfig, LogOutputConfig
from tagwatch.core.logging import (
    clear_batch_id,
    configure_logging,
    get_batch_id,
    get_log_file_path,
    get_logger,
    set_batch_id,
)
from tagwatch.core.progress import ConsoleSuppressingFilter, suppress_console_logs


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Reset logging state between tests."""
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()
    clear_batch_id()
    yield
    structlog.reset_defaults()
    logging.getLogger().handlers.clear()
    clear_batch_id()


def _last_json_line(path: Path) -> dict[str, object]:
    return json.loads(path.read_text().strip().split("\n")[-1])  # type: ignore[no-any-return]


class TestBatchId:
    def test_set_generates_id(self) -> None:
        bid = set_batch_id()
        assert bid
        assert get_batch_id() == bid

    def test_set_explicit_id(self) -> None:
        assert set_batch_id("b-1") == "b-1"

    def test_clear(self) -> None:
        set_batch_id("b-1")
        clear_batch_id()
        assert get_batch_id() is None


class TestFileOutput:
    def test_given_file_output_when_log_then_writes_json(self, tmp_path: Path) -> None:
        """Logs are written to the configured file with the batch id attached."""
        log_file = tmp_path / "logs" / "tagwatch.log"
        configure_logging(
            config=LoggingConfig(
                level="INFO",
                outputs=[LogOutputConfig(format="json", destination=str(log_file))],
            )
        )
        logger = get_logger("filetest")

        set_batch_id("batch-42")
        logger.info("ctags_done", roots=2)

        data = _last_json_line(log_file)
        assert data["event"] == "ctags_done"
        assert data["roots"] == 2
        assert data["batch_id"] == "batch-42"
        assert data["level"] == "info"
        assert data["logger"] == "filetest"

    def test_tracks_first_file_destination(self, tmp_path: Path) -> None:
        log_file = tmp_path / "a.log"
        configure_logging(
            config=LoggingConfig(
                outputs=[
                    LogOutputConfig(destination="stderr"),
                    LogOutputConfig(format="json", destination=str(log_file)),
                ]
            )
        )
        assert get_log_file_path() == log_file

    def test_output_level_filters(self, tmp_path: Path) -> None:
        """Each output respects its own level."""
        debug_file = tmp_path / "debug.log"
        error_file = tmp_path / "error.log"
        configure_logging(
            config=LoggingConfig(
                level="DEBUG",
                outputs=[
                    LogOutputConfig(format="json", destination=str(debug_file), level="DEBUG"),
                    LogOutputConfig(format="json", destination=str(error_file), level="ERROR"),
                ],
            )
        )
        logger = get_logger()
        logger.debug("path_ignored", path="/x")
        logger.error("ctags_failed", returncode=1)

        assert "path_ignored" in debug_file.read_text()
        assert "ctags_failed" in debug_file.read_text()
        error_text = error_file.read_text()
        assert "path_ignored" not in error_text
        assert "ctags_failed" in error_text


class TestConsoleSuppression:
    def test_filter_passes_by_default(self) -> None:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        assert ConsoleSuppressingFilter().filter(record) is True

    def test_filter_blocks_while_suppressed(self) -> None:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        with suppress_console_logs():
            assert ConsoleSuppressingFilter().filter(record) is False
        assert ConsoleSuppressingFilter().filter(record) is True
