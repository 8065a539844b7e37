"""Tests for structured logging configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from io import StringIO
from pathlib import Path

import pytest

from conftest import NON_MONOTONIC_GRID_PATH

from ease_studio.config import settings
from ease_studio.logging_config import (
    ErrorFilter,
    StructuredFormatter,
    category_for,
    configure_logging,
    setup_logging,
)
from ease_studio.normalizer import CurveNormalizer, normalize_path
from ease_studio.path_model import CurvePath
from ease_studio.store import JsonCurveStore


def make_record(
    name: str = "ease_studio.editor",
    level: int = logging.INFO,
    msg: str = "Test",
    exc_info=None,
) -> logging.LogRecord:
    return logging.LogRecord(
        name=name,
        level=level,
        pathname="test.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    """Drop the handlers configure_logging installed; pytest manages its own."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if not type(handler).__module__.startswith("_pytest"):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


class TestStructuredFormatter:
    """Tests for StructuredFormatter JSON output."""

    @pytest.fixture
    def formatter(self) -> StructuredFormatter:
        return StructuredFormatter()

    def test_basic_json_output(self, formatter: StructuredFormatter) -> None:
        """Test that output is valid JSON with required fields."""
        data = json.loads(formatter.format(make_record(msg="Handle pressed")))

        assert "timestamp" in data
        assert data["level"] == "INFO"
        assert data["logger"] == "ease_studio.editor"
        assert data["message"] == "Handle pressed"
        assert data["category"] == "editor"

    @pytest.mark.parametrize(
        ("logger_name", "category"),
        [
            ("ease_studio.editor", "editor"),
            ("ease_studio.path_model", "editor"),
            ("ease_studio.session", "editor"),
            ("ease_studio.normalizer", "normalizer"),
            ("ease_studio.evaluator", "animation"),
            ("ease_studio.driver", "animation"),
            ("ease_studio.store", "storage"),
            ("ease_studio.cli", "cli"),
            ("ease_studio.config", "system"),
        ],
    )
    def test_category_detection(
        self, formatter: StructuredFormatter, logger_name: str, category: str
    ) -> None:
        data = json.loads(formatter.format(make_record(name=logger_name)))
        assert data["category"] == category

    def test_category_for_submodules(self) -> None:
        assert category_for("ease_studio.driver.loop") == "animation"
        assert category_for("ease_studio") == "system"
        assert category_for("ease_studio_plugins.editor") == "system"

    def test_category_detection_unknown(self, formatter: StructuredFormatter) -> None:
        """Test category defaults to system for unknown loggers."""
        data = json.loads(formatter.format(make_record(name="unknown.logger")))
        assert data["category"] == "system"

    def test_extra_fields_serializable(self, formatter: StructuredFormatter) -> None:
        record = make_record()
        record.component = "chat_list"  # type: ignore[attr-defined]
        record.handle_index = 3  # type: ignore[attr-defined]
        data = json.loads(formatter.format(record))
        assert data["extra"]["component"] == "chat_list"
        assert data["extra"]["handle_index"] == 3

    def test_extra_fields_non_serializable(self, formatter: StructuredFormatter) -> None:
        """Test that non-serializable extra fields are converted to string."""
        record = make_record()
        record.custom_obj = object()  # type: ignore[attr-defined]
        data = json.loads(formatter.format(record))
        assert isinstance(data["extra"]["custom_obj"], str)

    def test_no_extra_key_without_extras(self, formatter: StructuredFormatter) -> None:
        data = json.loads(formatter.format(make_record()))
        assert "extra" not in data

    def test_exception_info(self, formatter: StructuredFormatter) -> None:
        """Test that exception info is included."""
        try:
            raise ValueError("Test error")
        except ValueError:
            import sys

            exc_info = sys.exc_info()

        record = make_record(level=logging.ERROR, msg="Error occurred", exc_info=exc_info)
        data = json.loads(formatter.format(record))
        assert "ValueError" in data["exception"]
        assert "Test error" in data["exception"]


class TestErrorFilter:
    """Tests for ErrorFilter."""

    @pytest.mark.parametrize(
        ("level", "allowed"),
        [
            (logging.DEBUG, False),
            (logging.INFO, False),
            (logging.WARNING, False),
            (logging.ERROR, True),
            (logging.CRITICAL, True),
        ],
    )
    def test_levels(self, level: int, allowed: bool) -> None:
        assert ErrorFilter().filter(make_record(level=level)) is allowed


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_json_format_output(self) -> None:
        output = StringIO()
        configure_logging(json_format=True, log_level=logging.INFO, stream=output)

        logging.getLogger("ease_studio.store").info("Saved curve")

        data = json.loads(output.getvalue().strip())
        assert data["message"] == "Saved curve"
        assert data["category"] == "storage"

    def test_plain_format_output(self) -> None:
        output = StringIO()
        configure_logging(json_format=False, log_level=logging.INFO, stream=output)

        logging.getLogger("test.plain").info("Test message")

        content = output.getvalue()
        assert "Test message" in content
        assert "INFO" in content
        with pytest.raises(json.JSONDecodeError):
            json.loads(content.strip())

    def test_log_level_filtering(self) -> None:
        output = StringIO()
        configure_logging(json_format=False, log_level=logging.WARNING, stream=output)

        logger = logging.getLogger("test.level")
        logger.info("quiet")
        logger.warning("loud")

        content = output.getvalue()
        assert "quiet" not in content
        assert "loud" in content

    def test_string_log_level(self) -> None:
        configure_logging(json_format=False, log_level="DEBUG", stream=StringIO())
        assert logging.getLogger().level == logging.DEBUG

    def test_error_log_file(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "app.log"
        error_file = tmp_path / "logs" / "errors.log"
        configure_logging(
            json_format=True,
            log_file=str(log_file),
            error_log_file=str(error_file),
            stream=StringIO(),
        )

        logger = logging.getLogger("ease_studio.driver")
        logger.info("Animation loop started")
        logger.error("Animation listener failed")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "Animation loop started" in log_file.read_text()
        errors = error_file.read_text()
        assert "Animation listener failed" in errors
        assert "Animation loop started" not in errors


class TestSetupLogging:
    def test_uses_configured_files(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        log_file = tmp_path / "ease.log"
        error_file = tmp_path / "errors.log"
        monkeypatch.setattr(settings, "log_json", True)
        monkeypatch.setattr(settings, "log_file", str(log_file))
        monkeypatch.setattr(settings, "log_error_file", str(error_file))
        setup_logging(stream=StringIO())

        logging.getLogger("ease_studio.session").info("Session opened")
        logging.getLogger("ease_studio.driver").error("Animation listener failed")
        for handler in logging.getLogger().handlers:
            handler.flush()

        lines = [json.loads(line) for line in log_file.read_text().splitlines()]
        assert [line["category"] for line in lines] == ["editor", "animation"]
        assert "Session opened" not in error_file.read_text()

    def test_stream_only_by_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "log_file", None)
        monkeypatch.setattr(settings, "log_error_file", None)
        setup_logging(stream=StringIO())
        assert len(logging.getLogger().handlers) == 1


class TestDomainFields:
    def test_store_save_fields(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        store = JsonCurveStore(tmp_path / "curves.json")
        curve = normalize_path(CurvePath.create_default("linear")).curve
        assert curve is not None

        with caplog.at_level(logging.INFO, logger="ease_studio.store"):
            store.set("chat_list", "opacity", curve)

        record = next(r for r in caplog.records if r.name == "ease_studio.store")
        data = json.loads(StructuredFormatter().format(record))
        assert data["category"] == "storage"
        assert data["extra"]["component"] == "chat_list"
        assert data["extra"]["prop"] == "opacity"

    def test_rejection_reason_field(self, caplog: pytest.LogCaptureFixture) -> None:
        initial = normalize_path(CurvePath.create_default()).curve
        assert initial is not None
        normalizer = CurveNormalizer(initial)

        with caplog.at_level(logging.INFO, logger="ease_studio.normalizer"):
            normalizer.update(CurvePath.from_path_string(NON_MONOTONIC_GRID_PATH))

        record = next(r for r in caplog.records if r.message.startswith("Rejected curve"))
        assert record.reason == "NonMonotonicTime"  # type: ignore[attr-defined]
