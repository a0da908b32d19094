import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog

from analysis.logic.enums import ClaimType, HandCategory
from shared.logging import _serialize_enums, resolve_json_mode, resolve_log_level, setup_logging


@pytest.fixture(autouse=True)
def _cleanup_root_logger():
    """Close and remove all handlers from the root logger after each test."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)


@pytest.fixture(autouse=True)
def _allow_file_logging():
    """Disable the _is_test guard so logging tests can create real file handlers."""
    with patch("shared.logging._is_test", return_value=False):
        yield


class TestSetupLogging:
    def test_configures_stdout_handler(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        setup_logging()
        root = logging.getLogger()

        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        handler = root.handlers[0]
        assert isinstance(handler, logging.StreamHandler)
        assert isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)

    def test_configures_file_handler_in_log_dir(self, tmp_path):
        log_dir = tmp_path / "analysis"
        setup_logging(log_dir=log_dir)
        root = logging.getLogger()

        assert len(root.handlers) == 2
        file_handler = root.handlers[1]
        assert isinstance(file_handler, logging.FileHandler)
        assert Path(file_handler.baseFilename).parent == log_dir

    def test_log_file_has_datetime_in_name(self, tmp_path):
        fixed_time = datetime(2025, 3, 15, 10, 30, 45, tzinfo=UTC)
        with patch("shared.logging.datetime") as mock_dt:
            mock_dt.now.return_value = fixed_time
            log_path = setup_logging(log_dir=tmp_path)

        assert log_path is not None
        assert log_path.name == "analysis_2025-03-15_10-30-45.log"

    def test_returns_none_without_log_dir(self):
        assert setup_logging() is None

    def test_skips_file_output_under_pytest(self, tmp_path):
        with patch("shared.logging._is_test", return_value=True):
            assert setup_logging(log_dir=tmp_path / "analysis") is None

        assert not (tmp_path / "analysis").exists()

    def test_writes_to_file_in_nested_dir(self, tmp_path):
        log_dir = tmp_path / "nested" / "dir"
        log_path = setup_logging(log_dir=str(log_dir))

        structlog.get_logger("test.nested").info("ranked templates", viable=3)

        assert log_dir.exists()
        assert log_path is not None
        assert "ranked templates" in log_path.read_text()

    def test_clears_existing_handlers_on_repeated_calls(self):
        setup_logging()
        setup_logging()

        assert len(logging.getLogger().handlers) == 1

    def test_explicit_level_wins_over_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        setup_logging(level=logging.DEBUG)

        assert logging.getLogger().level == logging.DEBUG

    def test_json_mode_renders_enums_by_value(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "json")
        log_path = setup_logging(log_dir=tmp_path)

        structlog.contextvars.bind_contextvars(template_id=12)
        structlog.get_logger("test.json").info("advised call", claim_type=ClaimType.KONG)
        structlog.contextvars.clear_contextvars()

        assert log_path is not None
        parsed = json.loads(log_path.read_text().strip().splitlines()[0])
        assert parsed["event"] == "advised call"
        assert parsed["template_id"] == 12
        assert parsed["claim_type"] == "kong"


class TestResolveEnv:
    def test_log_level_from_env_is_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert resolve_log_level() == logging.DEBUG

    def test_invalid_log_level_raises(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "bogus")
        with pytest.raises(ValueError, match="Invalid LOG_LEVEL"):
            setup_logging()

    def test_unset_format_is_console(self, monkeypatch):
        monkeypatch.delenv("LOG_FORMAT", raising=False)
        assert resolve_json_mode() is False

    def test_invalid_log_format_raises(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "xml")
        with pytest.raises(ValueError, match="Invalid LOG_FORMAT"):
            setup_logging()


class TestSerializeEnums:
    def test_replaces_enum_with_value(self):
        result = _serialize_enums(None, "", {"category": HandCategory.QUINTS, "name": "Quints #1"})

        assert result == {"category": "quints", "name": "Quints #1"}

    def test_replaces_enums_inside_sequences(self):
        result = _serialize_enums(None, "", {"claims": (ClaimType.PUNG, ClaimType.MAHJONG)})

        assert result["claims"] == ["pung", "mahjong"]

    def test_leaves_non_enum_values_unchanged(self):
        event_dict = {"distance": 2, "template_id": 40}

        assert _serialize_enums(None, "", event_dict) == {"distance": 2, "template_id": 40}
