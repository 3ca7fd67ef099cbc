"""
Test logging setup.
"""

import json
import logging

import pytest

from pbx_exporter.logging_config import HumanReadableFormatter, StructuredFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def make_record(msg="scrape finished", level=logging.INFO):
    return logging.LogRecord("pbx_exporter.test", level, __file__, 10, msg, None, None)


class TestFormatters:
    def test_structured_formatter_emits_json(self):
        data = json.loads(StructuredFormatter().format(make_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "pbx_exporter.test"
        assert data["message"] == "scrape finished"

    def test_human_readable_without_colors(self):
        line = HumanReadableFormatter().format(make_record())

        assert "pbx_exporter.test - INFO - scrape finished" in line
        assert "\033[" not in line

    def test_human_readable_with_colors(self):
        line = HumanReadableFormatter(use_colors=True).format(make_record(level=logging.ERROR))

        assert line.startswith("\033[31m")
        assert line.endswith("\033[0m")


class TestSetupLogging:
    def test_console_only(self, restore_root_logger):
        setup_logging("WARNING")

        assert restore_root_logger.level == logging.WARNING
        assert len(restore_root_logger.handlers) == 1
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_file_logging(self, restore_root_logger, tmp_path):
        setup_logging("INFO", log_dir=str(tmp_path / "logs"), use_json=True)
        logging.getLogger("pbx_exporter.test").error("fetch failed")

        assert len(restore_root_logger.handlers) == 3
        assert "fetch failed" in (tmp_path / "logs" / "exporter.log").read_text()
        error_lines = (tmp_path / "logs" / "error.log").read_text().splitlines()
        assert json.loads(error_lines[-1])["message"] == "fetch failed"
