"""Tests for Loguru setup."""

import json
import sys

import pytest
from loguru import logger

from pagegraph.utils.logger import _level_filter, get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


class TestLevelFilter:
    def test_default_only(self):
        threshold, module_filter = _level_filter("INFO", {})

        assert threshold == logger.level("INFO").no
        assert module_filter == {"": "INFO"}

    def test_verbose_module_lowers_threshold(self):
        threshold, module_filter = _level_filter("warning", {"pagegraph.core.assets": "debug"})

        assert threshold == logger.level("DEBUG").no
        assert module_filter == {"": "WARNING", "pagegraph.core.assets": "DEBUG"}


class TestSetupLogging:
    def test_file_sink_keeps_warning_context(self, tmp_path):
        setup_logging(level="INFO", log_to_file=True, log_dir=str(tmp_path), serialize=True)

        get_logger("pagegraph.tests").bind(context={"url": "https://x.test"}).warning("FetchError: 404")
        logger.remove()  # flushes the enqueued file sink

        log_files = list(tmp_path.glob("pagegraph_*.log"))
        assert len(log_files) == 1
        records = [json.loads(line) for line in log_files[0].read_text().splitlines()]
        extra = records[-1]["record"]["extra"]
        assert extra["module"] == "pagegraph.tests"
        assert extra["context"] == {"url": "https://x.test"}

    def test_console_only_by_default(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        setup_logging()
        logger.info("no module bound")

        assert not (tmp_path / "logs").exists()
