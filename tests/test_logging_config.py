"""Tests for structured logging setup."""

import logging
import sys
import threading

import pytest

from calclogic_pkg.api import configure_logging
from calclogic_pkg.engine import Symbols
from calclogic_pkg.logging_config import StructuredFormatter, get_logger, setup_logging
from calclogic_pkg.types import CalcSyntaxError


@pytest.fixture
def reset_logging():
    yield
    logger = logging.getLogger("calclogic")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


def make_record(msg="hi %s", args=("there",), exc_info=None):
    return logging.LogRecord(
        "calclogic.logic", logging.INFO, __file__, 1, msg, args, exc_info
    )


class TestGetLogger:
    def test_module_loggers_share_the_package_root(self):
        assert get_logger("engine").name == "calclogic.engine"
        assert get_logger().name == "calclogic"


class TestSetupLogging:
    def test_level_and_handler(self, reset_logging):
        logger = setup_logging("DEBUG")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, StructuredFormatter)

    def test_repeated_setup_replaces_handlers(self, reset_logging):
        setup_logging("INFO")
        logger = setup_logging("ERROR")
        assert len(logger.handlers) == 1
        assert logger.level == logging.ERROR

    def test_configure_logging_writes_module_records(self, tmp_path, reset_logging):
        path = tmp_path / "calc.log"
        logger = configure_logging("warning", log_file=str(path))
        assert logger.name == "calclogic"
        with pytest.raises(CalcSyntaxError):
            Symbols().eval("__import__('os')")
        for handler in logger.handlers:
            handler.flush()
        assert "[WARNING] calclogic.engine: Blocked input" in path.read_text(encoding="utf-8")


class TestStructuredFormatter:
    def test_main_thread_record(self):
        line = StructuredFormatter().format(make_record())
        assert line.endswith("[INFO] calclogic.logic: hi there")

    def test_worker_thread_name(self):
        lines = []
        worker = threading.Thread(
            target=lambda: lines.append(StructuredFormatter().format(make_record())),
            name="curve-sampler_0",
        )
        worker.start()
        worker.join()
        assert lines[0].endswith("calclogic.logic (curve-sampler_0): hi there")

    def test_traceback_is_appended(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = make_record("failed", (), sys.exc_info())
        text = StructuredFormatter().format(record)
        assert text.splitlines()[0].endswith("calclogic.logic: failed")
        assert "ValueError: boom" in text
