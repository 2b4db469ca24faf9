"""
Tests for the per-component log files.
"""

import os
from logging.handlers import RotatingFileHandler

from core.utils import logging_utils
from core.utils.logging_utils import get_component_logger, log_path_for


def _file_handlers(logger):
    return [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]


class TestComponentLoggers:

    def test_each_component_has_its_own_file(self):
        assert log_path_for("api").name == "api.log"
        assert log_path_for("retrieval").name == "retrieval.log"
        assert log_path_for("completion").name == "completion.log"

    def test_files_live_under_log_dir(self):
        assert log_path_for("api").parent == logging_utils.LOG_DIR
        assert log_path_for("something-else") == logging_utils.LOG_DIR / "relay.log"

    def test_logger_writes_to_component_file(self):
        logger = get_component_logger("LoggingTest", component="completion")

        handlers = _file_handlers(logger)
        assert len(handlers) == 1
        assert handlers[0].baseFilename == os.path.abspath(log_path_for("completion"))

    def test_handlers_are_attached_once(self):
        first = get_component_logger("LoggingTwice", component="api")
        count = len(first.handlers)

        second = get_component_logger("LoggingTwice", component="api")

        assert second is first
        assert len(second.handlers) == count
