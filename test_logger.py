"""Tests for logging setup."""

import logging

from vidyapith_content.logger import get_module_logger, resolve_level, setup_logger


class TestResolveLevel:

    def test_names_and_ints(self):
        assert resolve_level("debug") == logging.DEBUG
        assert resolve_level(" WARNING ") == logging.WARNING
        assert resolve_level(logging.ERROR) == logging.ERROR

    def test_unknown_name_falls_back(self):
        assert resolve_level("chatty") == logging.INFO
        assert resolve_level(None, default=logging.WARNING) == logging.WARNING


class TestSetupLogger:

    def test_repeat_call_adjusts_level_without_new_handlers(self):
        logger = setup_logger("vidyapith_content_test_repeat", level="INFO")
        handler_count = len(logger.handlers)

        setup_logger("vidyapith_content_test_repeat", level="DEBUG")

        assert len(logger.handlers) == handler_count
        assert logger.level == logging.DEBUG
        assert all(h.level == logging.DEBUG for h in logger.handlers)

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "scraper.log"
        logger = setup_logger("vidyapith_content_test_file", log_file=str(log_file))
        logger.info("fetched events")
        for handler in list(logger.handlers):
            handler.flush()
            if isinstance(handler, logging.FileHandler):
                handler.close()
                logger.removeHandler(handler)

        assert "fetched events" in log_file.read_text()

    def test_module_logger_is_package_child(self):
        assert get_module_logger("events").name == "vidyapith_content.events"
        assert get_module_logger("events").parent is logging.getLogger("vidyapith_content")
