"""Tests for logging setup."""

import logging

from roost.observability.logging import setup_logging


def test_log_dir_gets_combined_and_error_files(tmp_path):
    setup_logging("INFO", tmp_path / "logs")
    try:
        logging.getLogger("roost.test").info("plain record")
        logging.getLogger("roost.test").error("bad record")
        for handler in logging.getLogger().handlers:
            handler.flush()

        combined = (tmp_path / "logs" / "combined.log").read_text()
        errors = (tmp_path / "logs" / "error.log").read_text()
        assert "plain record" in combined and "bad record" in combined
        assert "bad record" in errors
        assert "plain record" not in errors
    finally:
        for handler in list(logging.getLogger().handlers):
            handler.close()
        setup_logging("WARNING")


def test_level_is_applied():
    setup_logging("debug")
    assert logging.getLogger().level == logging.DEBUG
    setup_logging("WARNING")
