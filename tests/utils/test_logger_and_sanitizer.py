"""Tests for the log helpers and the user error sanitizer."""

from __future__ import annotations

import logging

from terminalist.constants import ERROR_OPERATION_FAILED, ERROR_TASK_CREATE_FAILED
from terminalist.utils.error_sanitizer import sanitize_user_error
from terminalist.utils.logger import (
    get_log_file_path,
    get_logger,
    redact_user_text_for_log,
    sanitize_for_log,
)


class TestLogger:
    def test_writes_to_user_log_dir(self, tmp_path):
        logger = get_logger("INFO")
        logging.getLogger("terminalist.services.sync").info("hello from sync")
        for handler in logger.handlers:
            handler.flush()

        path = get_log_file_path()
        assert path == tmp_path / "logs" / "terminalist.log"
        assert "[terminalist.services.sync] hello from sync" in path.read_text()

    def test_singleton(self):
        assert get_logger() is get_logger("ERROR")
        assert len(logging.getLogger("terminalist").handlers) == 1

    def test_level_applied_once(self):
        get_logger("WARNING")
        assert logging.getLogger("terminalist").level == logging.WARNING


class TestLogHelpers:
    def test_sanitize_escapes_control_characters(self):
        assert sanitize_for_log("a\nb\tc") == "a\\u{000A}b\\u{0009}c"
        assert sanitize_for_log("plain ünïcode") == "plain ünïcode"

    def test_redact_keeps_only_length(self):
        assert redact_user_text_for_log("secret plan") == "[redacted len=11]"


class TestSanitizeUserError:
    def test_known_prefix_is_kept_alone(self):
        raw = f"{ERROR_TASK_CREATE_FAILED}: 403 https://api.todoist.com?token=abc"
        assert sanitize_user_error(raw, ERROR_OPERATION_FAILED) == ERROR_TASK_CREATE_FAILED

    def test_prefix_found_inside_wrapped_text(self):
        raw = f"background: {ERROR_TASK_CREATE_FAILED}: boom"
        assert sanitize_user_error(raw, ERROR_OPERATION_FAILED) == ERROR_TASK_CREATE_FAILED

    def test_unknown_text_falls_back(self):
        assert sanitize_user_error("boom", ERROR_OPERATION_FAILED) == ERROR_OPERATION_FAILED
