"""Tests for the logging helpers with correlation and session ids."""

import logging
from logging.handlers import RotatingFileHandler
from typing import Any, cast

from skill_engine.core.logging import (
    LOG_FILE_PATH,
    CorrelationIdFilter,
    VersionedJsonFormatter,
    bind_correlation_id,
    bind_log_user_id,
    bind_session_id,
    correlation_id_context,
    get_correlation_id,
    get_log_user_id,
    get_logger,
    get_session_id,
    log_user_id_context,
    reset_correlation_id,
    reset_log_user_id,
    reset_session_id,
    session_id_context,
)


def test_correlation_filter_attaches_context():
    """Filter should attach the current ids onto log records."""
    cid_token = bind_correlation_id("abc123")
    session_token = bind_session_id("amzn1.session.1")
    user_token = bind_log_user_id("safe-user")
    try:
        record = logging.LogRecord(
            name="test",
            level=logging.INFO,
            pathname=__file__,
            lineno=10,
            msg="hello",
            args=None,
            exc_info=None,
        )
        assert CorrelationIdFilter().filter(record) is True
        record_any = cast(Any, record)
        assert record_any.__dict__["correlation_id"] == "abc123"
        assert record_any.__dict__["session_id"] == "amzn1.session.1"
        assert record_any.__dict__["log_user_id"] == "safe-user"
    finally:
        reset_log_user_id(user_token)
        reset_session_id(session_token)
        reset_correlation_id(cid_token)


def test_filter_uses_placeholder_when_unbound():
    """Unbound context variables render as a dash."""
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)
    CorrelationIdFilter().filter(record)

    record_any = cast(Any, record)
    assert record_any.__dict__["correlation_id"] == "-"
    assert record_any.__dict__["session_id"] == "-"


def test_context_managers_restore_state():
    """Nested contexts restore the original values."""
    with (
        correlation_id_context("ctx"),
        correlation_id_context("nested"),
        session_id_context("session-a"),
        log_user_id_context("user-a"),
    ):
        assert get_correlation_id() == "nested"
        assert get_session_id() == "session-a"
        assert get_log_user_id() == "user-a"
    assert get_correlation_id() is None
    assert get_session_id() is None
    assert get_log_user_id() is None


def test_get_logger_installs_json_handlers_once():
    """Loggers get a stream and rotating file handler with the filter, only once."""
    logger = get_logger("skill_engine.tests.logging")
    get_logger("skill_engine.tests.logging")

    assert len(logger.handlers) == 2
    file_handlers = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
    assert len(file_handlers) == 1
    assert file_handlers[0].baseFilename == str(LOG_FILE_PATH)
    for handler in logger.handlers:
        assert isinstance(handler.formatter, VersionedJsonFormatter)
        assert any(isinstance(f, CorrelationIdFilter) for f in handler.filters)
