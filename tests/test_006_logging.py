import logging
from logging.handlers import RotatingFileHandler
import os

import pytest

from mssql_dsn import parse_connect_params
from mssql_dsn.helpers import sanitize_connection_string, sanitize_user_input
from mssql_dsn.logging import DSNLogger, logger, setup_logging, STDOUT, BOTH


class _ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.messages = []

    def emit(self, record):
        self.messages.append(record.getMessage())


def test_no_logging_by_default(reset_logger):
    """Test that logging is off by default"""
    assert logger.level == logging.CRITICAL
    assert not logger.isEnabledFor(logging.DEBUG)
    assert logger.log_file is None
    assert logger._file_handler is None
    assert logger._stdout_handler is None
    assert not any(isinstance(h, RotatingFileHandler) for h in logger.handlers)


def test_singleton():
    assert DSNLogger() is logger


def test_setup_logging_stdout(reset_logger):
    """Test if logging is set up correctly in stdout mode"""
    result = setup_logging(output=STDOUT)
    assert result is logger
    assert logger.level == logging.DEBUG
    assert logger.output == STDOUT
    assert logger.log_file is None
    assert logger._stdout_handler in logger.handlers
    assert logger._file_handler is None


def test_setup_logging_invalid_output(reset_logger):
    with pytest.raises(ValueError):
        setup_logging(output="syslog")


def test_logging_in_file_mode(reset_logger, tmp_path):
    """Test that parse activity is written to a custom log file"""
    log_file_path = str(tmp_path / "logs" / "dsn.log")
    setup_logging(log_file_path=log_file_path)
    assert logger.log_file == log_file_path

    parse_connect_params("odbc:server=h;database=foo")

    assert os.path.exists(log_file_path), "Log file not created"
    with open(log_file_path, 'r') as f:
        log_content = f.read()
    assert "split_dsn: using ODBC syntax" in log_content
    assert "Resolved connection parameters: host=h" in log_content


def test_logging_both_mode(reset_logger, tmp_path):
    setup_logging(output=BOTH, log_file_path=str(tmp_path / "dsn.log"))
    assert logger._stdout_handler in logger.handlers
    assert logger._file_handler in logger.handlers
    assert isinstance(logger._file_handler, RotatingFileHandler)


def test_password_sanitized(reset_logger):
    """Test that credentials never reach a handler"""
    setup_logging(output=STDOUT)
    handler = _ListHandler()
    logger.addHandler(handler)
    try:
        logger.debug("dsn %s", "server=h;Password=hunter2;keystoresecret=s3cret")
        logger.debug("url sqlserver://sa:hunter2@h/inst")
    finally:
        logger.removeHandler(handler)

    joined = "\n".join(handler.messages)
    assert "hunter2" not in joined
    assert "s3cret" not in joined
    assert "Password=***" in joined
    assert "sqlserver://sa:***@h/inst" in joined


def test_braced_password_sanitized(reset_logger):
    """Test that a braced password with spaces and semicolons is masked whole"""
    setup_logging(output=STDOUT)
    handler = _ListHandler()
    logger.addHandler(handler)
    try:
        logger.debug("odbc:server=h;password={top secret;x}};y};database=d")
        logger.debug("password={a b}")
    finally:
        logger.removeHandler(handler)

    assert handler.messages == [
        "odbc:server=h;password=***;database=d",
        "password=***",
    ]


def test_logger_uses_connection_string_sanitizer():
    msg = "server=h;PWD={p w};keystoresecret={s;t}"
    assert DSNLogger._sanitize_message(msg) == sanitize_connection_string(msg)
    assert DSNLogger._sanitize_message(msg) == "server=h;PWD=***;keystoresecret=***"


def test_disabled_logger_emits_nothing(reset_logger):
    handler = _ListHandler()
    logger.addHandler(handler)
    try:
        parse_connect_params("server=h")
    finally:
        logger.removeHandler(handler)
    assert handler.messages == []


def test_sanitize_connection_string():
    assert sanitize_connection_string("Server=h;PWD={a;b}};c};Database=d") == \
        "Server=h;PWD=***;Database=d"
    assert sanitize_connection_string("server=h;password=abc;keystoresecret=xyz") == \
        "server=h;password=***;keystoresecret=***"
    assert sanitize_connection_string("sqlserver://sa:secret@h?database=x") == \
        "sqlserver://sa:***@h?database=x"


def test_sanitize_user_input():
    assert sanitize_user_input("packet size") == "packet size"
    assert sanitize_user_input("a\x00b;c") == "abc"
    assert sanitize_user_input("x" * 60) == "x" * 50 + "..."
    assert sanitize_user_input(";;") == "<invalid>"
    assert sanitize_user_input(42) == "<non-string>"
