"""
Copyright (c) Microsoft Corporation.
Licensed under the MIT license.

Logging module for mssql_dsn.
Logging is disabled by default and costs a level check only until
setup_logging() is called.
"""

import logging
from logging.handlers import RotatingFileHandler
import os
import sys
import threading
import datetime
from typing import Optional

from mssql_dsn.helpers import sanitize_connection_string


DEBUG = logging.DEBUG

# Output destination constants
STDOUT = 'stdout'  # Log to stdout only
FILE = 'file'      # Log to file only (default)
BOTH = 'both'      # Log to both file and stdout

LOGGER_NAME = 'mssql_dsn'


class DSNLogger:
    """
    Singleton logger for mssql_dsn.

    Features:
    - Disabled by default (CRITICAL level, no propagation to the root logger)
    - Automatic file rotation (10MB, 5 backups)
    - Password sanitization
    - Thread-safe operation
    """

    _instance: Optional['DSNLogger'] = None
    _lock = threading.Lock()

    def __new__(cls) -> 'DSNLogger':
        """Ensure singleton pattern"""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(DSNLogger, cls).__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize the logger (only once)"""
        if hasattr(self, '_initialized'):
            return

        self._initialized = True

        self._logger = logging.getLogger(LOGGER_NAME)
        self._logger.setLevel(logging.CRITICAL)  # Disabled by default
        self._logger.propagate = False

        self._output_mode = FILE
        self._file_handler = None
        self._stdout_handler = None
        self._log_file = None
        self._custom_log_path = None
        self._handlers_initialized = False

        # Handlers are created lazily by _setLevel so that changing the output
        # mode before enabling logging does not create a log file

    def _setup_handlers(self):
        """
        Setup handlers based on output mode.
        Creates file handler and/or stdout handler as needed.
        """
        for handler in self._logger.handlers[:]:
            handler.close()
            self._logger.removeHandler(handler)

        self._file_handler = None
        self._stdout_handler = None

        formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
        )

        if self._output_mode in (FILE, BOTH):
            if self._custom_log_path:
                self._log_file = self._custom_log_path
                log_dir = os.path.dirname(self._custom_log_path)
                if log_dir and not os.path.exists(log_dir):
                    os.makedirs(log_dir, exist_ok=True)
            else:
                log_dir = os.path.join(os.getcwd(), "mssql_dsn_logs")
                if not os.path.exists(log_dir):
                    os.makedirs(log_dir, exist_ok=True)

                timestamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
                self._log_file = os.path.join(
                    log_dir,
                    f"mssql_dsn_trace_{timestamp}_{os.getpid()}.log"
                )

            self._file_handler = RotatingFileHandler(
                self._log_file,
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5
            )
            self._file_handler.setFormatter(formatter)
            self._logger.addHandler(self._file_handler)
        else:
            self._log_file = None

        if self._output_mode in (STDOUT, BOTH):
            self._stdout_handler = logging.StreamHandler(sys.stdout)
            self._stdout_handler.setFormatter(formatter)
            self._logger.addHandler(self._stdout_handler)

    @staticmethod
    def _sanitize_message(msg: str) -> str:
        """
        Sanitize sensitive information from log messages.

        Removes:
        - PWD=... / Password=...
        - KeyStoreSecret=...
        - passwords in sqlserver:// user info

        Args:
            msg: The message to sanitize

        Returns:
            str: Sanitized message with credentials replaced by ***
        """
        return sanitize_connection_string(msg)

    def _log(self, level: int, msg: str, *args, **kwargs):
        """
        Internal logging method with sanitization.

        Args:
            level: Log level
            msg: Message format string
            *args: Arguments for message formatting
            **kwargs: Additional keyword arguments
        """
        # Fast level check (zero overhead if disabled)
        if not self._logger.isEnabledFor(level):
            return

        if args:
            msg = msg % args

        # stacklevel points the record at the caller of debug()/info()/...
        kwargs.setdefault('stacklevel', 3)
        self._logger.log(level, self._sanitize_message(msg), **kwargs)

    def debug(self, msg: str, *args, **kwargs):
        """Log at DEBUG level"""
        self._log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        """Log at INFO level"""
        self._log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        """Log at WARNING level"""
        self._log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        """Log at ERROR level"""
        self._log(logging.ERROR, msg, *args, **kwargs)

    def _setLevel(self, level: int, output: Optional[str] = None, log_file_path: Optional[str] = None):
        """
        Internal method to set logging level (use setup_logging() instead).

        Args:
            level: Logging level (typically DEBUG)
            output: Optional output mode (FILE, STDOUT, BOTH)
            log_file_path: Optional custom path for log file

        Raises:
            ValueError: If output mode is invalid
        """
        if output is not None:
            if output not in (FILE, STDOUT, BOTH):
                raise ValueError(
                    f"Invalid output mode: {output}. "
                    f"Must be one of: {FILE}, {STDOUT}, {BOTH}"
                )
            self._output_mode = output

        if log_file_path is not None:
            self._custom_log_path = log_file_path

        if not self._handlers_initialized or output is not None or log_file_path is not None:
            self._setup_handlers()
            self._handlers_initialized = True

        self._logger.setLevel(level)

    def disable(self):
        """
        Disable logging again and release any handlers.
        """
        for handler in self._logger.handlers[:]:
            handler.close()
            self._logger.removeHandler(handler)
        self._file_handler = None
        self._stdout_handler = None
        self._log_file = None
        self._custom_log_path = None
        self._output_mode = FILE
        self._handlers_initialized = False
        self._logger.setLevel(logging.CRITICAL)

    def isEnabledFor(self, level: int) -> bool:
        """Check if a given log level is enabled."""
        return self._logger.isEnabledFor(level)

    def addHandler(self, handler: logging.Handler):
        """Add a handler to the logger"""
        self._logger.addHandler(handler)

    def removeHandler(self, handler: logging.Handler):
        """Remove a handler from the logger"""
        self._logger.removeHandler(handler)

    @property
    def handlers(self) -> list:
        """Get list of handlers attached to the logger"""
        return self._logger.handlers

    @property
    def output(self) -> str:
        """Get the current output mode"""
        return self._output_mode

    @property
    def log_file(self) -> Optional[str]:
        """Get the current log file path (None if file output is disabled)"""
        return self._log_file

    @property
    def level(self) -> int:
        """Get the current logging level"""
        return self._logger.level


# Singleton logger instance
logger = DSNLogger()


def setup_logging(output: str = 'file', log_file_path: Optional[str] = None):
    """
    Enable DEBUG logging for troubleshooting.

    Args:
        output: Where to send logs (default: 'file')
                Options: 'file', 'stdout', 'both'
        log_file_path: Optional custom path for log file
                      If not specified, auto-generates in ./mssql_dsn_logs/

    Examples:
        import mssql_dsn

        # Stdout only
        mssql_dsn.setup_logging(output='stdout')

        # Custom log file path
        mssql_dsn.setup_logging(log_file_path="/tmp/dsn.log")
    """
    logger._setLevel(DEBUG, output, log_file_path)
    return logger
