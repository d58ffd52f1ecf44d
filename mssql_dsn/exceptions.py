"""
Copyright (c) Microsoft Corporation.
Licensed under the MIT license.
This module contains the exceptions raised while parsing and resolving
connection strings.
"""

from typing import Optional


class Error(Exception):
    """
    Base class for errors.
    This is the base class for all exceptions raised by the mssql_dsn package.
    It can be used to catch any failure of a parse or resolve call.
    """
    def __init__(self, message="An error occurred") -> None:
        self.message = message
        super().__init__(self.message)


class ConnectionStringParseError(Error):
    """
    Syntax error in a connection string.
    This exception is raised when the text of a DSN cannot be tokenized, such as
    an unexpected character in an ODBC string, an unterminated braced value,
    a URL with an unrecognized scheme or a query key given more than once.
    """
    def __init__(self, message="Invalid connection string", position: Optional[int] = None) -> None:
        self.position = position
        super().__init__(message)


class ParameterValueError(Error, ValueError):
    """
    Error related to the value of a single connection parameter.
    This exception is raised when a raw parameter value cannot be converted to
    its target type (unsigned integer, boolean, duration).
    """
    def __init__(self, parameter: str, value: str, message: Optional[str] = None) -> None:
        self.parameter = parameter
        self.value = value
        if message is None:
            message = f"invalid {parameter} '{value}'"
        super().__init__(message)


class ConnectionConfigError(Error):
    """
    Error related to the combination of connection parameters.
    This exception is raised for semantic failures that need more than one raw
    value to detect, or that depend on the environment, such as a read-only
    application intent without a database or a missing key store file.
    """
    def __init__(self, message="Invalid connection configuration") -> None:
        super().__init__(message)
