"""
This file contains fixtures for the tests in the mssql_dsn package.
Functions:
- keystore_file: Fixture creating an empty key store file.
- fixed_hostname: Fixture pinning the local hostname used as default workstation id.
- reset_logger: Fixture disabling package logging after a test.
"""

import socket

import pytest

from mssql_dsn.logging import logger


@pytest.fixture
def keystore_file(tmp_path):
    path = tmp_path / "keystore.pfx"
    path.write_bytes(b"")
    return str(path)


@pytest.fixture
def fixed_hostname(monkeypatch):
    monkeypatch.setattr(socket, "gethostname", lambda: "workstation-01")
    return "workstation-01"


@pytest.fixture
def reset_logger():
    """Disable logging and drop handlers before and after each test"""
    logger.disable()
    yield logger
    logger.disable()
