"""
This file contains tests for the public surface of the mssql_dsn package.
Functions:
- test_version: Check that the package exposes a version string.
- test_public_exports: Check that the parse and resolve entry points are exported.
- test_default_constants: Check the documented default values.
"""

import mssql_dsn
from mssql_dsn import (
    DEFAULT_SERVER_PORT,
    DEFAULT_PACKET_SIZE,
    MIN_PACKET_SIZE,
    MAX_PACKET_SIZE,
    DEFAULTS,
    FedAuthLibrary,
    KeyStoreAuthentication,
    TypeFlags,
)


def test_version():
    assert isinstance(mssql_dsn.__version__, str)
    assert mssql_dsn.__version__.count(".") == 2


def test_public_exports():
    for name in (
        "parse_connect_params",
        "resolve_connect_params",
        "split_dsn",
        "split_connection_string",
        "split_connection_string_url",
        "split_connection_string_odbc",
        "build_url",
        "ConnectParams",
        "ConnectParamsDefaults",
        "setup_logging",
        "logger",
        "Error",
        "ConnectionStringParseError",
        "ParameterValueError",
        "ConnectionConfigError",
    ):
        assert hasattr(mssql_dsn, name), f"mssql_dsn should export {name}"


def test_default_constants():
    assert DEFAULT_SERVER_PORT == 1433
    assert DEFAULT_PACKET_SIZE == 4096
    assert (MIN_PACKET_SIZE, MAX_PACKET_SIZE) == (512, 32767)
    assert TypeFlags.READ_ONLY_INTENT == 0x20
    assert FedAuthLibrary.RESERVED == 0x7F
    assert KeyStoreAuthentication.PFX.value == "pfx"


def test_default_identifiers():
    assert DEFAULTS.app_name == "mssql-dsn"
    assert DEFAULTS.fed_auth_library is FedAuthLibrary.RESERVED
    assert DEFAULTS.fed_auth_adal_workflow == 0


def test_key_store_authentication_lookup_is_case_insensitive():
    assert KeyStoreAuthentication.from_name("PFX") is KeyStoreAuthentication.PFX
    assert KeyStoreAuthentication.from_name("Pfx") is KeyStoreAuthentication.PFX
