"""
Copyright (c) Microsoft Corporation.
Licensed under the MIT license.
This module contains the constants used by the mssql_dsn package.
"""

from enum import Enum, IntEnum, IntFlag


# Default TCP port of a SQL Server instance
DEFAULT_SERVER_PORT = 1433

# TDS packet size bounds
# https://docs.microsoft.com/en-us/sql/database-engine/configure-windows/configure-the-network-packet-size-server-configuration-option
DEFAULT_PACKET_SIZE = 4096
MIN_PACKET_SIZE = 512
MAX_PACKET_SIZE = 32767

# Timeouts, in seconds
# https://msdn.microsoft.com/en-us/library/dd341108.aspx
DEFAULT_DIAL_TIMEOUT = 15
DEFAULT_CONNECTION_TIMEOUT = 0
DEFAULT_KEEP_ALIVE = 30

DEFAULT_APP_NAME = "mssql-dsn"

# DSN format prefixes
ODBC_PREFIX = "odbc:"
URL_SCHEME = "sqlserver"
URL_PREFIX = "sqlserver://"


class TypeFlags(IntFlag):
    """
    LOGIN7 TypeFlags bits set from connection parameters.
    """
    NONE = 0
    READ_ONLY_INTENT = 0x20


class LogFlags(IntFlag):
    """
    Bits accepted by the 'log' connection parameter.
    """
    NONE = 0
    ERRORS = 1
    MESSAGES = 2
    ROWS = 4
    SQL = 8
    PARAMS = 16
    TRANSACTION = 32
    DEBUG = 64
    RETRIES = 128


class FedAuthLibrary(IntEnum):
    """
    Federated authentication library identifiers (FEDAUTH feature extension).
    """
    LIVE_ID_COMPACT_TOKEN = 0x00
    SECURITY_TOKEN = 0x01
    ADAL = 0x02
    RESERVED = 0x7F


class KeyStoreAuthentication(str, Enum):
    """
    Key store authentication methods usable with column encryption.
    """
    PFX = "pfx"

    @classmethod
    def from_name(cls, name: str) -> "KeyStoreAuthentication":
        """
        Look up a member by its case-insensitive value.

        Raises:
            ValueError: If the name does not match any member.
        """
        lowered = name.lower()
        for member in cls:
            if member.value == lowered:
                return member
        raise ValueError(f"unknown key store authentication '{name}'")


class ConnectionParamKeys:
    """
    Lower-cased connection parameter names understood by the resolver.
    """
    LOG = "log"
    SERVER = "server"
    DATABASE = "database"
    USER_ID = "user id"
    PASSWORD = "password"
    PORT = "port"
    PACKET_SIZE = "packet size"
    CONNECTION_TIMEOUT = "connection timeout"
    DIAL_TIMEOUT = "dial timeout"
    KEEP_ALIVE = "keepalive"
    ENCRYPT = "encrypt"
    COLUMN_ENCRYPTION = "columnencryption"
    KEY_STORE_AUTHENTICATION = "keystoreauthentication"
    KEY_STORE_LOCATION = "keystorelocation"
    KEY_STORE_SECRET = "keystoresecret"
    TRUST_SERVER_CERTIFICATE = "trustservercertificate"
    CERTIFICATE = "certificate"
    HOST_NAME_IN_CERTIFICATE = "hostnameincertificate"
    SERVER_SPN = "serverspn"
    WORKSTATION_ID = "workstation id"
    APP_NAME = "app name"
    APPLICATION_INTENT = "applicationintent"
    FAIL_OVER_PARTNER = "failoverpartner"
    FAIL_OVER_PORT = "failoverport"
