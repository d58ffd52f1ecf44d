"""
Copyright (c) Microsoft Corporation.
Licensed under the MIT license.

Connection parameter resolution for mssql_dsn.

Turns the raw parameter map produced by a tokenizer into a validated,
immutable ConnectParams. Resolution applies defaults, unit conversions,
clamping and the checks that involve more than one parameter. The first
invalid value aborts resolution with an exception.
"""

import datetime
import os
import re
import socket
from dataclasses import dataclass, field
from typing import Dict, Optional

from mssql_dsn.connection_string_builder import build_url
from mssql_dsn.connection_string_parser import split_dsn
from mssql_dsn.constants import (
    ConnectionParamKeys as Keys,
    DEFAULT_APP_NAME,
    DEFAULT_CONNECTION_TIMEOUT,
    DEFAULT_DIAL_TIMEOUT,
    DEFAULT_KEEP_ALIVE,
    DEFAULT_PACKET_SIZE,
    DEFAULT_SERVER_PORT,
    FedAuthLibrary,
    KeyStoreAuthentication,
    MAX_PACKET_SIZE,
    MIN_PACKET_SIZE,
    TypeFlags,
)
from mssql_dsn.exceptions import ConnectionConfigError, ParameterValueError
from mssql_dsn.logging import logger

_TRUE_STRINGS = ("1", "t", "T", "TRUE", "true", "True")
_FALSE_STRINGS = ("0", "f", "F", "FALSE", "false", "False")

_DECIMAL_RE = re.compile(r"[0-9]+")
_PREFIXED_RE = re.compile(r"[0-9][0-9A-Za-z_]*")


@dataclass(frozen=True)
class ConnectParamsDefaults:
    """
    Per-process default identifiers used when the DSN does not set them.

    Attributes:
        app_name (str): Application name sent when 'app name' is absent.
        fed_auth_library (FedAuthLibrary): Federated authentication library.
        fed_auth_adal_workflow (int): ADAL workflow byte.
    """
    app_name: str = DEFAULT_APP_NAME
    fed_auth_library: FedAuthLibrary = FedAuthLibrary.RESERVED
    fed_auth_adal_workflow: int = 0


DEFAULTS = ConnectParamsDefaults()


@dataclass(frozen=True)
class ConnectParams:
    """
    Resolved connection parameters consumed by the network, TLS,
    authentication and column encryption layers.

    Instances are produced by resolve_connect_params() / parse_connect_params()
    and never modified afterwards. Secrets are left out of repr().
    """
    host: str = "localhost"
    instance: str = ""
    database: str = ""
    user: str = ""
    password: str = field(default="", repr=False)
    dial_timeout: datetime.timedelta = datetime.timedelta(seconds=DEFAULT_DIAL_TIMEOUT)
    conn_timeout: datetime.timedelta = datetime.timedelta(seconds=DEFAULT_CONNECTION_TIMEOUT)
    keep_alive: datetime.timedelta = datetime.timedelta(seconds=DEFAULT_KEEP_ALIVE)
    port: int = 0
    packet_size: int = DEFAULT_PACKET_SIZE
    encrypt: bool = False
    disable_encryption: bool = False
    trust_server_certificate: bool = False
    certificate: str = ""
    host_in_certificate: str = ""
    host_in_certificate_provided: bool = False
    server_spn: str = ""
    workstation: str = ""
    app_name: str = DEFAULT_APP_NAME
    type_flags: TypeFlags = TypeFlags.NONE
    fail_over_partner: str = ""
    fail_over_port: int = 0
    fed_auth_library: FedAuthLibrary = FedAuthLibrary.RESERVED
    fed_auth_adal_workflow: int = 0
    column_encryption: bool = False
    key_store_authentication: Optional[KeyStoreAuthentication] = None
    key_store_location: str = ""
    key_store_secret: str = field(default="", repr=False)
    log_flags: int = 0

    @property
    def read_only_intent(self) -> bool:
        return bool(self.type_flags & TypeFlags.READ_ONLY_INTENT)

    @property
    def resolved_port(self) -> int:
        """Port to dial, with 0 replaced by the default SQL Server port."""
        return resolve_server_port(self.port)

    def to_url(self) -> str:
        """
        Re-express these parameters as a sqlserver:// URL.

        Only database, log flags, column encryption and key store settings,
        host, instance and credentials are carried over.
        """
        return build_url(self)


def parse_connect_params(dsn: str, defaults: ConnectParamsDefaults = DEFAULTS) -> ConnectParams:
    """
    Parse a DSN in any supported syntax and resolve it.

    Args:
        dsn: Connection string ('odbc:...', 'sqlserver://...' or 'key=value;...')
        defaults: Default identifiers applied when the DSN does not set them

    Returns:
        ConnectParams: The validated parameters

    Raises:
        ConnectionStringParseError: If the DSN text is malformed
        ParameterValueError: If a value cannot be converted to its type
        ConnectionConfigError: If the parameters are inconsistent
    """
    return resolve_connect_params(split_dsn(dsn), defaults)


def resolve_connect_params(params: Dict[str, str],
                           defaults: ConnectParamsDefaults = DEFAULTS) -> ConnectParams:
    """
    Resolve a raw parameter map (lower-cased keys) into ConnectParams.

    Raises:
        ParameterValueError: If a value cannot be converted to its type
        ConnectionConfigError: If the parameters are inconsistent
    """
    p = {
        "fed_auth_library": defaults.fed_auth_library,
        "fed_auth_adal_workflow": defaults.fed_auth_adal_workflow,
    }

    strlog = params.get(Keys.LOG)
    if strlog is not None:
        p["log_flags"] = _parse_uint(Keys.LOG, strlog, 10, 64, label="log parameter")

    host, _, instance = params.get(Keys.SERVER, "").partition("\\")
    if host == "." or host.upper() == "(LOCAL)" or host == "":
        host = "localhost"
    p["host"] = host
    p["instance"] = instance
    p["database"] = params.get(Keys.DATABASE, "")
    p["user"] = params.get(Keys.USER_ID, "")
    p["password"] = params.get(Keys.PASSWORD, "")

    port = 0
    strport = params.get(Keys.PORT)
    if strport is not None:
        port = _parse_uint(Keys.PORT, strport, 10, 16, label="tcp port")
    p["port"] = port

    strpsize = params.get(Keys.PACKET_SIZE)
    if strpsize is not None:
        # Out of range sizes are clamped into the TDS packet size range.
        # Encrypted connections are further limited to 16383 bytes by the server.
        psize = _parse_uint(Keys.PACKET_SIZE, strpsize, 0, None)
        p["packet_size"] = min(max(psize, MIN_PACKET_SIZE), MAX_PACKET_SIZE)

    # Default to no connection timeout, but still allow it to be set
    for key, attr, label in (
        (Keys.CONNECTION_TIMEOUT, "conn_timeout", "connection timeout"),
        (Keys.DIAL_TIMEOUT, "dial_timeout", "dial timeout"),
        (Keys.KEEP_ALIVE, "keep_alive", "keepAlive value"),
    ):
        strtimeout = params.get(key)
        if strtimeout is not None:
            seconds = _parse_uint(key, strtimeout, 10, 64, label=label)
            p[attr] = _seconds(key, strtimeout, seconds)

    encrypt = params.get(Keys.ENCRYPT)
    if encrypt is None:
        p["trust_server_certificate"] = True
    elif encrypt.lower() == "disable":
        p["disable_encryption"] = True
    else:
        p["encrypt"] = _parse_bool(Keys.ENCRYPT, encrypt)

    column_encryption = params.get(Keys.COLUMN_ENCRYPTION)
    if column_encryption is not None:
        if column_encryption.lower() == "true":
            p["column_encryption"] = True
        else:
            p["column_encryption"] = _parse_bool(Keys.COLUMN_ENCRYPTION, column_encryption,
                                                 label="columnEncryption")

    ks_auth = params.get(Keys.KEY_STORE_AUTHENTICATION)
    if ks_auth is not None:
        try:
            p["key_store_authentication"] = KeyStoreAuthentication.from_name(ks_auth)
        except ValueError as e:
            raise ConnectionConfigError(f"invalid keyStoreAuthentication '{ks_auth}'") from e

    ks_location = params.get(Keys.KEY_STORE_LOCATION)
    if ks_location is not None:
        if ks_location == "":
            raise ConnectionConfigError(f"invalid keystore location provided: '{ks_location}'")
        try:
            os.stat(ks_location)
        except (OSError, ValueError) as e:
            raise ConnectionConfigError(f"unable to find keystore {ks_location}: {e}") from e
        p["key_store_location"] = ks_location

    ks_secret = params.get(Keys.KEY_STORE_SECRET)
    if ks_secret is not None:
        p["key_store_secret"] = ks_secret

    trust = params.get(Keys.TRUST_SERVER_CERTIFICATE)
    if trust is not None:
        p["trust_server_certificate"] = _parse_bool(Keys.TRUST_SERVER_CERTIFICATE, trust,
                                                    label="trust server certificate")

    p["certificate"] = params.get(Keys.CERTIFICATE, "")

    host_in_certificate = params.get(Keys.HOST_NAME_IN_CERTIFICATE)
    if host_in_certificate is not None:
        p["host_in_certificate"] = host_in_certificate
        p["host_in_certificate_provided"] = True
    else:
        p["host_in_certificate"] = host
        p["host_in_certificate_provided"] = False

    server_spn = params.get(Keys.SERVER_SPN)
    if server_spn is None:
        server_spn = generate_spn(host, resolve_server_port(port))
    p["server_spn"] = server_spn

    workstation = params.get(Keys.WORKSTATION_ID)
    if workstation is None:
        workstation = _local_hostname()
    p["workstation"] = workstation

    p["app_name"] = params.get(Keys.APP_NAME, defaults.app_name)

    if params.get(Keys.APPLICATION_INTENT) == "ReadOnly":
        if not p["database"]:
            raise ConnectionConfigError(
                "database must be specified when ApplicationIntent is ReadOnly"
            )
        p["type_flags"] = TypeFlags.READ_ONLY_INTENT

    fail_over_partner = params.get(Keys.FAIL_OVER_PARTNER)
    if fail_over_partner is not None:
        p["fail_over_partner"] = fail_over_partner

    fail_over_port = params.get(Keys.FAIL_OVER_PORT)
    if fail_over_port is not None:
        p["fail_over_port"] = _parse_uint(Keys.FAIL_OVER_PORT, fail_over_port, 0, 16,
                                          label="tcp port")

    result = ConnectParams(**p)
    logger.debug(
        "Resolved connection parameters: host=%s instance=%s port=%d database=%s "
        "packet_size=%d encrypt=%s trust_server_certificate=%s",
        result.host, result.instance, result.port, result.database,
        result.packet_size, result.encrypt, result.trust_server_certificate,
    )
    return result


def resolve_server_port(port: int) -> int:
    if port == 0:
        return DEFAULT_SERVER_PORT
    return port


def generate_spn(host: str, port: int) -> str:
    return f"MSSQLSvc/{host}:{port}"


def _local_hostname() -> str:
    try:
        return socket.gethostname()
    except OSError:
        return ""


def _parse_bool(key: str, value: str, label: Optional[str] = None) -> bool:
    """
    Parse the strict boolean spellings 1/t/true and 0/f/false.

    Raises:
        ParameterValueError: For any other text
    """
    if value in _TRUE_STRINGS:
        return True
    if value in _FALSE_STRINGS:
        return False
    raise ParameterValueError(
        key, value, f"invalid {label or key} '{value}': invalid syntax"
    )


def _parse_uint(key: str, value: str, base: int, bits: Optional[int],
                label: Optional[str] = None) -> int:
    """
    Parse an unsigned integer.

    Args:
        key: Parameter name, used in error messages
        value: Raw text
        base: 10, or 0 to honour 0x/0o/0b prefixes and a leading 0 for octal
        bits: Width the value must fit in, or None for no limit
        label: Name used in error messages instead of key

    Raises:
        ParameterValueError: If the text is not an unsigned integer or does
            not fit in the given width
    """
    label = label or key
    try:
        if base == 10:
            if not _DECIMAL_RE.fullmatch(value):
                raise ValueError("invalid syntax")
            number = int(value, 10)
        else:
            if not _PREFIXED_RE.fullmatch(value):
                raise ValueError("invalid syntax")
            if len(value) > 1 and value[0] == "0" and value[1] not in "xXoObB":
                # Leading zero means octal
                number = int("0o" + value[1:], 0)
            else:
                number = int(value, 0)
    except ValueError as e:
        raise ParameterValueError(key, value, f"invalid {label} '{value}': invalid syntax") from e

    if bits is not None and number >= 1 << bits:
        raise ParameterValueError(key, value, f"invalid {label} '{value}': value out of range")
    return number


def _seconds(key: str, raw: str, seconds: int) -> datetime.timedelta:
    try:
        return datetime.timedelta(seconds=seconds)
    except OverflowError as e:
        raise ParameterValueError(key, raw, f"invalid {key} '{raw}': value out of range") from e
