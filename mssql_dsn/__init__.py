"""
Copyright (c) Microsoft Corporation.
Licensed under the MIT license.
This module initializes the mssql_dsn package.
"""

__version__ = "0.1.0"

# Exceptions
from .exceptions import (
    Error,
    ConnectionStringParseError,
    ParameterValueError,
    ConnectionConfigError,
)

# Constants
from .constants import (
    DEFAULT_SERVER_PORT,
    DEFAULT_PACKET_SIZE,
    MIN_PACKET_SIZE,
    MAX_PACKET_SIZE,
    TypeFlags,
    LogFlags,
    FedAuthLibrary,
    KeyStoreAuthentication,
)

# Connection String Handling
from .connection_string_parser import (
    split_dsn,
    split_connection_string,
    split_connection_string_url,
    split_connection_string_odbc,
)
from .connection_string_builder import build_url

# Connection Parameters
from .connect_params import (
    ConnectParams,
    ConnectParamsDefaults,
    DEFAULTS,
    parse_connect_params,
    resolve_connect_params,
    resolve_server_port,
    generate_spn,
)

# Logging Configuration
from .logging import logger, setup_logging
