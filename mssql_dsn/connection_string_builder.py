"""
Copyright (c) Microsoft Corporation.
Licensed under the MIT license.

Connection string builder for mssql_dsn.

build_url() re-expresses resolved parameters as a sqlserver:// URL that
split_connection_string_url() tokenizes back to the same values.
"""

import ipaddress
from urllib.parse import quote, urlencode

from mssql_dsn.constants import URL_PREFIX


def build_url(params) -> str:
    """
    Build a sqlserver:// URL from resolved connection parameters.

    Only a subset of the parameters is carried over: host, instance, user,
    password, database, log flags, column encryption and key store settings.
    Query parameters are emitted only when set and are sorted by key, so the
    output is deterministic.

    Args:
        params: ConnectParams (or any object with the same attributes)

    Returns:
        str: URL form of the parameters
    """
    query = {}
    if params.database:
        query["database"] = params.database
    if params.log_flags:
        query["log"] = str(int(params.log_flags))
    if params.column_encryption:
        query["columnEncryption"] = "true"
    if params.key_store_authentication:
        query["keyStoreAuthentication"] = params.key_store_authentication.value
    if params.key_store_location:
        query["keyStoreLocation"] = params.key_store_location
    if params.key_store_secret:
        query["keyStoreSecret"] = params.key_store_secret

    url = (
        f"{URL_PREFIX}{quote(params.user, safe='')}:{quote(params.password, safe='')}"
        f"@{_quote_host(params.host)}"
    )
    if params.instance:
        url += "/" + quote(params.instance, safe="")
    if query:
        url += "?" + urlencode(sorted(query.items()))
    return url


def _quote_host(host: str) -> str:
    """
    Percent-encode a host for the authority part of a URL.

    Only IPv6 literals are bracketed. Any other ':' is encoded as %3A so it
    is not mistaken for a port separator.
    """
    try:
        is_ipv6 = ipaddress.ip_address(host).version == 6
    except ValueError:
        is_ipv6 = False
    if is_ipv6:
        return f"[{quote(host, safe=':')}]"
    return quote(host, safe="")
