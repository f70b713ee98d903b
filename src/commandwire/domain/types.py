"""HTTP verbs and well-known header names.

Header names are plain defaults; the credential headers actually written
are resolved from configuration (see :mod:`commandwire.config.models`).
"""

from __future__ import annotations

from enum import StrEnum


class HTTPMethod(StrEnum):
    """HTTP verbs used by search API commands."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"


class HTTPHeaderKey(StrEnum):
    """Headers this package reads or writes."""

    APPLICATION_ID = "X-Algolia-Application-Id"
    API_KEY = "X-Algolia-API-Key"
    USER_AGENT = "User-Agent"
