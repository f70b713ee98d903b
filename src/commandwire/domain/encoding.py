"""Percent-encoding rules for request paths and query strings.

Paths are encoded with the RFC 3986 unreserved set (alphanumerics plus
``-._~``). Query strings use a broader safe set but always escape the
characters that carry structure in a query (``&``, ``=``, ``+``, ``#``).

Some callers hand us object IDs that were percent-encoded twice before
reaching this layer, e.g. ``gid%253A%252F%252Fshop``. Every path segment
is decoded exactly once; if the result still decodes to something else it
is used verbatim as already-encoded content instead of being encoded again.

INVARIANT: the output path is percent-encoded exactly once.
"""

from __future__ import annotations

import ipaddress
import logging
import re
from collections.abc import Mapping
from urllib.parse import quote, unquote, urlencode

from commandwire.domain.errors import InvalidURLError

logger = logging.getLogger(__name__)

QUERY_SAFE = "/:@!$'()*,;?"

# RFC 3986 pchar: unreserved, sub-delims, ':' and '@', or a %XX escape.
_ENCODED_SEGMENT = re.compile(r"(?:[A-Za-z0-9\-._~!$&'()*+,;=:@]|%[0-9A-Fa-f]{2})*")
_HOST = re.compile(
    r"(?:\[(?P<ipv6>[0-9A-Fa-f:.]+)\]|[A-Za-z0-9](?:[A-Za-z0-9.-]*[A-Za-z0-9])?)(?::\d{1,5})?"
)


def is_percent_encoded(value: str) -> bool:
    """Return True if decoding *value* once would change it."""
    return unquote(value) != value


def decode_once(value: str) -> str:
    """Remove one layer of percent-encoding.

    Raises InvalidURLError if the escapes do not decode to UTF-8 text.
    """
    try:
        return unquote(value, errors="strict")
    except UnicodeDecodeError as exc:
        raise InvalidURLError("path", value, "percent escapes are not valid UTF-8") from exc


def encode_segment(segment: str) -> str:
    """Encode one path segment so that it carries exactly one encoding layer."""
    decoded = decode_once(segment)
    if is_percent_encoded(decoded):
        if _ENCODED_SEGMENT.fullmatch(decoded) is None:
            raise InvalidURLError("path", segment, "not a valid percent-encoded segment")
        logger.debug("Path segment %r was double-encoded; keeping one layer", segment)
        return decoded
    return quote(decoded, safe="")


def encode_path(path: str) -> str:
    """Return the percent-encoded form of an absolute request *path*.

    The path is split on literal ``/`` first, so an escaped ``%2F`` inside a
    segment stays data and is never turned into a separator.
    """
    if not path.startswith("/"):
        raise InvalidURLError("path", path, "must be absolute")
    return "/".join(encode_segment(segment) for segment in path.split("/"))


def encode_query(parameters: Mapping[str, str]) -> str:
    """Encode query parameters in mapping order (space becomes ``%20``)."""
    return urlencode(list(parameters.items()), safe=QUERY_SAFE, quote_via=quote)


def validate_host(host: str) -> str:
    """Return *host* unchanged if it is a usable ``name[:port]`` authority.

    IPv6 literals must be bracketed, as in ``[::1]:443``.
    """
    match = _HOST.fullmatch(host)
    if match is None:
        raise InvalidURLError("host", host, "expected a hostname with optional port")
    if match["ipv6"] is not None:
        try:
            ipaddress.IPv6Address(match["ipv6"])
        except ValueError as exc:
            raise InvalidURLError("host", host, "invalid IPv6 literal") from exc
    return host


def compose_url(path: str, query: str = "", host: str | None = None) -> str:
    """Join already-encoded components into an ``https`` URL.

    The scheme is fixed; the authority is left empty when no *host* is
    given so the transport can fill it in.
    """
    authority = validate_host(host) if host is not None else ""
    url = f"https://{authority}{path}"
    if query:
        url = f"{url}?{query}"
    return url
