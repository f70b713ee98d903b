"""Error hierarchy for request construction and credential handling.

Request construction errors are raised by the builder and are recoverable
by the caller. API key body errors are raised only by the explicit
body-embedding primitive; the credential setters downgrade them to a
logged warning.
"""

from __future__ import annotations


class CommandWireError(Exception):
    """Base error for commandwire."""


class ConfigError(CommandWireError):
    """Configuration file could not be read or validated."""


# ---------------------------------------------------------------------------
# Request construction
# ---------------------------------------------------------------------------


class RequestBuildError(CommandWireError):
    """A command could not be turned into a request."""


class InvalidURLError(RequestBuildError):
    """Assembled URL components do not form a valid URL.

    Attributes:
        component: Which part of the URL was rejected (``"path"``, ``"host"``...).
        value: The offending value.
    """

    def __init__(self, component: str, value: str, reason: str) -> None:
        self.component = component
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid URL {component} {value!r}: {reason}")


class BodySerializationError(RequestBuildError):
    """Request options body could not be serialized as JSON."""


# ---------------------------------------------------------------------------
# API key body embedding
# ---------------------------------------------------------------------------


class APIKeyBodyError(CommandWireError):
    """API key could not be embedded into the request body."""


class MissingBodyError(APIKeyBodyError):
    """Request has no body to carry the API key."""

    def __init__(self) -> None:
        super().__init__("Request has no body to embed the API key into")


class BodyDecodingError(APIKeyBodyError):
    """Request body is not valid UTF-8 JSON."""


class NonObjectBodyError(APIKeyBodyError):
    """Request body is JSON but not a key/value object."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"Request body is a JSON {kind}, expected an object")


class BodyEncodingError(APIKeyBodyError):
    """Updated body could not be re-encoded as JSON."""
