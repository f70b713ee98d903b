"""The outbound request descriptor handed to the transport.

Requests are frozen. Header and body changes go through the ``with_*``
helpers, which return a new :class:`Request` and leave the original
untouched. Header lookups are case-insensitive, as in HTTP.
"""

from __future__ import annotations

from urllib.parse import urlsplit

from pydantic import BaseModel, Field

from commandwire.domain.types import HTTPMethod


class Request(BaseModel):
    """Fully materialized HTTP request."""

    model_config = {"frozen": True}

    url: str
    method: HTTPMethod
    body: bytes | None = None
    headers: dict[str, str] = Field(default_factory=dict)

    @property
    def path(self) -> str:
        """Percent-encoded path component of :attr:`url`."""
        return urlsplit(self.url).path

    @property
    def query(self) -> str:
        """Encoded query string of :attr:`url` (without ``?``)."""
        return urlsplit(self.url).query

    def header(self, name: str) -> str | None:
        """Return the value of header *name*, ignoring case."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None

    def with_header(self, name: str, value: str | None) -> Request:
        """Return a copy with header *name* set to *value* (None removes it)."""
        wanted = name.lower()
        headers = {k: v for k, v in self.headers.items() if k.lower() != wanted}
        if value is not None:
            headers[name] = value
        return self.model_copy(update={"headers": headers})

    def with_headers(self, headers: dict[str, str]) -> Request:
        """Return a copy with every entry of *headers* applied in order."""
        request = self
        for name, value in headers.items():
            request = request.with_header(name, value)
        return request

    def with_body(self, body: bytes | None) -> Request:
        return self.model_copy(update={"body": body})
