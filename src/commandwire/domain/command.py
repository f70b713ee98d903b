"""Command descriptors consumed by the request builder.

A :class:`Command` is the caller's abstract description of one API call.
:class:`RequestOptions` carries per-call overrides layered on top of it.
Both are frozen: the builder only reads them.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from commandwire.domain.types import HTTPMethod


class RequestOptions(BaseModel):
    """Per-call overrides: extra headers, query parameters, JSON body.

    Attributes:
        headers: Header name to value. Applied after any builder defaults.
        url_parameters: Query parameter name to already-stringified value.
        body: JSON object that replaces the command's raw body when non-empty.
    """

    model_config = {"frozen": True}

    headers: dict[str, str] = Field(default_factory=dict)
    url_parameters: dict[str, str] | None = None
    body: dict[str, Any] | None = None


class Command(BaseModel):
    """One API call: path, method, optional raw body and options."""

    model_config = {"frozen": True}

    path: str
    method: HTTPMethod
    body: bytes | None = None
    request_options: RequestOptions | None = None
