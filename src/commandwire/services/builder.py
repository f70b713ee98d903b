"""Request builder — turns a :class:`Command` into a :class:`Request`.

Steps, in order:

1. Encode the command path once (see :mod:`commandwire.domain.encoding`
   for the double-encoding workaround).
2. Attach ``url_parameters`` as the query string.
3. Materialize an ``https`` URL; invalid components raise InvalidURLError.
4. Method and raw body come from the command.
5. Default headers, then caller headers (caller wins).
6. A non-empty options body is serialized to JSON and replaces the raw body.

INVARIANT: a non-empty ``request_options.body`` always wins over
``command.body``.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from commandwire.domain.command import Command
from commandwire.domain.encoding import compose_url, encode_path, encode_query
from commandwire.domain.errors import BodySerializationError, InvalidURLError
from commandwire.domain.request import Request
from commandwire.domain.types import HTTPHeaderKey
from commandwire.services.base import BaseService
from commandwire.services.result import ServiceResult

logger = logging.getLogger(__name__)


def serialize_body(body: Mapping[str, Any]) -> bytes:
    """Serialize *body* as compact UTF-8 JSON.

    Raises BodySerializationError for values JSON cannot represent
    (arbitrary objects, NaN/Infinity, circular references).
    """
    try:
        text = json.dumps(body, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        msg = f"Request options body is not JSON-serializable: {exc}"
        raise BodySerializationError(msg) from exc
    return text.encode("utf-8")


def build_request(
    command: Command,
    *,
    host: str | None = None,
    default_headers: Mapping[str, str] | None = None,
) -> Request:
    """Build the outbound request for *command*.

    Args:
        command: The API call to materialize. Never modified.
        host: Authority for the URL. None leaves it empty for the transport.
        default_headers: Headers applied before the caller's own headers.

    Raises:
        InvalidURLError: The path or host cannot form a valid URL.
        BodySerializationError: The options body is not JSON-serializable.
    """
    options = command.request_options

    path = encode_path(command.path)
    query = ""
    if options is not None and options.url_parameters is not None:
        query = encode_query(options.url_parameters)
    url = compose_url(path, query, host)

    request = Request(url=url, method=command.method, body=command.body)
    if default_headers:
        request = request.with_headers(dict(default_headers))

    if options is None:
        return request

    request = request.with_headers(options.headers)

    # Options body replaces the raw body; the raw body is not re-applied.
    if options.body:
        request = request.with_body(serialize_body(options.body))

    return request


class RequestBuilderService(BaseService):
    """Build requests using the configured host and default headers."""

    def default_headers(self) -> dict[str, str]:
        return {HTTPHeaderKey.USER_AGENT.value: self._settings.headers.user_agent}

    def build(self, command: Command, *, host: str | None = None) -> ServiceResult:
        """Build *command* into a request, reporting failures as a result.

        On success ``data`` holds ``request`` (the :class:`Request`) and
        ``url``. Error codes: ``INVALID_URL``, ``BODY_SERIALIZATION``.
        """
        op = "build_request"
        target_host = host if host is not None else self._settings.host
        try:
            request = build_request(
                command,
                host=target_host,
                default_headers=self.default_headers(),
            )
        except InvalidURLError as exc:
            logger.debug("Rejected %s %s: %s", command.method, command.path, exc)
            return ServiceResult.failure(
                op,
                "INVALID_URL",
                exc,
                component=exc.component,
                value=exc.value,
            )
        except BodySerializationError as exc:
            logger.debug("Rejected %s %s: %s", command.method, command.path, exc)
            return ServiceResult.failure(op, "BODY_SERIALIZATION", exc)

        return ServiceResult(ok=True, op=op, data={"request": request, "url": request.url})
