"""Credential accessor — read and write the app ID / API key pair on a request.

The pair lives in two headers whose names come from
:class:`~commandwire.config.models.HeadersConfig`. Reading is all or
nothing: if either header is missing or fails to parse, there are no
credentials.

API keys longer than ``max_header_api_key_length`` are also copied into
the JSON body as ``apiKey``, for backends that reject oversized headers.
Clearing the key, or replacing it with a short one, removes that copy
again. Body updates are best-effort: :func:`embed_api_key` raises, while
the setters log the failure and keep the header assignment.
"""

from __future__ import annotations

import json
import logging

from commandwire.config.models import CredentialsConfig, HeadersConfig
from commandwire.domain.credentials import Credentials, parse_api_key, parse_application_id
from commandwire.domain.errors import (
    APIKeyBodyError,
    BodyDecodingError,
    BodyEncodingError,
    MissingBodyError,
    NonObjectBodyError,
)
from commandwire.domain.request import Request
from commandwire.services.base import BaseService
from commandwire.services.result import ServiceResult

logger = logging.getLogger(__name__)

API_KEY_BODY_FIELD = "apiKey"
DEFAULT_MAX_HEADER_API_KEY_LENGTH = CredentialsConfig().max_header_api_key_length

_JSON_KINDS: dict[type, str] = {
    list: "array",
    str: "string",
    int: "number",
    float: "number",
    bool: "boolean",
    type(None): "null",
}


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


def get_application_id(request: Request, *, names: HeadersConfig | None = None) -> str | None:
    names = names or HeadersConfig()
    return parse_application_id(request.header(names.application_id))


def get_api_key(request: Request, *, names: HeadersConfig | None = None) -> str | None:
    names = names or HeadersConfig()
    return parse_api_key(request.header(names.api_key))


def get_credentials(request: Request, *, names: HeadersConfig | None = None) -> Credentials | None:
    """Return the credential pair on *request*, or None unless both sides parse."""
    application_id = get_application_id(request, names=names)
    api_key = get_api_key(request, names=names)
    if application_id is None or api_key is None:
        return None
    return Credentials(application_id=application_id, api_key=api_key)


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def set_application_id(
    request: Request,
    application_id: str | None,
    *,
    names: HeadersConfig | None = None,
) -> Request:
    """Return a copy of *request* with the app ID header set (None clears it)."""
    names = names or HeadersConfig()
    return request.with_header(names.application_id, application_id)


def embed_api_key(request: Request, api_key: str) -> Request:
    """Return a copy of *request* whose JSON object body carries *api_key*.

    Raises:
        MissingBodyError: The request has no body.
        BodyDecodingError: The body is not UTF-8 JSON.
        NonObjectBodyError: The body is JSON but not an object.
        BodyEncodingError: The updated body cannot be re-encoded.
    """
    if request.body is None:
        raise MissingBodyError()

    try:
        payload = json.loads(request.body)
    except ValueError as exc:
        msg = f"Request body is not valid JSON: {exc}"
        raise BodyDecodingError(msg) from exc

    if not isinstance(payload, dict):
        raise NonObjectBodyError(_JSON_KINDS.get(type(payload), type(payload).__name__))

    payload[API_KEY_BODY_FIELD] = api_key
    try:
        body = json.dumps(payload, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except ValueError as exc:
        msg = f"Request body could not be re-encoded: {exc}"
        raise BodyEncodingError(msg) from exc
    return request.with_body(body.encode("utf-8"))


def remove_embedded_api_key(request: Request, api_key: str) -> Request:
    """Return a copy of *request* without a body ``apiKey`` equal to *api_key*.

    Bodies that are absent, not a JSON object, or carry a different value
    are returned unchanged. Raises BodyEncodingError if the stripped body
    cannot be re-encoded.
    """
    if request.body is None:
        return request
    try:
        payload = json.loads(request.body)
    except ValueError:
        return request
    if not isinstance(payload, dict) or payload.get(API_KEY_BODY_FIELD) != api_key:
        return request

    del payload[API_KEY_BODY_FIELD]
    try:
        body = json.dumps(payload, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except ValueError as exc:
        msg = f"Request body could not be re-encoded: {exc}"
        raise BodyEncodingError(msg) from exc
    return request.with_body(body.encode("utf-8"))


def _assign_api_key(
    request: Request,
    api_key: str | None,
    names: HeadersConfig,
    max_header_length: int,
) -> tuple[Request, str | None]:
    """Set the API key header and keep the body copy in step with it.

    Long keys are copied into the body. When the key is cleared or replaced
    by a short one, a body copy of the previous key is removed. Returns the
    updated request and a warning message if the body could not be updated.
    """
    previous = request.header(names.api_key)
    request = request.with_header(names.api_key, api_key)
    if api_key is None or len(api_key) <= max_header_length:
        if previous is None or previous == api_key:
            return request, None
        try:
            return remove_embedded_api_key(request, previous), None
        except APIKeyBodyError as exc:
            logger.warning("Couldn't remove the previous API key from the request body: %s", exc)
            return request, f"Previous API key left in request body: {exc}"

    logger.debug(
        "API key length %d exceeds %d; inserting it into the request body",
        len(api_key),
        max_header_length,
    )
    try:
        return embed_api_key(request, api_key), None
    except APIKeyBodyError as exc:
        logger.warning("Couldn't set API key in the request body: %s", exc)
        return request, f"API key not embedded in request body: {exc}"


def set_api_key(
    request: Request,
    api_key: str | None,
    *,
    names: HeadersConfig | None = None,
    max_header_length: int = DEFAULT_MAX_HEADER_API_KEY_LENGTH,
) -> Request:
    """Return a copy of *request* with the API key header set (None clears it).

    A body-embedding failure for long keys is logged, never raised.
    """
    request, _ = _assign_api_key(request, api_key, names or HeadersConfig(), max_header_length)
    return request


def set_credentials(
    request: Request,
    credentials: Credentials | None,
    *,
    names: HeadersConfig | None = None,
    max_header_length: int = DEFAULT_MAX_HEADER_API_KEY_LENGTH,
) -> Request:
    """Write both credential headers, or clear both when *credentials* is None."""
    names = names or HeadersConfig()
    if credentials is None:
        request = set_application_id(request, None, names=names)
        return set_api_key(request, None, names=names)
    request = set_application_id(request, credentials.application_id, names=names)
    return set_api_key(
        request,
        credentials.api_key,
        names=names,
        max_header_length=max_header_length,
    )


class CredentialService(BaseService):
    """Credential accessor bound to the configured header names and limits."""

    def read(self, request: Request) -> Credentials | None:
        return get_credentials(request, names=self._settings.headers)

    def apply(self, request: Request, credentials: Credentials | None) -> ServiceResult:
        """Overlay *credentials* on *request*.

        Always succeeds; a failed body copy of a long API key is reported
        in ``warnings`` as well as logged. ``data["request"]`` holds the
        updated request.
        """
        names = self._settings.headers
        warnings: list[str] = []
        application_id = credentials.application_id if credentials is not None else None
        api_key = credentials.api_key if credentials is not None else None
        request = set_application_id(request, application_id, names=names)
        request, warning = _assign_api_key(
            request,
            api_key,
            names,
            self._settings.credentials.max_header_api_key_length,
        )
        if warning is not None:
            warnings.append(warning)
        return ServiceResult(
            ok=True,
            op="apply_credentials",
            data={"request": request},
            warnings=warnings,
        )
