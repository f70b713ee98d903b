"""Application ID / API key identifiers and the paired Credentials model.

INVARIANT: Credentials are always a matched pair. A value that fails to
parse on either side means "no credentials", never a half-filled pair.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints, TypeAdapter, ValidationError

ApplicationID = Annotated[str, StringConstraints(min_length=1, pattern=r"\S")]
APIKey = Annotated[str, StringConstraints(min_length=1, pattern=r"\S")]

_application_id_adapter: TypeAdapter[str] = TypeAdapter(ApplicationID)
_api_key_adapter: TypeAdapter[str] = TypeAdapter(APIKey)


def parse_application_id(value: str | None) -> str | None:
    """Return *value* as an application ID, or None if absent or invalid."""
    if value is None:
        return None
    try:
        return _application_id_adapter.validate_python(value)
    except ValidationError:
        return None


def parse_api_key(value: str | None) -> str | None:
    """Return *value* as an API key, or None if absent or invalid."""
    if value is None:
        return None
    try:
        return _api_key_adapter.validate_python(value)
    except ValidationError:
        return None


class Credentials(BaseModel):
    """Application ID and API key carried together on every request."""

    model_config = {"frozen": True}

    application_id: ApplicationID
    api_key: APIKey = Field(repr=False)
