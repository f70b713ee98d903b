"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, commandwire.toml only contains
overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from commandwire import __version__
from commandwire.domain.types import HTTPHeaderKey


class HeadersConfig(BaseModel):
    """[headers] section — wire names of the headers this package writes."""

    model_config = {"frozen": True}

    application_id: str = HTTPHeaderKey.APPLICATION_ID.value
    api_key: str = HTTPHeaderKey.API_KEY.value
    user_agent: str = f"commandwire/{__version__}"


class CredentialsConfig(BaseModel):
    """[credentials] section."""

    model_config = {"frozen": True}

    # Keys longer than this are also copied into the JSON body.
    max_header_api_key_length: int = Field(default=500, ge=1)
