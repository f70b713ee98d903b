"""BaseService — shared foundation for commandwire services.

Every service receives a :class:`WireSettings` at construction time and
reads header names, default host, and limits from it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from commandwire.config.settings import WireSettings


class BaseService:
    """Base for service-layer classes.

    Usage::

        class RequestBuilderService(BaseService):
            def build(self, command: Command) -> ServiceResult:
                host = self._settings.host
                ...
    """

    def __init__(self, settings: WireSettings) -> None:
        self._settings = settings
