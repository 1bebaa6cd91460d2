"""
Process-wide StudioClient ownership.

``StudioSession`` is the explicit form: the composition root builds one,
passes it to whatever needs Studio access, and every consumer shares its
client. ``get_client()`` keeps the lazy module-level accessor for callers
that have no composition root (CLI, scripts).
"""

from __future__ import annotations

import logging

import httpx

from studiobridge.config.settings import StudioSettings, get_settings
from studiobridge.studio.client import StudioClient

logger = logging.getLogger(__name__)


class StudioSession:
    """
    Owns the single StudioClient for one application.

    The client is built on first use. Host and port come from the settings
    given here and never change afterwards; only ``debug`` can be updated.

    Args:
        settings: Studio configuration; read from the global settings when omitted
        transport: Optional httpx transport override for tests
    """

    def __init__(
        self,
        settings: StudioSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._settings = settings
        self._transport = transport
        self._client: StudioClient | None = None

    @property
    def client(self) -> StudioClient:
        if self._client is None:
            settings = self._settings or get_settings().studio
            self._client = StudioClient(settings, transport=self._transport)
            logger.info(f"Studio client created for {settings.base_url}")
        return self._client

    def get_client(self, debug: bool | None = None) -> StudioClient:
        """Return the shared client, optionally updating its debug flag."""
        client = self.client
        if debug is not None:
            client.debug = debug
        return client


_session: StudioSession | None = None


def get_client(settings: StudioSettings | None = None, *, debug: bool | None = None) -> StudioClient:
    """
    Get or create the process-wide StudioClient.

    The first call decides host and port. Settings passed on later calls are
    ignored except for ``debug``.

    Args:
        settings: Used only when no client exists yet
        debug: If given, updates the shared client's debug flag
    """
    global _session
    if _session is None:
        _session = StudioSession(settings)
    elif settings is not None and _session.client.settings.base_url != settings.base_url:
        logger.debug(
            f"Ignoring {settings.base_url}; shared client stays on "
            f"{_session.client.settings.base_url}"
        )
    return _session.get_client(debug=debug)


def reset_client() -> None:
    """Drop the shared client so the next get_client() builds a new one."""
    global _session
    _session = None
