"""
Connectivity probe for the Studio plugin.

The plugin has no status endpoint, so reachability is checked by opening a
GET /request long-poll and giving up after a short local deadline. A live
plugin holds that request open for its whole long-poll window, so a local
timeout means "connected, nothing queued". A missing plugin refuses the
connection immediately.
"""

from __future__ import annotations

import asyncio
import logging

from studiobridge.config.settings import StudioSettings
from studiobridge.studio.models import ConnectivityStatus, OutcomeKind
from studiobridge.studio.transport import StudioTransport

logger = logging.getLogger(__name__)

NOT_RUNNING_DETAIL = "Studio is not running"


class ConnectivityProber:
    """
    Answers "is the plugin reachable right now" without waiting out a long-poll.

    Args:
        transport: Transport bound to the plugin's address
        settings: Supplies probe_timeout and probe_margin
    """

    def __init__(self, transport: StudioTransport, settings: StudioSettings):
        self._transport = transport
        self._settings = settings

    async def probe(self) -> ConnectivityStatus:
        """Probe the plugin. Never raises."""
        timeout = self._settings.probe_timeout
        hard_limit = timeout + self._settings.probe_margin

        try:
            outcome = await asyncio.wait_for(
                self._transport.send("GET", "/request", timeout=timeout),
                timeout=hard_limit,
            )
        except asyncio.TimeoutError:
            logger.debug(f"Probe exceeded {hard_limit}s; treating plugin as connected")
            return ConnectivityStatus(connected=True)

        kind = outcome.kind
        if kind is OutcomeKind.TIMEOUT:
            return ConnectivityStatus(connected=True)
        if kind is OutcomeKind.READY or kind is OutcomeKind.NOT_READY_YET:
            return ConnectivityStatus(connected=True)
        if kind is OutcomeKind.CONNECTION_REFUSED:
            return ConnectivityStatus(connected=False, detail=NOT_RUNNING_DETAIL)
        if kind is OutcomeKind.PROTOCOL_ERROR:
            return ConnectivityStatus(connected=False, detail=outcome.detail)
        raise AssertionError(f"Unhandled outcome kind: {kind}")
