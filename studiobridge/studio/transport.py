"""
HTTP transport to the Studio plugin.

One call to ``send()`` is one HTTP exchange. The raw result is classified into
an ``Outcome`` and returned; nothing is raised for network conditions and
nothing is retried here.

Status mapping:
    204, 423            -> NOT_READY_YET (plugin's own long-poll window elapsed)
    other 2xx           -> READY(parsed JSON body, or None when empty)
    anything else       -> PROTOCOL_ERROR("HTTP <status>: <body>")
    connect failure     -> CONNECTION_REFUSED
    local timeout       -> TIMEOUT
    unparseable 2xx     -> PROTOCOL_ERROR("malformed response body")
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import httpx

from studiobridge.studio.models import Outcome

logger = logging.getLogger(__name__)

NOT_READY_STATUSES = frozenset({204, 423})
MALFORMED_BODY = "malformed response body"


class StudioTransport:
    """
    Issues single HTTP requests against the plugin's loopback server.

    A fresh ``httpx.AsyncClient`` is opened per exchange, so abandoning an
    attempt (local deadline or caller cancellation) closes its connection.

    Args:
        base_url: e.g. ``http://127.0.0.1:44755``
        transport: Optional httpx transport override (``httpx.MockTransport`` in tests)
    """

    def __init__(self, base_url: str, transport: httpx.AsyncBaseTransport | None = None):
        self.base_url = base_url
        self._transport = transport

    async def send(
        self,
        method: str,
        path: str,
        body: Any = None,
        timeout: float = 3.0,
    ) -> Outcome:
        """
        Perform one exchange and classify the result.

        Args:
            method: HTTP method
            path: Request path, e.g. ``/proxy``
            body: JSON-serializable body, or None for no body
            timeout: Local deadline in seconds (must be positive)

        Returns:
            The classified Outcome

        Raises:
            ValueError: If timeout is not positive
        """
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")

        headers: dict[str, str] = {}
        content: bytes | None = None
        if body is not None:
            content = body if isinstance(body, bytes) else json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"

        try:
            response = await asyncio.wait_for(
                self._exchange(method, path, content, headers, timeout),
                timeout=timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException):
            logger.debug(f"{method} {path} timed out after {timeout}s")
            return Outcome.timeout(f"request timeout: {path}")
        except httpx.ConnectError as e:
            logger.debug(f"{method} {path} connection refused: {e}")
            return Outcome.refused(str(e) or "connection refused")
        except httpx.DecodingError as e:
            logger.warning(f"{method} {path} body could not be decoded: {e}")
            return Outcome.protocol_error(MALFORMED_BODY)
        except httpx.RequestError as e:
            logger.debug(f"{method} {path} transport error: {e}")
            return Outcome.protocol_error(f"transport error: {e}")

        return self.classify(response)

    async def _exchange(
        self,
        method: str,
        path: str,
        content: bytes | None,
        headers: dict[str, str],
        timeout: float,
    ) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            transport=self._transport,
            timeout=httpx.Timeout(timeout),
        ) as client:
            return await client.request(method, path, content=content, headers=headers)

    @staticmethod
    def classify(response: httpx.Response) -> Outcome:
        """Map an HTTP response onto an Outcome."""
        status = response.status_code

        if status in NOT_READY_STATUSES:
            return Outcome.not_ready(f"HTTP {status}")

        if 200 <= status < 300:
            if not response.content.strip():
                return Outcome.ready(None)
            try:
                return Outcome.ready(response.json())
            except ValueError:
                logger.warning(f"Unparseable body from plugin: {response.text[:200]!r}")
                return Outcome.protocol_error(MALFORMED_BODY, status_code=status)

        return Outcome.protocol_error(f"HTTP {status}: {response.text}", status_code=status)
