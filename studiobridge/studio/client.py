"""
StudioClient — synchronous-looking command API over the plugin's long-poll server.

Data flow:
    execute_code / insert_asset / run_batch
                    ↓
    submit_and_await(Command)  ── retry loop, overall deadline
                    ↓
    protocol.encode → StudioTransport.send("POST", "/proxy") → Outcome
                    ↓
    protocol.decode(outcome, command.id)
        READY              → result string
        NOT_READY_YET      → back off, retry while the deadline allows
        TIMEOUT            → back off, retry while the deadline allows
        CONNECTION_REFUSED → HostUnavailableError
        PROTOCOL_ERROR     → StudioProtocolError

Transient outcomes never leak to callers. Once the deadline passes no further
attempt is made, even if the last outcome was retryable.

Known limitation: independent calls share the plugin's single command queue,
whose fairness is decided by the plugin.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterable, Mapping
from typing import Any

import httpx

from studiobridge.config.settings import StudioSettings
from studiobridge.studio import protocol
from studiobridge.studio.models import (
    BatchItemResult,
    Command,
    ConnectivityStatus,
    HostNotReadyError,
    HostUnavailableError,
    Outcome,
    OutcomeKind,
    PendingRequest,
    PolledRequest,
    StudioError,
    StudioProtocolError,
)
from studiobridge.studio.prober import ConnectivityProber
from studiobridge.studio.transport import StudioTransport

logger = logging.getLogger(__name__)

NOT_READY_MESSAGE = "Studio is not ready. Check that the Studio plugin is active."
UNAVAILABLE_MESSAGE = "Studio is not running (connection refused)."


class StudioClient:
    """
    Public surface for running commands inside Studio.

    ``host`` and ``port`` are fixed at construction. ``debug`` may be flipped
    at any time; it only changes log verbosity.

    Args:
        settings: Connection and timing configuration (defaults if omitted)
        transport: Optional httpx transport override, e.g. ``httpx.MockTransport``
    """

    def __init__(
        self,
        settings: StudioSettings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._settings = settings or StudioSettings()
        self.debug = self._settings.debug
        self._transport = StudioTransport(self._settings.base_url, transport=transport)
        self._prober = ConnectivityProber(self._transport, self._settings)

    @property
    def host(self) -> str:
        return self._settings.host

    @property
    def port(self) -> int:
        return self._settings.port

    @property
    def settings(self) -> StudioSettings:
        return self._settings

    def _trace(self, message: str) -> None:
        logger.log(logging.INFO if self.debug else logging.DEBUG, message)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    async def get_status(self) -> ConnectivityStatus:
        """Probe the plugin. Never raises; failures come back as connected=False."""
        status = await self._prober.probe()
        self._trace(f"Status: connected={status.connected} detail={status.detail}")
        return status

    async def check_connection(self) -> bool:
        return (await self.get_status()).connected

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def submit_and_await(self, command: Command) -> str:
        """
        Send ``command`` through POST /proxy and wait for its result.

        Every attempt reuses the command's id so a late reply still matches.

        Args:
            command: The command to run

        Returns:
            The plugin's ``response`` for this command

        Raises:
            HostUnavailableError: The plugin refused the connection
            HostNotReadyError: No matching reply before request_deadline
            StudioProtocolError: The plugin violated the wire contract
        """
        settings = self._settings
        pending = PendingRequest(
            id=command.id,
            deadline=time.monotonic() + settings.request_deadline,
        )
        payload = protocol.encode(command)
        self._trace(f"Submitting {command.kind.value} {command.id}")

        while not pending.expired:
            pending.attempts += 1
            attempt_timeout = min(settings.attempt_timeout, pending.remaining())
            if attempt_timeout <= 0:
                break

            outcome = await self._transport.send(
                "POST", "/proxy", body=payload, timeout=attempt_timeout
            )
            outcome = protocol.decode(outcome, command.id)

            if outcome.kind is OutcomeKind.READY:
                self._trace(f"{command.id} answered after {pending.attempts} attempt(s)")
                return outcome.payload
            if outcome.is_transient:
                self._trace(
                    f"{command.id} attempt {pending.attempts}: {outcome.kind.value} "
                    f"({outcome.detail}), retrying"
                )
                await self._backoff(pending)
                continue
            self._raise_terminal(outcome)

        elapsed = time.monotonic() - pending.submitted_at
        logger.warning(
            f"{command.id} gave up after {pending.attempts} attempt(s) in {elapsed:.1f}s"
        )
        raise HostNotReadyError(NOT_READY_MESSAGE)

    async def execute_code(self, code: str) -> str:
        """Run a code string inside Studio and return its printed output."""
        self._trace(f"execute_code: {code[:50]}...")
        return await self.submit_and_await(protocol.execute_code_command(code))

    async def insert_asset(self, query: str) -> str:
        """Insert the asset best matching ``query`` and return its name."""
        self._trace(f"insert_asset: {query}")
        return await self.submit_and_await(protocol.insert_asset_command(query))

    # Names used by the route handlers
    run_code = execute_code
    insert_model = insert_asset

    async def run_batch(self, commands: Iterable[str | Mapping[str, Any]]) -> list[BatchItemResult]:
        """
        Run code strings one after another, in order.

        A failing item is recorded and the batch moves on. Items run strictly
        sequentially because the plugin serializes command delivery.

        Args:
            commands: Code strings, or mappings with a ``code`` key

        Returns:
            One BatchItemResult per input, in input order
        """
        results: list[BatchItemResult] = []
        for index, item in enumerate(commands):
            try:
                code = _code_of(item)
                output = await self.execute_code(code)
                results.append(BatchItemResult(success=True, output=output))
            except (StudioError, ValueError) as e:
                logger.warning(f"Batch item {index} failed: {e}")
                results.append(BatchItemResult(success=False, error=str(e)))
        return results

    # ------------------------------------------------------------------
    # Plugin-side queue (GET /request, POST /response)
    # ------------------------------------------------------------------

    async def poll_request(self) -> PolledRequest:
        """
        Long-poll GET /request until the plugin hands out a command.

        Refused connections are retried here since the plugin may still be
        starting up.

        Raises:
            HostNotReadyError: Nothing arrived before poll_deadline
            StudioProtocolError: The plugin violated the wire contract
        """
        settings = self._settings
        deadline = time.monotonic() + settings.poll_deadline
        attempt = 0

        while time.monotonic() < deadline:
            attempt += 1
            remaining = deadline - time.monotonic()
            self._trace(f"poll_request attempt {attempt}...")
            outcome = await self._transport.send(
                "GET", "/request", timeout=min(settings.attempt_timeout, remaining)
            )

            if outcome.kind is OutcomeKind.READY:
                body = outcome.payload
                if isinstance(body, dict) and body.get("id"):
                    self._trace(f"Request received: {body}")
                    return PolledRequest.model_validate(body)
                self._trace("No request yet, retrying...")
            elif outcome.kind is OutcomeKind.PROTOCOL_ERROR:
                self._raise_terminal(outcome)
            elif outcome.kind in (
                OutcomeKind.NOT_READY_YET,
                OutcomeKind.TIMEOUT,
                OutcomeKind.CONNECTION_REFUSED,
            ):
                self._trace(f"Request poll: {outcome.kind.value}, retrying...")
            else:
                raise AssertionError(f"Unhandled outcome kind: {outcome.kind}")

            delay = min(settings.retry_backoff, deadline - time.monotonic())
            if delay > 0:
                await asyncio.sleep(delay)

        raise HostNotReadyError(NOT_READY_MESSAGE)

    async def send_response(self, request_id: str, response: str) -> None:
        """Acknowledge a polled command with its result via POST /response."""
        outcome = await self._transport.send(
            "POST",
            "/response",
            body={"id": request_id, "response": response},
            timeout=self._settings.attempt_timeout,
        )
        if outcome.kind in (OutcomeKind.READY, OutcomeKind.NOT_READY_YET):
            return
        if outcome.kind is OutcomeKind.TIMEOUT:
            raise HostNotReadyError(f"Timed out sending response for {request_id}. {NOT_READY_MESSAGE}")
        self._raise_terminal(outcome)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _backoff(self, pending: PendingRequest) -> None:
        delay = min(self._settings.retry_backoff, pending.remaining())
        if delay > 0:
            await asyncio.sleep(delay)

    @staticmethod
    def _raise_terminal(outcome: Outcome) -> None:
        if outcome.kind is OutcomeKind.CONNECTION_REFUSED:
            raise HostUnavailableError(UNAVAILABLE_MESSAGE)
        if outcome.kind is OutcomeKind.PROTOCOL_ERROR:
            raise StudioProtocolError(outcome.detail or "protocol error", status_code=outcome.status_code)
        raise AssertionError(f"Outcome {outcome.kind} is not terminal")


def _code_of(item: str | Mapping[str, Any]) -> str:
    if isinstance(item, str):
        code = item
    elif isinstance(item, Mapping):
        code = item.get("code")
    else:
        code = None
    if not isinstance(code, str) or not code:
        raise ValueError("missing_code")
    return code
