"""
Correlation protocol for the Studio plugin.

Commands are sent as ``{"id": <uuid>, "args": {<WireTag>: {...}}}`` and the
plugin answers with a free-form object. Only a ``response`` field is treated
specially; an ``id`` field, when present, must match the id that was sent.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any

from studiobridge.studio.models import Command, CommandKind, Outcome, OutcomeKind

logger = logging.getLogger(__name__)


def new_request_id() -> str:
    """Random version-4 UUID in canonical form."""
    return str(uuid.uuid4())


def build_command(kind: CommandKind, command_id: str | None = None, **arguments: Any) -> Command:
    """Build a Command, generating an id when none is supplied."""
    return Command(id=command_id or new_request_id(), kind=kind, arguments=arguments)


def execute_code_command(code: str, command_id: str | None = None) -> Command:
    return build_command(CommandKind.EXECUTE_CODE, command_id, command=code)


def insert_asset_command(query: str, command_id: str | None = None) -> Command:
    return build_command(CommandKind.INSERT_ASSET, command_id, query=query)


def to_wire(command: Command) -> dict[str, Any]:
    """The JSON object the plugin expects for ``command``."""
    return {
        "id": command.id,
        "args": {command.kind.wire_tag: dict(command.arguments)},
    }


def encode(command: Command) -> bytes:
    return json.dumps(to_wire(command)).encode("utf-8")


def decode(outcome: Outcome, expected_id: str) -> Outcome:
    """
    Unwrap a READY outcome into the command's result string.

    A reply carrying a different ``id`` belongs to another request and is
    reported as NOT_READY_YET so the caller keeps waiting for its own.
    Non-READY outcomes are returned unchanged.

    Args:
        outcome: Outcome produced by the transport
        expected_id: Correlation id of the command that was sent

    Returns:
        READY(str) on a matching reply, otherwise an Outcome of another kind
    """
    if outcome.kind is not OutcomeKind.READY:
        return outcome

    body = outcome.payload
    if isinstance(body, dict):
        reply_id = body.get("id")
        if reply_id is not None and str(reply_id) != expected_id:
            logger.warning(f"Ignoring reply for {reply_id} while waiting for {expected_id}")
            return Outcome.not_ready(f"stale reply for {reply_id}")
        if "response" in body:
            return Outcome.ready(_as_text(body["response"]))

    return Outcome.ready(json.dumps(body))


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value)
