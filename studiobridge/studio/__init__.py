"""
Studio Bridge Layer.

Turns the Studio plugin's loopback long-polling HTTP server into a plain
call/await API:

    StudioClient.execute_code(code)
                ↓
    Command → protocol.encode → StudioTransport (POST /proxy) → Outcome
                ↓
    protocol.decode → result string, retry, or StudioError

Transient outcomes (204/423, local timeouts) are retried inside the client
until an overall deadline; only terminal failures reach callers, always as a
StudioError subclass.
"""

from studiobridge.studio.client import StudioClient
from studiobridge.studio.models import (
    BatchItemResult,
    Command,
    CommandKind,
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
from studiobridge.studio.session import StudioSession, get_client, reset_client

__all__ = [
    "BatchItemResult",
    "Command",
    "CommandKind",
    "ConnectivityStatus",
    "HostNotReadyError",
    "HostUnavailableError",
    "Outcome",
    "OutcomeKind",
    "PendingRequest",
    "PolledRequest",
    "StudioClient",
    "StudioError",
    "StudioProtocolError",
    "StudioSession",
    "get_client",
    "reset_client",
]
