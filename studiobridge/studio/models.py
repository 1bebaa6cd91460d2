"""
Data structures and errors for the Studio bridge.

- CommandKind / Command: a tagged action for the Studio plugin
- PendingRequest: the in-flight bookkeeping of one command
- OutcomeKind / Outcome: the classified result of one HTTP exchange
- ConnectivityStatus: result of a reachability probe
- BatchItemResult: per-command result of a batch run
- PolledRequest: a command fetched from the plugin's GET /request queue
- StudioError and subclasses: terminal failures surfaced to callers
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class StudioError(Exception):
    """Base class for every failure raised by the Studio bridge."""

    def __init__(self, message: str, cause: Exception | None = None):
        super().__init__(message)
        self.cause = cause


class HostUnavailableError(StudioError):
    """The Studio plugin refused the connection (Studio is not running)."""


class HostNotReadyError(StudioError):
    """The plugin never produced an answer before the overall deadline."""


class StudioProtocolError(StudioError):
    """The plugin answered, but not in a way the wire contract allows."""

    def __init__(self, message: str, status_code: int | None = None, cause: Exception | None = None):
        super().__init__(message, cause=cause)
        self.status_code = status_code


class CommandKind(str, Enum):
    """Closed set of actions the plugin understands."""

    EXECUTE_CODE = "execute-code"
    INSERT_ASSET = "insert-asset"

    @property
    def wire_tag(self) -> str:
        """Key the plugin expects under ``args``."""
        return _WIRE_TAGS[self]


_WIRE_TAGS = {
    CommandKind.EXECUTE_CODE: "RunCode",
    CommandKind.INSERT_ASSET: "InsertModel",
}


class Command(BaseModel):
    """
    A tagged payload describing one action to run inside Studio.

    ``arguments`` is kind-specific: ``{"command": <code>}`` for execute-code,
    ``{"query": <search text>}`` for insert-asset.
    """

    id: str = Field(min_length=1, description="Correlation id (UUID4 string)")
    kind: CommandKind
    arguments: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


@dataclass
class PendingRequest:
    """In-flight state of one command. Never shared between calls."""

    id: str
    deadline: float
    submitted_at: float = field(default_factory=time.monotonic)
    attempts: int = 0

    def remaining(self) -> float:
        """Seconds left before the deadline (never negative)."""
        return max(0.0, self.deadline - time.monotonic())

    @property
    def expired(self) -> bool:
        return time.monotonic() >= self.deadline


class OutcomeKind(str, Enum):
    READY = "ready"
    NOT_READY_YET = "not_ready_yet"
    CONNECTION_REFUSED = "connection_refused"
    TIMEOUT = "timeout"
    PROTOCOL_ERROR = "protocol_error"


@dataclass(frozen=True)
class Outcome:
    """Result of one transport exchange."""

    kind: OutcomeKind
    payload: Any = None
    detail: str | None = None
    status_code: int | None = None

    @classmethod
    def ready(cls, payload: Any) -> Outcome:
        return cls(OutcomeKind.READY, payload=payload)

    @classmethod
    def not_ready(cls, detail: str | None = None) -> Outcome:
        return cls(OutcomeKind.NOT_READY_YET, detail=detail)

    @classmethod
    def refused(cls, detail: str | None = None) -> Outcome:
        return cls(OutcomeKind.CONNECTION_REFUSED, detail=detail)

    @classmethod
    def timeout(cls, detail: str | None = None) -> Outcome:
        return cls(OutcomeKind.TIMEOUT, detail=detail)

    @classmethod
    def protocol_error(cls, detail: str, status_code: int | None = None) -> Outcome:
        return cls(OutcomeKind.PROTOCOL_ERROR, detail=detail, status_code=status_code)

    @property
    def is_transient(self) -> bool:
        """True for outcomes a caller may retry."""
        return self.kind in (OutcomeKind.NOT_READY_YET, OutcomeKind.TIMEOUT)


class ConnectivityStatus(BaseModel):
    """Whether the plugin is reachable right now. Recomputed on every probe."""

    connected: bool
    detail: str | None = None


class BatchItemResult(BaseModel):
    """Result of one command inside a batch run."""

    success: bool
    output: str | None = None
    error: str | None = None


class PolledRequest(BaseModel):
    """A pending command handed out by the plugin on GET /request."""

    id: str
    args: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="allow")
