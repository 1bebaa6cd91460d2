"""
Run a generated script in Studio, or hand it back for manual execution.

Studio is a human-operated tool, not a guaranteed backend. When the plugin is
absent or fails, the caller still gets the script plus step-by-step import
instructions instead of an error.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from studiobridge.studio.client import StudioClient
from studiobridge.studio.models import StudioError

logger = logging.getLogger(__name__)

DISCONNECTED_HINT = "Start Roblox Studio and enable the MCP plugin."
FAILED_HINT = "Check that the Studio MCP plugin is running."


class SetupResult(BaseModel):
    """What happened when a setup script was offered to Studio."""

    success: bool
    auto_executed: bool
    message: str
    script: str
    execution_output: str | None = None
    error: str | None = None
    error_hint: str | None = None
    instructions: list[str] = Field(default_factory=list)


def manual_instructions(filename: str) -> list[str]:
    """Steps for importing ``filename`` and running the script by hand."""
    return [
        "1. In Roblox Studio, click Avatar → Import 3D",
        f"2. Select the file: {filename}",
        "3. Select the imported model",
        "4. Paste the script below into the Command Bar and run it",
    ]


async def run_script_or_instructions(
    client: StudioClient,
    script: str,
    filename: str,
) -> SetupResult:
    """
    Execute ``script`` in Studio if it is reachable, otherwise return it with instructions.

    Never raises StudioError; every failure is folded into the result.

    Args:
        client: Shared Studio client
        script: Rendered setup script for the imported model
        filename: Name of the exported model file the user must import
    """
    status = await client.get_status()
    if not status.connected:
        logger.info(f"Studio not connected ({status.detail}); returning script for manual run")
        return SetupResult(
            success=False,
            auto_executed=False,
            message="Script generated (Studio not connected)",
            script=script,
            error=status.detail or "Studio is not running.",
            error_hint=DISCONNECTED_HINT,
            instructions=manual_instructions(filename),
        )

    try:
        output = await client.execute_code(script)
    except StudioError as e:
        logger.warning(f"Automatic setup failed for {filename}: {e}")
        return SetupResult(
            success=False,
            auto_executed=False,
            message="Script generated (Studio execution failed)",
            script=script,
            error=str(e),
            error_hint=FAILED_HINT,
            instructions=manual_instructions(filename),
        )

    return SetupResult(
        success=True,
        auto_executed=True,
        message="Setup script executed in Studio.",
        script=script,
        execution_output=output,
    )
