"""
Studio tool adapter.

Exposes run_code and insert_model to an LLM so generated content can be
applied inside Studio mid-answer.
"""

from typing import Any

from studiobridge.studio.client import StudioClient
from studiobridge.studio.models import StudioError
from studiobridge.tools.base import ToolAdapter

_TOOLS: list[dict[str, Any]] = [
    {
        "name": "run_code",
        "description": "Run Luau code inside Roblox Studio and return its printed output",
        "input_schema": {
            "type": "object",
            "properties": {
                "code": {"type": "string", "description": "Luau source to execute"},
            },
            "required": ["code"],
        },
    },
    {
        "name": "insert_model",
        "description": "Search the Creator Store and insert the best matching model into the place",
        "input_schema": {
            "type": "object",
            "properties": {
                "query": {"type": "string", "description": "Search text, e.g. 'wooden crate'"},
            },
            "required": ["query"],
        },
    },
]


class StudioTool(ToolAdapter):
    """
    Tool adapter backed by a StudioClient.

    ``initialize()`` probes the plugin; it does not fail when Studio is down,
    since calls made later report their own errors.
    """

    def __init__(self, client: StudioClient):
        self._client = client
        self._initialized = False
        self.connected = False

    async def initialize(self) -> None:
        status = await self._client.get_status()
        self.connected = status.connected
        self._initialized = True

    async def shutdown(self) -> None:
        self._initialized = False

    async def call(self, tool_name: str, arguments: dict[str, Any]) -> dict[str, Any]:
        """Run a Studio tool. Studio failures are returned as text, not raised."""
        if not self._initialized:
            raise RuntimeError("Tool adapter not initialized")

        if tool_name == "run_code":
            handler, key = self._client.execute_code, "code"
        elif tool_name == "insert_model":
            handler, key = self._client.insert_asset, "query"
        else:
            raise ValueError(f"Unknown tool: {tool_name}")

        value = arguments.get(key)
        if not isinstance(value, str) or not value:
            raise ValueError(f"Tool '{tool_name}' requires a non-empty '{key}' argument")

        try:
            text = await handler(value)
        except StudioError as e:
            return {"text": f"Error: {e}", "error": True}
        return {"text": text}

    async def list_tools(self) -> list[dict[str, Any]]:
        if not self._initialized:
            raise RuntimeError("Tool adapter not initialized")
        return [dict(tool) for tool in _TOOLS]
