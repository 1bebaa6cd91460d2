"""
Base class for tool adapters.

A tool adapter exposes an external system (here, Roblox Studio) as a set of
tools an LLM can call during response generation.
"""

from abc import ABC, abstractmethod
from typing import Any


class ToolAdapter(ABC):
    """
    Uniform interface for LLM-callable tools.

    Adapters are async context managers: ``initialize()`` on entry,
    ``shutdown()`` on exit.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """
        Prepare the adapter for calls.

        Raises:
            ConnectionError: If the backing system cannot be reached
        """

    @abstractmethod
    async def shutdown(self) -> None:
        """Release anything acquired in initialize()."""

    @abstractmethod
    async def call(self, tool_name: str, arguments: dict[str, Any]) -> dict[str, Any]:
        """
        Call a tool with the given arguments.

        Args:
            tool_name: Name of the tool to invoke
            arguments: Tool-specific arguments

        Returns:
            Tool execution result as a dictionary with a ``text`` key

        Raises:
            ValueError: If tool_name is unknown or arguments are invalid
            RuntimeError: If the adapter is not initialized
        """

    @abstractmethod
    async def list_tools(self) -> list[dict[str, Any]]:
        """
        List all available tools from this adapter.

        Returns:
            Tool schemas with ``name``, ``description`` and ``input_schema``.

        Example:
            [
                {
                    "name": "run_code",
                    "description": "Run Luau code inside Roblox Studio",
                    "input_schema": {
                        "type": "object",
                        "properties": {"code": {"type": "string"}},
                        "required": ["code"]
                    }
                }
            ]
        """

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.shutdown()
        return False
