"""
studiobridge - call/await bridge between AI backends and Roblox Studio.

The Studio plugin can only be reached through a loopback HTTP long-polling
server. This package wraps that channel in a correlated, retrying
request/response client for use by route handlers and LLM tool loops.
"""

__version__ = "0.1.0"
