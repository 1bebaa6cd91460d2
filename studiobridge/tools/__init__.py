"""
Tool Integration Layer.

Adapters that expose Studio actions as tools an LLM can invoke.
"""
