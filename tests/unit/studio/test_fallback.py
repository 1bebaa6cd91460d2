"""
Tests for run_script_or_instructions: run in Studio when possible,
otherwise hand the script back with manual steps.
"""

from unittest.mock import AsyncMock

import pytest

from studiobridge.studio.fallback import manual_instructions, run_script_or_instructions
from studiobridge.studio.models import ConnectivityStatus, HostNotReadyError


@pytest.fixture
def mock_client():
    client = AsyncMock()
    client.get_status.return_value = ConnectivityStatus(connected=True)
    client.execute_code.return_value = "Setup complete"
    return client


SCRIPT = "local model = workspace:FindFirstChild('Sword')"


class TestRunScriptOrInstructions:
    @pytest.mark.asyncio
    async def test_connected_runs_script(self, mock_client):
        result = await run_script_or_instructions(mock_client, SCRIPT, "sword.fbx")

        mock_client.execute_code.assert_awaited_once_with(SCRIPT)
        assert result.success is True
        assert result.auto_executed is True
        assert result.execution_output == "Setup complete"
        assert result.script == SCRIPT
        assert result.instructions == []

    @pytest.mark.asyncio
    async def test_disconnected_returns_instructions(self, mock_client):
        mock_client.get_status.return_value = ConnectivityStatus(
            connected=False, detail="Studio is not running"
        )

        result = await run_script_or_instructions(mock_client, SCRIPT, "sword.fbx")

        mock_client.execute_code.assert_not_awaited()
        assert result.success is False
        assert result.auto_executed is False
        assert result.script == SCRIPT
        assert result.error == "Studio is not running"
        assert any("sword.fbx" in step for step in result.instructions)

    @pytest.mark.asyncio
    async def test_execution_failure_degrades_to_instructions(self, mock_client):
        mock_client.execute_code.side_effect = HostNotReadyError("Studio is not ready.")

        result = await run_script_or_instructions(mock_client, SCRIPT, "sword.fbx")

        assert result.success is False
        assert result.auto_executed is False
        assert result.error == "Studio is not ready."
        assert result.instructions == manual_instructions("sword.fbx")


def test_manual_instructions_are_ordered_steps():
    steps = manual_instructions("axe.fbx")
    assert len(steps) == 4
    assert [s[0] for s in steps] == ["1", "2", "3", "4"]
    assert "axe.fbx" in steps[1]
