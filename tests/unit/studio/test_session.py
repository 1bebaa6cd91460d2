"""
Tests for StudioSession and the process-wide get_client() accessor.
"""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from studiobridge.config.settings import Settings, StudioSettings
from studiobridge.studio.client import StudioClient
from studiobridge.studio.session import StudioSession, get_client, reset_client


class TestGetClient:
    def test_first_call_builds_client_from_settings(self, make_settings):
        client = get_client(make_settings(port=1111))
        assert isinstance(client, StudioClient)
        assert client.port == 1111

    def test_repeated_calls_return_same_instance(self, make_settings):
        assert get_client(make_settings()) is get_client()

    def test_later_host_and_port_are_ignored(self, make_settings):
        first = get_client(make_settings(host="127.0.0.1", port=1111))
        second = get_client(make_settings(host="10.0.0.2", port=2222))

        assert second is first
        assert second.host == "127.0.0.1"
        assert second.port == 1111

    def test_debug_can_be_updated(self, make_settings):
        client = get_client(make_settings(debug=False))
        assert client.debug is False

        assert get_client(debug=True) is client
        assert client.debug is True

        get_client(debug=False)
        assert client.debug is False

    def test_debug_untouched_when_not_given(self, make_settings):
        client = get_client(make_settings(debug=True))
        get_client()
        assert client.debug is True

    def test_defaults_come_from_global_settings(self, make_settings):
        fake = MagicMock(spec=Settings)
        fake.studio = make_settings(port=3333)

        with patch("studiobridge.studio.session.get_settings", return_value=fake):
            client = get_client()

        assert client.port == 3333

    def test_reset_allows_a_new_client(self, make_settings):
        first = get_client(make_settings(port=1111))
        reset_client()
        second = get_client(make_settings(port=2222))

        assert second is not first
        assert second.port == 2222


class TestStudioSession:
    def test_client_is_built_lazily(self, make_settings):
        session = StudioSession(make_settings())
        assert session._client is None
        client = session.client
        assert session.client is client

    def test_get_client_updates_debug(self, make_settings):
        session = StudioSession(make_settings(debug=False))
        client = session.get_client(debug=True)
        assert client is session.client
        assert client.debug is True

    def test_sessions_are_independent(self, make_settings):
        a = StudioSession(make_settings(port=1111))
        b = StudioSession(make_settings(port=2222))
        assert a.client is not b.client
        assert (a.client.port, b.client.port) == (1111, 2222)

    @pytest.mark.asyncio
    async def test_transport_override_reaches_client(self, make_settings):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"response": "ok"}))
        session = StudioSession(make_settings(), transport=transport)
        assert await session.client.execute_code("print(1)") == "ok"

    def test_settings_are_not_copied(self):
        settings = StudioSettings(port=4444)
        session = StudioSession(settings)
        assert session.client.settings is settings
