"""Shared fixtures for the Studio bridge tests."""

import pytest

from studiobridge.config.settings import StudioSettings
from studiobridge.studio.session import reset_client


def _fast_settings(**overrides) -> StudioSettings:
    """Settings with timings shrunk so retry/deadline tests run in well under a second."""
    values = dict(
        host="127.0.0.1",
        port=44755,
        long_poll_timeout=1.0,
        probe_timeout=0.1,
        probe_margin=0.05,
        attempt_timeout=0.1,
        request_deadline=0.3,
        poll_deadline=0.3,
        retry_backoff=0.01,
        debug=False,
    )
    values.update(overrides)
    return StudioSettings(**values)


@pytest.fixture
def make_settings():
    """Factory for fast StudioSettings; keyword overrides replace individual fields."""
    return _fast_settings


@pytest.fixture
def settings() -> StudioSettings:
    return _fast_settings()


@pytest.fixture(autouse=True)
def _isolated_shared_client():
    """Every test starts and ends without a process-wide client."""
    reset_client()
    yield
    reset_client()
