"""Shared fixtures for the paramguard test-suite."""
from __future__ import annotations

import pytest

from paramguard import ParameterRegistry


@pytest.fixture()
def registry() -> ParameterRegistry:  # noqa: D401
    """Return an empty registry so tests never see each other's callables."""
    return ParameterRegistry()


@pytest.fixture(autouse=True)
def _default_environment(monkeypatch):  # noqa: D401
    """Run every test with the documented defaults for environment settings."""
    monkeypatch.delenv("PARAMGUARD_STRICT", raising=False)
    monkeypatch.delenv("PARAMGUARD_TELEMETRY", raising=False)
    yield


@pytest.fixture(autouse=True)
def _silence_logging(caplog):  # noqa: D401
    """Reduce noise – most tests assert behaviour, not log output."""
    caplog.set_level("WARNING")
    yield


# ---------------------------------------------------------------------------
# anyio backend selection – ensure tests run only with asyncio backend
# ---------------------------------------------------------------------------

@pytest.fixture()
def anyio_backend():  # noqa: D401
    """Force *anyio* tests to use the standard asyncio backend only."""
    return "asyncio"
