import pytest

from opstate.config import get_settings
from opstate.events.publisher import _active_tasks

_ENV_VARS = ("LOG_LEVEL", "OPERATION_DISCARD_STALE", "EVENT_SHUTDOWN_TIMEOUT_S")


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Run every test against default settings unless it sets its own env."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
    _active_tasks.clear()


@pytest.fixture
def recorder():
    """Collects whatever an observer callback receives."""

    class _Recorder:
        def __init__(self):
            self.calls = []

        def __call__(self, payload):
            self.calls.append(payload)

    return _Recorder()
