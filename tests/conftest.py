import pytest

from dynview.config import reset_settings
from dynview.events import _registry


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Every test starts from default settings."""
    for name in ("LOG_LEVEL", "ITEMS_KEY", "KEEP_ARRAY_SCALARS"):
        monkeypatch.delenv(f"DYNVIEW_{name}", raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def recorder():
    """Observer that records (source, name) pairs."""

    class Recorder:
        def __init__(self):
            self.calls = []

        def __call__(self, source, name):
            self.calls.append((source, name))

        @property
        def names(self):
            return [name for _, name in self.calls]

    return Recorder()


@pytest.fixture
def hooks():
    """Collects class-level hooks registered by a test and removes them after."""
    registered = []

    def register(event_type, handler):
        registered.append((event_type, handler))
        return handler

    yield register
    for event_type, handler in registered:
        _registry.unregister(event_type, handler)
