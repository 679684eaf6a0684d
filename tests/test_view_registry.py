"""
Unit tests for the per-session view registry.
"""
import pytest

from forest_console.domain.registry import ANIMALS, TREES
from forest_console.services.application.view_registry import ViewRegistry


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ============================================================
# Mount & Lookup Tests
# ============================================================

class TestMountAndLookup:
    """Tests for storing controllers per session and entity."""

    def test_screens_are_separate_per_session(self, fake_backend, clock):
        registry = ViewRegistry(idle_timeout=60, max_sessions=10, clock=clock)

        mine = registry.mount("a", ANIMALS, fake_backend.gateway(ANIMALS))
        theirs = registry.mount("b", ANIMALS, fake_backend.gateway(ANIMALS))

        assert registry.get("a", "animals") is mine
        assert registry.get("b", "animals") is theirs
        assert registry.get("a", "trees") is None
        assert len(registry) == 2

    def test_mount_replaces_controller(self, fake_backend, clock):
        registry = ViewRegistry(idle_timeout=60, max_sessions=10, clock=clock)
        first = registry.mount("a", ANIMALS, fake_backend.gateway(ANIMALS))

        second = registry.mount("a", ANIMALS, fake_backend.gateway(ANIMALS))

        assert second is not first
        assert registry.get("a", "animals") is second
        assert len(registry) == 1

    def test_discard_session(self, fake_backend, clock):
        registry = ViewRegistry(idle_timeout=60, max_sessions=10, clock=clock)
        registry.mount("a", ANIMALS, fake_backend.gateway(ANIMALS))
        registry.mount("a", TREES, fake_backend.gateway(TREES))

        assert registry.discard_session("a") == 2
        assert registry.discard_session("a") == 0
        assert len(registry) == 0


# ============================================================
# Eviction Tests
# ============================================================

class TestEviction:
    """Tests for dropping abandoned sessions."""

    def test_idle_session_is_evicted(self, fake_backend, clock):
        registry = ViewRegistry(idle_timeout=60, max_sessions=10, clock=clock)
        registry.mount("abandoned", ANIMALS, fake_backend.gateway(ANIMALS))

        clock.now = 61
        registry.mount("active", ANIMALS, fake_backend.gateway(ANIMALS))

        assert registry.get("abandoned", "animals") is None
        assert registry.session_count == 1
        assert len(registry) == 1

    def test_lookup_keeps_session_alive(self, fake_backend, clock):
        registry = ViewRegistry(idle_timeout=60, max_sessions=10, clock=clock)
        controller = registry.mount("a", ANIMALS, fake_backend.gateway(ANIMALS))

        clock.now = 50
        assert registry.get("a", "animals") is controller
        clock.now = 100

        assert registry.get("a", "animals") is controller

    def test_least_recently_used_session_goes_first(self, fake_backend, clock):
        registry = ViewRegistry(idle_timeout=3600, max_sessions=2, clock=clock)
        registry.mount("a", ANIMALS, fake_backend.gateway(ANIMALS))
        clock.now = 1
        registry.mount("b", ANIMALS, fake_backend.gateway(ANIMALS))
        clock.now = 2
        registry.get("a", "animals")

        clock.now = 3
        registry.mount("c", TREES, fake_backend.gateway(TREES))

        assert registry.session_count == 2
        assert registry.get("b", "animals") is None
        assert registry.get("a", "animals") is not None
        assert registry.get("c", "trees") is not None

    def test_abandoned_browsers_do_not_accumulate(self, fake_backend, clock):
        registry = ViewRegistry(idle_timeout=60, max_sessions=1000, clock=clock)
        for n in range(50):
            clock.now = n * 30
            registry.mount(f"session-{n}", ANIMALS, fake_backend.gateway(ANIMALS))

        assert registry.session_count <= 3
