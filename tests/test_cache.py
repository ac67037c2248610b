from __future__ import annotations

from agentdefs_loader.cache import DefinitionCache
from agentdefs_loader.types import RegistrySnapshot


def _snapshot(cache: DefinitionCache, root: str = "/agents") -> RegistrySnapshot:
    return RegistrySnapshot.empty(root, cache.now())


class TestDefinitionCache:

    def test_get_missing(self, cache):
        assert cache.get("/agents") is None
        assert cache.peek("/agents") is None

    def test_put_and_get(self, cache):
        snap = _snapshot(cache)
        cache.put("/agents", snap)
        assert cache.get("/agents") is snap

    def test_expiry(self, cache, clock):
        snap = _snapshot(cache)
        cache.put("/agents", snap)

        clock.advance(59)
        assert cache.get("/agents") is snap

        clock.advance(1)
        assert cache.get("/agents") is None
        assert cache.peek("/agents") is snap

    def test_put_replaces(self, cache, clock):
        old = _snapshot(cache)
        cache.put("/agents", old)
        clock.advance(5)
        new = _snapshot(cache)
        cache.put("/agents", new)

        assert cache.get("/agents") is new

    def test_invalidate(self, cache):
        snap = _snapshot(cache)
        cache.put("/agents", snap)

        cache.invalidate("/agents")

        assert cache.get("/agents") is None
        assert cache.peek("/agents") is snap

    def test_put_after_invalidate_is_fresh(self, cache):
        cache.put("/agents", _snapshot(cache))
        cache.invalidate("/agents")
        snap = _snapshot(cache)
        cache.put("/agents", snap)

        assert cache.get("/agents") is snap

    def test_invalidate_unknown_root(self, cache):
        cache.invalidate("/nowhere")  # Should not raise
        assert cache.get("/nowhere") is None

    def test_roots_are_independent(self, cache):
        a = _snapshot(cache, "/a")
        b = _snapshot(cache, "/b")
        cache.put("/a", a)
        cache.put("/b", b)

        cache.invalidate("/a")

        assert cache.get("/a") is None
        assert cache.get("/b") is b

    def test_clear(self, cache):
        cache.put("/agents", _snapshot(cache))
        cache.clear()
        assert cache.peek("/agents") is None

    def test_default_expiry(self):
        assert DefinitionCache().expiry_seconds == 60.0
