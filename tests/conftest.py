from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from agentdefs_loader.cache import DefinitionCache
from agentdefs_loader.registry import AgentRegistry

if TYPE_CHECKING:
    from pathlib import Path


class FakeClock:
    """Manually advanced clock for cache expiry tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> DefinitionCache:
    return DefinitionCache(expiry_seconds=60.0, clock=clock)


@pytest.fixture
def agents_dir(tmp_path: Path) -> Path:
    root = tmp_path / ".claude" / "agents"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def registry(agents_dir: Path, cache: DefinitionCache) -> AgentRegistry:
    return AgentRegistry(agents_dir, cache=cache)
