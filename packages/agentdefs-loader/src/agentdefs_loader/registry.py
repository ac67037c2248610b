"""Agent registry: cached, queryable view of the agent definitions on disk."""
from __future__ import annotations

import asyncio
import dataclasses
from pathlib import Path
from typing import TYPE_CHECKING

from agentdefs_core.logging import get_logger

from agentdefs_loader.cache import DefinitionCache
from agentdefs_loader.parser import parse_agent_text
from agentdefs_loader.scanner import DirectoryScanner, derive_category
from agentdefs_loader.types import (
    AgentDefinition,
    Diagnostic,
    DiagnosticKind,
    RegistrySnapshot,
)

if TYPE_CHECKING:
    from agentdefs_core.config import AgentDefsConfig

logger = get_logger("loader.registry")


class AgentRegistry:
    """Discovers agent definitions below a root directory and answers queries.

    Every query reads from one immutable :class:`RegistrySnapshot`.  When
    the cached snapshot is absent, expired or invalidated, the query first
    rebuilds it on a worker thread.  Rebuilds are serialised so that
    concurrent stale readers trigger a single scan.

    Missing directories and malformed files never raise out of the
    query methods; they show up in :meth:`diagnostics` instead.
    """

    def __init__(
        self,
        root: Path | str,
        *,
        cache: DefinitionCache | None = None,
        scanner: DirectoryScanner | None = None,
    ) -> None:
        self._root = Path(root).expanduser().resolve()
        self._key = str(self._root)
        self._cache = cache if cache is not None else DefinitionCache()
        self._scanner = scanner if scanner is not None else DirectoryScanner()
        self._lock = asyncio.Lock()
        self._scan_count = 0

    @classmethod
    def from_config(
        cls,
        config: AgentDefsConfig,
        *,
        root: Path | str | None = None,
        cache: DefinitionCache | None = None,
    ) -> AgentRegistry:
        """Build a registry from the ``[loader]`` config section.

        *root* overrides the configured agents directory.
        """
        loader = config.loader
        if cache is None:
            cache = DefinitionCache(expiry_seconds=loader.cache_expiry_seconds)
        scanner = DirectoryScanner(
            extensions=loader.extensions,
            ignore_names=loader.ignore_names,
            max_depth=loader.max_depth,
        )
        if root is None:
            root = config.agents_path
        return cls(root, cache=cache, scanner=scanner)

    @property
    def root(self) -> Path:
        return self._root

    @property
    def scan_count(self) -> int:
        """Number of completed directory scans."""
        return self._scan_count

    # ── Queries ──────────────────────────────────────────────────────

    async def list_all(self) -> list[AgentDefinition]:
        """All current definitions, in scan order."""
        snapshot = await self.snapshot()
        return list(snapshot.definitions.values())

    async def get(self, name: str) -> AgentDefinition | None:
        """Look up a definition by its exact name (no legacy aliasing)."""
        snapshot = await self.snapshot()
        return snapshot.definitions.get(name)

    async def exists(self, name: str) -> bool:
        return await self.get(name) is not None

    async def get_raw(self, name: str) -> str | None:
        """The full source text of a definition, header included."""
        definition = await self.get(name)
        return definition.raw_text if definition is not None else None

    async def list_by_category(self, category: str) -> list[AgentDefinition]:
        snapshot = await self.snapshot()
        names = snapshot.categories.get(category, ())
        return [snapshot.definitions[name] for name in names]

    async def list_categories(self) -> list[str]:
        snapshot = await self.snapshot()
        return sorted(snapshot.categories)

    async def get_categories(self) -> dict[str, list[AgentDefinition]]:
        """Definitions grouped by category, categories sorted by name."""
        snapshot = await self.snapshot()
        return {
            category: [snapshot.definitions[n] for n in snapshot.categories[category]]
            for category in sorted(snapshot.categories)
        }

    async def search(self, query: str) -> list[AgentDefinition]:
        """Case-insensitive match against name, description and capabilities."""
        needle = query.lower()
        snapshot = await self.snapshot()
        return [
            d for d in snapshot.definitions.values()
            if needle in d.name.lower()
            or needle in d.description.lower()
            or any(needle in cap.lower() for cap in d.capabilities)
        ]

    async def diagnostics(self) -> list[Diagnostic]:
        snapshot = await self.snapshot()
        return list(snapshot.diagnostics)

    # ── Cache control ────────────────────────────────────────────────

    async def snapshot(self) -> RegistrySnapshot:
        """Return the fresh snapshot, rebuilding it first if stale."""
        cached = self._cache.get(self._key)
        if cached is not None:
            return cached
        async with self._lock:
            # Another task may have rebuilt while we waited for the lock.
            cached = self._cache.get(self._key)
            if cached is not None:
                return cached
            return await self._rebuild()

    async def refresh(self) -> RegistrySnapshot:
        """Rebuild unconditionally, bypassing cache freshness."""
        async with self._lock:
            return await self._rebuild()

    def invalidate(self) -> None:
        """Mark the cached snapshot stale; the next query rebuilds."""
        self._cache.invalidate(self._key)

    async def _rebuild(self) -> RegistrySnapshot:
        try:
            snapshot = await asyncio.to_thread(self._build_snapshot)
        except Exception:
            logger.exception("Failed to load agent definitions from %s", self._root)
            previous = self._cache.peek(self._key)
            if previous is not None:
                logger.warning(
                    "Serving last loaded agent definitions from %s", self._root
                )
                return previous
            return RegistrySnapshot.empty(self._key, self._cache.now())

        self._cache.put(self._key, snapshot)
        return snapshot

    def _build_snapshot(self) -> RegistrySnapshot:
        diagnostics: list[Diagnostic] = []
        root = self._root
        # Sort by relative path so "first occurrence wins" is reproducible.
        candidates = sorted(
            self._scanner.scan(root, diagnostics),
            key=lambda p: p.relative_to(root).as_posix(),
        )

        definitions: list[AgentDefinition] = []
        seen: dict[str, Path] = {}
        for path in candidates:
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                diagnostics.append(Diagnostic(
                    DiagnosticKind.UNREADABLE_PATH,
                    f"Cannot read agent definition {path}: {exc}",
                    path,
                ))
                logger.warning("Cannot read agent definition %s: %s", path, exc)
                continue

            result = parse_agent_text(text, path)
            if result.definition is None:
                diagnostics.append(result.diagnostic)
                logger.warning("Skipping agent definition: %s", result.diagnostic.message)
                continue

            definition = result.definition
            if definition.name in seen:
                msg = (
                    f"Duplicate agent name '{definition.name}' at {path} "
                    f"(first defined at {seen[definition.name]})"
                )
                diagnostics.append(Diagnostic(DiagnosticKind.DUPLICATE_NAME, msg, path))
                logger.warning("%s, skipping", msg)
                continue

            seen[definition.name] = path
            definitions.append(dataclasses.replace(
                definition, category=derive_category(path, root),
            ))

        self._scan_count += 1
        snapshot = RegistrySnapshot.build(
            root=self._key,
            loaded_at=self._cache.now(),
            definitions=definitions,
            diagnostics=diagnostics,
        )
        logger.info(
            "Loaded %d agent definition(s) from %s (%d diagnostic(s))",
            len(definitions),
            root,
            len(diagnostics),
        )
        return snapshot
