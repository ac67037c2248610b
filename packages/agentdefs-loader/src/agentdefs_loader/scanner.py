"""Agent definition discovery: recursive directory traversal."""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from agentdefs_core.logging import get_logger

from agentdefs_loader.types import DEFAULT_CATEGORY, Diagnostic, DiagnosticKind

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

logger = get_logger("loader.scanner")

DEFAULT_EXTENSIONS: tuple[str, ...] = (".md",)
DEFAULT_IGNORE_NAMES: tuple[str, ...] = ("README.md", "MIGRATION_SUMMARY.md")
DEFAULT_MAX_DEPTH = 32


def derive_category(path: Path, root: Path) -> str:
    """Return the category of *path*: its first directory below *root*.

    Files directly under the root are ``"uncategorized"``.
    """
    parts = path.relative_to(root).parts
    if len(parts) < 2:
        return DEFAULT_CATEGORY
    return parts[0]


class DirectoryScanner:
    """Enumerates agent definition documents below a root directory.

    Only real subdirectories are followed (symlinked directories are
    skipped) and descent stops at ``max_depth`` levels below the root.
    Problems are appended to the caller's diagnostics list instead of
    being raised.
    """

    def __init__(
        self,
        extensions: Iterable[str] = DEFAULT_EXTENSIONS,
        ignore_names: Iterable[str] = DEFAULT_IGNORE_NAMES,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        self._extensions = frozenset(ext.lower() for ext in extensions)
        self._ignore_names = frozenset(ignore_names)
        self._max_depth = max_depth

    def is_candidate(self, path: Path) -> bool:
        """Whether *path* names an eligible definition document."""
        return (
            path.suffix.lower() in self._extensions
            and path.name not in self._ignore_names
        )

    def scan(self, root: Path, diagnostics: list[Diagnostic]) -> Iterator[Path]:
        """Lazily yield candidate files found by recursive descent from *root*.

        A missing root is not an error: a ``DIRECTORY_NOT_FOUND``
        diagnostic is recorded and nothing is yielded.
        """
        if not root.is_dir():
            logger.debug("Agents directory does not exist: %s", root)
            diagnostics.append(Diagnostic(
                DiagnosticKind.DIRECTORY_NOT_FOUND,
                f"Agents directory not found: {root}",
                root,
            ))
            return
        yield from self._walk(root, 0, diagnostics)

    def _walk(
        self, directory: Path, depth: int, diagnostics: list[Diagnostic]
    ) -> Iterator[Path]:
        try:
            entries = sorted(directory.iterdir())
        except OSError as exc:
            logger.warning("Cannot read directory %s: %s", directory, exc)
            diagnostics.append(Diagnostic(
                DiagnosticKind.UNREADABLE_PATH,
                f"Cannot read directory {directory}: {exc}",
                directory,
            ))
            return

        for entry in entries:
            if entry.is_symlink() and entry.is_dir():
                logger.debug("Skipping symlinked directory: %s", entry)
                continue
            if entry.is_dir():
                if depth + 1 > self._max_depth:
                    logger.warning("Depth limit reached, skipping %s", entry)
                    diagnostics.append(Diagnostic(
                        DiagnosticKind.DEPTH_LIMIT_EXCEEDED,
                        f"Directory deeper than {self._max_depth} levels skipped: {entry}",
                        entry,
                    ))
                    continue
                yield from self._walk(entry, depth + 1, diagnostics)
            elif entry.is_file() and self.is_candidate(entry):
                yield entry
