"""Tests for directory scanning and category derivation."""
from __future__ import annotations

import os
from pathlib import Path

import pytest
from agentdefs_loader.scanner import DirectoryScanner, derive_category
from agentdefs_loader.types import Diagnostic, DiagnosticKind


def _touch(path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("---\nname: x\ndescription: y\n---\n", encoding="utf-8")
    return path


class TestDirectoryScanner:

    def test_recursive_discovery(self, tmp_path: Path) -> None:
        _touch(tmp_path / "top.md")
        _touch(tmp_path / "analysis" / "code-review" / "reviewer.md")
        _touch(tmp_path / "core" / "coder.md")
        diagnostics: list[Diagnostic] = []

        found = list(DirectoryScanner().scan(tmp_path, diagnostics))

        rel = sorted(p.relative_to(tmp_path).as_posix() for p in found)
        assert rel == ["analysis/code-review/reviewer.md", "core/coder.md", "top.md"]
        assert diagnostics == []

    def test_filters_extensions_and_ignored_names(self, tmp_path: Path) -> None:
        _touch(tmp_path / "agent.md")
        _touch(tmp_path / "UPPER.MD")
        _touch(tmp_path / "notes.txt")
        _touch(tmp_path / "README.md")
        _touch(tmp_path / "sub" / "MIGRATION_SUMMARY.md")

        found = {p.name for p in DirectoryScanner().scan(tmp_path, [])}

        assert found == {"agent.md", "UPPER.MD"}

    def test_custom_extensions(self, tmp_path: Path) -> None:
        _touch(tmp_path / "agent.md")
        _touch(tmp_path / "agent.markdown")
        scanner = DirectoryScanner(extensions=[".markdown"], ignore_names=[])

        found = [p.name for p in scanner.scan(tmp_path, [])]

        assert found == ["agent.markdown"]

    def test_missing_root_is_not_an_error(self, tmp_path: Path) -> None:
        diagnostics: list[Diagnostic] = []

        found = list(DirectoryScanner().scan(tmp_path / "does-not-exist", diagnostics))

        assert found == []
        assert [d.kind for d in diagnostics] == [DiagnosticKind.DIRECTORY_NOT_FOUND]

    def test_root_is_a_file(self, tmp_path: Path) -> None:
        file_root = _touch(tmp_path / "agent.md")
        diagnostics: list[Diagnostic] = []

        assert list(DirectoryScanner().scan(file_root, diagnostics)) == []
        assert diagnostics[0].kind is DiagnosticKind.DIRECTORY_NOT_FOUND

    def test_empty_root(self, tmp_path: Path) -> None:
        diagnostics: list[Diagnostic] = []

        assert list(DirectoryScanner().scan(tmp_path, diagnostics)) == []
        assert diagnostics == []

    def test_scan_is_lazy(self, tmp_path: Path) -> None:
        _touch(tmp_path / "a.md")

        iterator = DirectoryScanner().scan(tmp_path, [])

        assert next(iterator).name == "a.md"
        with pytest.raises(StopIteration):
            next(iterator)

    def test_depth_limit(self, tmp_path: Path) -> None:
        _touch(tmp_path / "one" / "shallow.md")
        _touch(tmp_path / "one" / "two" / "deep.md")
        diagnostics: list[Diagnostic] = []

        found = [p.name for p in DirectoryScanner(max_depth=1).scan(tmp_path, diagnostics)]

        assert found == ["shallow.md"]
        assert [d.kind for d in diagnostics] == [DiagnosticKind.DEPTH_LIMIT_EXCEEDED]
        assert diagnostics[0].source_path == tmp_path / "one" / "two"

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlinked_directories_are_not_followed(self, tmp_path: Path) -> None:
        root = tmp_path / "agents"
        _touch(root / "real" / "agent.md")
        (root / "loop").symlink_to(root, target_is_directory=True)

        found = list(DirectoryScanner().scan(root, []))

        assert [p.relative_to(root).as_posix() for p in found] == ["real/agent.md"]

    @pytest.mark.skipif(
        not hasattr(os, "geteuid") or os.geteuid() == 0,
        reason="permission bits are not enforced for root",
    )
    def test_unreadable_subdirectory_is_skipped(self, tmp_path: Path) -> None:
        _touch(tmp_path / "ok" / "agent.md")
        locked = tmp_path / "locked"
        _touch(locked / "hidden.md")
        locked.chmod(0)
        diagnostics: list[Diagnostic] = []
        try:
            found = [p.name for p in DirectoryScanner().scan(tmp_path, diagnostics)]
        finally:
            locked.chmod(0o755)

        assert found == ["agent.md"]
        assert [d.kind for d in diagnostics] == [DiagnosticKind.UNREADABLE_PATH]


class TestDeriveCategory:

    def test_top_level_segment(self) -> None:
        root = Path("/agents")
        assert derive_category(Path("/agents/analysis/code-review/a.md"), root) == "analysis"
        assert derive_category(Path("/agents/core/coder.md"), root) == "core"

    def test_file_at_root_is_uncategorized(self) -> None:
        assert derive_category(Path("/agents/a.md"), Path("/agents")) == "uncategorized"
