from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from agentdefs_core.errors import ConfigError
from agentdefs_core.logging import get_logger

logger = get_logger("config")


def _load_toml(path: Path) -> dict:
    """Load a TOML file, returning empty dict if missing or unreadable."""
    if not path.exists():
        return {}
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        logger.warning("Ignoring unreadable config file %s", path, exc_info=True)
        return {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Merge override into base (1 level deep for TOML sections)."""
    merged = dict(base)
    for key, val in override.items():
        if (
            key in merged
            and isinstance(merged[key], dict)
            and isinstance(val, dict)
        ):
            merged[key] = {**merged[key], **val}
        else:
            merged[key] = val
    return merged


@dataclass(frozen=True, slots=True)
class LoaderConfig:
    agents_dir: str = ".claude/agents"
    cache_expiry_seconds: float = 60.0
    max_depth: int = 32
    extensions: list[str] = field(default_factory=lambda: [".md"])
    ignore_names: list[str] = field(
        default_factory=lambda: ["README.md", "MIGRATION_SUMMARY.md"]
    )


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    level: str = "INFO"
    json: bool = False


@dataclass(frozen=True, slots=True)
class AgentDefsConfig:
    """Top-level configuration, parsed from agentdefs.toml."""
    project_dir: Path = field(default_factory=Path.cwd)
    loader: LoaderConfig = field(default_factory=LoaderConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def agents_path(self) -> Path:
        """The agents directory, resolved against the project directory."""
        path = Path(self.loader.agents_dir).expanduser()
        if not path.is_absolute():
            path = self.project_dir / path
        return path

    @classmethod
    def from_toml(
        cls, path: Path | str = "agentdefs.toml"
    ) -> AgentDefsConfig:
        path = Path(path)
        raw = _load_toml(path)
        return cls._from_raw(raw, project_dir=path.parent)

    @classmethod
    def load(
        cls, project_dir: Path | str | None = None
    ) -> AgentDefsConfig:
        """Load config with global → project layering.

        Resolution order (later wins):
        1. Built-in defaults
        2. ~/.agentdefs/config.toml (global)
        3. .agentdefs/config.toml or agentdefs.toml (project)
        """
        global_path = Path.home() / ".agentdefs" / "config.toml"

        project_dir = (
            Path.cwd() if project_dir is None else Path(project_dir)
        )

        # Project config: .agentdefs/config.toml takes priority
        project_path = project_dir / ".agentdefs" / "config.toml"
        if not project_path.exists():
            project_path = project_dir / "agentdefs.toml"

        global_raw = _load_toml(global_path)
        project_raw = _load_toml(project_path)
        merged = _deep_merge(global_raw, project_raw)

        return cls._from_raw(merged, project_dir=project_dir)

    @classmethod
    def _from_raw(cls, raw: dict, project_dir: Path) -> AgentDefsConfig:
        """Build AgentDefsConfig from a raw TOML dict."""
        loader_raw = raw.get("loader", {})
        logging_raw = raw.get("logging", {})

        def _pick(section: dict, dc: type) -> dict:
            fields = dc.__dataclass_fields__
            return {
                k: v for k, v in section.items() if k in fields
            }

        loader = LoaderConfig(**_pick(loader_raw, LoaderConfig))
        if loader.cache_expiry_seconds < 0:
            msg = (
                "loader.cache_expiry_seconds must be non-negative, "
                f"got {loader.cache_expiry_seconds}"
            )
            raise ConfigError(msg)
        if loader.max_depth < 0:
            msg = f"loader.max_depth must be non-negative, got {loader.max_depth}"
            raise ConfigError(msg)

        return cls(
            project_dir=project_dir,
            loader=loader,
            logging=LoggingConfig(**_pick(logging_raw, LoggingConfig)),
        )
