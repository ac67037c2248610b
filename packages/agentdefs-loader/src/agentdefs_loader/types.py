"""Agent definition types for the markdown agent-definition system."""
from __future__ import annotations

import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from pathlib import Path

# Front-matter values after normalisation: YAML scalars, tuples and
# read-only mappings, so a built snapshot cannot be changed in place.
MetadataValue = Union[
    str,
    int,
    float,
    bool,
    None,
    tuple["MetadataValue", ...],
    Mapping[str, "MetadataValue"],
]

DEFAULT_CATEGORY = "uncategorized"


def _empty_mapping() -> Mapping:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True)
class AgentDefinition:
    """A parsed agent definition document.

    ``name`` and ``description`` come from the front-matter header; every
    other header field is passed through in ``metadata``.  ``category`` is
    derived from where the file sits below the scan root and is left empty
    by the parser.
    """

    name: str
    description: str
    source_path: Path
    category: str = ""
    body: str = ""
    metadata: Mapping[str, MetadataValue] = field(default_factory=_empty_mapping)
    raw_text: str = field(default="", repr=False)

    @property
    def capabilities(self) -> list[str]:
        return _as_str_list(self.metadata.get("capabilities"))

    @property
    def tools(self) -> list[str]:
        """Declared tools; a comma-separated string is split."""
        value = self.metadata.get("tools")
        if isinstance(value, str):
            return [part.strip() for part in value.split(",") if part.strip()]
        return _as_str_list(value)

    @property
    def color(self) -> str | None:
        return self._optional_str("color")

    @property
    def priority(self) -> str | None:
        return self._optional_str("priority")

    @property
    def model(self) -> str | None:
        return self._optional_str("model")

    def _optional_str(self, key: str) -> str | None:
        value = self.metadata.get(key)
        if value is None or isinstance(value, (tuple, Mapping)):
            return None
        return str(value)


class DiagnosticKind(enum.Enum):
    DIRECTORY_NOT_FOUND = "directory_not_found"
    UNREADABLE_PATH = "unreadable_path"
    DEPTH_LIMIT_EXCEEDED = "depth_limit_exceeded"
    MALFORMED_HEADER = "malformed_header"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    DUPLICATE_NAME = "duplicate_name"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A non-fatal problem recorded while scanning or parsing."""
    kind: DiagnosticKind
    message: str
    source_path: Path | None = None


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Outcome of parsing one document: a definition or a diagnostic."""
    definition: AgentDefinition | None = None
    diagnostic: Diagnostic | None = None

    @property
    def ok(self) -> bool:
        return self.definition is not None


@dataclass(frozen=True, slots=True)
class RegistrySnapshot:
    """An immutable, fully-built result of one scan and parse pass."""

    root: str
    loaded_at: float
    definitions: Mapping[str, AgentDefinition] = field(default_factory=_empty_mapping)
    categories: Mapping[str, tuple[str, ...]] = field(default_factory=_empty_mapping)
    diagnostics: tuple[Diagnostic, ...] = ()

    @classmethod
    def build(
        cls,
        root: str,
        loaded_at: float,
        definitions: list[AgentDefinition],
        diagnostics: list[Diagnostic],
    ) -> RegistrySnapshot:
        """Assemble a snapshot from already de-duplicated definitions."""
        by_name = {d.name: d for d in definitions}
        grouped: dict[str, list[str]] = {}
        for d in definitions:
            grouped.setdefault(d.category, []).append(d.name)
        return cls(
            root=root,
            loaded_at=loaded_at,
            definitions=MappingProxyType(by_name),
            categories=MappingProxyType(
                {cat: tuple(names) for cat, names in grouped.items()}
            ),
            diagnostics=tuple(diagnostics),
        )

    @classmethod
    def empty(cls, root: str, loaded_at: float) -> RegistrySnapshot:
        return cls(root=root, loaded_at=loaded_at)


def _as_str_list(value: MetadataValue) -> list[str]:
    """Coerce a value to a list of strings, or return empty list."""
    if value is None:
        return []
    if isinstance(value, tuple):
        return [str(item) for item in value]
    return [str(value)]
