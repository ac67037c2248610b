"""Agent definition parser: extracts YAML frontmatter and the markdown body."""
from __future__ import annotations

import datetime
import re
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import yaml
from agentdefs_core.errors import (
    MalformedHeaderError,
    MissingRequiredFieldError,
)

from agentdefs_loader.types import (
    AgentDefinition,
    Diagnostic,
    DiagnosticKind,
    MetadataValue,
    ParseResult,
)

if TYPE_CHECKING:
    from pathlib import Path

_REQUIRED_FIELDS = ("name", "description")

_OPENING = re.compile(r"---[ \t]*\r?\n")
_CLOSING = re.compile(r"^---[ \t]*(?:\r?\n|\Z)", re.MULTILINE)


def parse_agent_text(text: str, source_path: Path) -> ParseResult:
    """Parse raw document text without raising for content problems.

    A missing or unparsable header yields a ``MALFORMED_HEADER``
    diagnostic; a header without ``name`` or ``description`` yields
    ``MISSING_REQUIRED_FIELD``.  On success the returned definition has an
    empty ``category``, which the caller derives from the scan root.
    """
    try:
        definition = _parse(text, source_path)
    except MalformedHeaderError as exc:
        return ParseResult(diagnostic=Diagnostic(
            DiagnosticKind.MALFORMED_HEADER, str(exc), source_path,
        ))
    except MissingRequiredFieldError as exc:
        return ParseResult(diagnostic=Diagnostic(
            DiagnosticKind.MISSING_REQUIRED_FIELD, str(exc), source_path,
        ))
    return ParseResult(definition=definition)


def parse_agent_md(path: Path) -> AgentDefinition:
    """Parse an agent definition file into an AgentDefinition.

    The file format is YAML frontmatter delimited by ``---`` lines, followed
    by a markdown body.

    Args:
        path: Path to the markdown file.

    Returns:
        The parsed AgentDefinition (``category`` left empty).

    Raises:
        MalformedHeaderError: If the frontmatter is absent or unparsable.
        MissingRequiredFieldError: If ``name`` or ``description`` is missing.
        FileNotFoundError: If the file does not exist.
    """
    if not path.exists():
        msg = f"Agent definition not found: {path}"
        raise FileNotFoundError(msg)

    text = path.read_text(encoding="utf-8")
    return _parse(text, path)


def _parse(text: str, path: Path) -> AgentDefinition:
    frontmatter, body = _split_frontmatter(text, path)
    meta = _parse_yaml(frontmatter, path)

    for key in _REQUIRED_FIELDS:
        value = meta.get(key)
        if not isinstance(value, str) or not value.strip():
            msg = f"Agent definition missing required field '{key}': {path}"
            raise MissingRequiredFieldError(msg, path)

    extra = {
        str(k): _normalize(v) for k, v in meta.items() if k not in _REQUIRED_FIELDS
    }

    return AgentDefinition(
        name=meta["name"].strip(),
        description=meta["description"].strip(),
        source_path=path,
        body=body.strip(),
        metadata=MappingProxyType(extra),
        raw_text=text,
    )


def _split_frontmatter(text: str, path: Path) -> tuple[str, str]:
    """Split text into YAML frontmatter and markdown body.

    The frontmatter is expected to be enclosed between two ``---`` lines
    at the start of the file.

    Returns:
        A (frontmatter, body) tuple.
    """
    stripped = text.lstrip("\ufeff").lstrip("\r\n")
    opening = _OPENING.match(stripped)
    if opening is None:
        msg = f"Agent definition missing YAML frontmatter (no opening '---'): {path}"
        raise MalformedHeaderError(msg, path)

    rest = stripped[opening.end():]
    closing = _CLOSING.search(rest)
    if closing is None:
        msg = f"Agent definition missing closing '---' for frontmatter: {path}"
        raise MalformedHeaderError(msg, path)

    return rest[:closing.start()], rest[closing.end():]


def _parse_yaml(frontmatter: str, path: Path) -> dict[Any, Any]:
    """Parse the YAML frontmatter string using safe_load.

    Well-formed YAML can still fail to construct, e.g. an out-of-range
    implicit date or a bad explicit tag; PyYAML raises plain
    ValueError/TypeError/AttributeError for those.

    Raises:
        MalformedHeaderError: If the YAML is malformed or not a mapping.
    """
    try:
        result = yaml.safe_load(frontmatter)
    except (yaml.YAMLError, ValueError, TypeError, AttributeError) as exc:
        msg = f"Invalid YAML frontmatter in {path}: {exc}"
        raise MalformedHeaderError(msg, path) from exc

    if not isinstance(result, dict):
        msg = f"YAML frontmatter must be a mapping, got {type(result).__name__}: {path}"
        raise MalformedHeaderError(msg, path)

    return result


def _normalize(value: Any) -> MetadataValue:
    """Map a YAML value onto the metadata variant types."""
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    if isinstance(value, (list, tuple, set)):
        return tuple(_normalize(item) for item in value)
    if isinstance(value, dict):
        return MappingProxyType({str(k): _normalize(v) for k, v in value.items()})
    return str(value)

