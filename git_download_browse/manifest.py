"""Read dependency names out of package.json manifests."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .exceptions import ManifestError

MANIFEST_NAME = "package.json"
DEPENDENCY_SECTIONS = ("dependencies", "devDependencies")

_KEY_PATTERN = re.compile(r'"([^"]+)"\s*:')


@dataclass(frozen=True)
class _KeySpan:
    key: str
    start: int
    end: int


def is_manifest(path: Path | None) -> bool:
    return path is not None and path.name == MANIFEST_NAME


def read_manifest(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise ManifestError(f"{path} does not exist")
    try:
        contents = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestError(f"Failed to read {path}: {exc}") from exc
    if not contents.strip():
        raise ManifestError(f"{path} is empty")
    try:
        decoded = json.loads(contents)
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Failed to decode {path}: {exc}") from exc
    if not isinstance(decoded, dict):
        raise ManifestError(f"{path} does not contain a JSON object")
    return decoded


def dependency_names(manifest: dict[str, Any]) -> list[str]:
    """Merge both dependency sections, deduplicated and sorted."""

    names: set[str] = set()
    for section in DEPENDENCY_SECTIONS:
        entries = manifest.get(section)
        if isinstance(entries, dict):
            names.update(entries)
    return sorted(names)


def package_names_from_package_json(path: Path | None = None) -> list[str]:
    return dependency_names(read_manifest(path or Path(MANIFEST_NAME)))


def dependency_name_at(text: str, line: int, column: int) -> str | None:
    """Return the dependency whose entry sits under the caret.

    ``line`` is 1-based and ``column`` a 0-based offset into that line. When
    the caret is outside every ``"key":`` entry on the line, the nearest one
    is used. Keys that are not declared dependencies yield ``None``.
    """

    lines = text.splitlines()
    if line < 1 or line > len(lines):
        return None
    current = lines[line - 1]
    spans = _key_spans(current)
    if not spans:
        return None

    cursor = column + 1
    selected: str | None = None
    best_distance: float = float("inf")
    for span in spans:
        if span.start <= cursor <= span.end:
            selected = span.key
            break
        distance = span.start - cursor if cursor < span.start else cursor - span.end
        if distance < best_distance:
            best_distance = distance
            selected = span.key
    if selected is None:
        return None

    try:
        decoded = json.loads(text)
    except json.JSONDecodeError:
        return None
    if not isinstance(decoded, dict):
        return None
    for section in DEPENDENCY_SECTIONS:
        entries = decoded.get(section)
        if isinstance(entries, dict) and selected in entries:
            return selected
    return None


def _key_spans(line: str) -> list[_KeySpan]:
    # Positions are 1-based; an entry runs to the next separator after its key.
    spans: list[_KeySpan] = []
    for match in _KEY_PATTERN.finditer(line):
        end = -1
        for separator in (",", "}", "]"):
            end = line.find(separator, match.end())
            if end != -1:
                break
        entry_end = end + 1 if end != -1 else len(line) + 1
        spans.append(_KeySpan(key=match.group(1), start=match.start() + 1, end=entry_end))
    return spans
