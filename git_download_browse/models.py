"""Dataclasses shared across modules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

CLONE_DIR_SEPARATOR = "---"


@dataclass(frozen=True)
class RepoRef:
    """A hosted repository identified by owner and name."""

    owner: str
    name: str
    canonical_url: str

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class CloneTarget:
    """Location a reference is cloned into under the repos directory."""

    root_dir: Path
    owner: str
    name: str

    @classmethod
    def for_ref(cls, ref: RepoRef, root_dir: Path) -> "CloneTarget":
        return cls(root_dir=root_dir, owner=ref.owner, name=ref.name)

    @property
    def path(self) -> Path:
        return self.root_dir / f"{self.owner}{CLONE_DIR_SEPARATOR}{self.name}"


@dataclass(frozen=True)
class WorktreeAllocation:
    branch_name: str
    worktree_path: Path


@dataclass(frozen=True)
class ForkResult:
    """Outcome of a fork invocation."""

    ref: RepoRef
    allocation: WorktreeAllocation
    fork_remote_created: bool
    push_error: str | None = None

    @property
    def pushed(self) -> bool:
        return self.push_error is None


class Source(str, Enum):
    ARGUMENT = "argument"
    DETECTED = "detected"
    CLIPBOARD = "clipboard"
    MANUAL = "manual"


@dataclass(frozen=True)
class Resolution:
    """A resolved reference plus where it came from."""

    ref: RepoRef
    source: Source
    detector: str | None = None

    @property
    def provisional(self) -> bool:
        return self.source is not Source.ARGUMENT

    @property
    def source_label(self) -> str:
        if self.source is Source.ARGUMENT:
            return "Command argument"
        if self.source is Source.CLIPBOARD:
            return "Clipboard content"
        if self.source is Source.MANUAL:
            return "Manual input"
        if self.detector:
            return f"Detected from {self.detector}"
        return "Detected from current file"


@dataclass(frozen=True)
class EditorContext:
    """The document the user is editing and the caret position inside it.

    ``line`` is 1-based, ``column`` is a 0-based character offset.
    """

    file: Path | None = None
    line: int | None = None
    column: int | None = None


@dataclass(frozen=True)
class RepoEntry:
    """A cloned repository as shown by the catalog."""

    name: str
    path: Path
    language: str | None
    depth: str
    forked: bool

    @property
    def marker(self) -> str:
        return "F" if self.forked else " "

    @property
    def display(self) -> str:
        return f"{self.marker} {self.language or '':<6} {self.depth:>6} {self.name}"
