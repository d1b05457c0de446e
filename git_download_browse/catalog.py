"""Enumerate cloned repositories for browsing."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from . import git
from .fork import FORK_REMOTE
from .models import RepoEntry
from .process import Runner, Which, run_command

logger = logging.getLogger(__name__)

UNKNOWN_DEPTH = "?"

# Checked in order; the first label with a present marker wins.
LANGUAGE_MARKERS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("js/ts", ("package.json", "tsconfig.json")),
    ("python", ("pyproject.toml", "requirements.txt", "setup.cfg")),
    ("ruby", ("Gemfile",)),
    ("rust", ("Cargo.toml",)),
    ("lua", ("init.lua", "lua")),
    ("elixir", ("mix.exs",)),
    ("php", ("composer.json",)),
    ("java", ("pom.xml", "build.gradle", "build.gradle.kts")),
    ("csharp", ("*.csproj", "*.sln")),
    ("haskell", ("package.yaml", "cabal.project")),
    ("cpp", ("CMakeLists.txt", "Makefile")),
    ("perl", ("Makefile.PL",)),
    ("raku", ("META6.json",)),
    ("go", ("go.mod", "Taskfile.yaml")),
)

_GLOB_CHARS = set("*?[")


def marker_exists(repo_path: Path, marker: str) -> bool:
    if _GLOB_CHARS.intersection(marker):
        return any(True for _ in repo_path.glob(marker))
    return (repo_path / marker).exists()


def detect_language(repo_path: Path) -> str | None:
    for label, markers in LANGUAGE_MARKERS:
        try:
            if any(marker_exists(repo_path, marker) for marker in markers):
                return label
        except OSError:
            logger.debug("Could not check %s for %s markers", repo_path, label)
    return None


@dataclass
class RepoCatalog:
    root_dir: Path
    runner: Runner = run_command
    which: Which = shutil.which

    def depth(self, repo_path: Path) -> str:
        if not self.which("git"):
            return UNKNOWN_DEPTH
        try:
            count = git.commit_count(repo_path, runner=self.runner)
        except OSError:
            logger.debug("Could not count commits in %s", repo_path)
            return UNKNOWN_DEPTH
        return UNKNOWN_DEPTH if count is None else str(count)

    def forked(self, repo_path: Path) -> bool:
        if not self.which("git"):
            return False
        try:
            return git.remote_exists(repo_path, FORK_REMOTE, runner=self.runner)
        except OSError:
            logger.debug("Could not query remotes of %s", repo_path)
            return False

    def entry(self, repo_path: Path) -> RepoEntry:
        return RepoEntry(
            name=repo_path.name,
            path=repo_path.resolve(),
            language=detect_language(repo_path),
            depth=self.depth(repo_path),
            forked=self.forked(repo_path),
        )

    def list_repos(self) -> list[RepoEntry]:
        """List clones sorted case-insensitively by display string."""

        try:
            children = list(self.root_dir.iterdir())
        except OSError:
            logger.debug("Repos directory %s is not readable", self.root_dir)
            return []
        entries: list[RepoEntry] = []
        for child in children:
            try:
                if not child.is_dir():
                    continue
            except OSError:
                continue
            entries.append(self.entry(child))
        return sorted(entries, key=lambda entry: entry.display.lower())
