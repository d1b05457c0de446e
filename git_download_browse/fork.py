"""Fork a cloned repository and check it out into a fresh worktree.

The fork remote is created with ``gh repo fork`` when missing; every run then
allocates the first free ``forked``/``forkedN`` branch and the first free
``<repo>-<branch>[-N]`` directory under the forked directory. These checks are
not atomic, so two simultaneous forks of one repository can pick the same
name; the second ``git worktree add`` then fails.
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from . import git
from .config import Config, ensure_directory
from .exceptions import (
    ForkCreationFailed,
    InvalidReference,
    NoOriginRemote,
    RepoNotFound,
    UnparsableOrigin,
    WorktreeCreationFailed,
)
from .models import CloneTarget, ForkResult, WorktreeAllocation
from .process import Runner, Which, error_text, require_executable, run_command
from .references import parse_reference

logger = logging.getLogger(__name__)

FORK_REMOTE = "fork"
ORIGIN_REMOTE = "origin"
BRANCH_BASE = "forked"


def branch_candidates(base: str = BRANCH_BASE):
    yield base
    index = 1
    while True:
        yield f"{base}{index}"
        index += 1


def worktree_candidates(root: Path, repo_dir_name: str, branch: str):
    base = f"{repo_dir_name}-{branch}"
    yield root / base
    index = 1
    while True:
        yield root / f"{base}-{index}"
        index += 1


@dataclass
class ForkWorkflow:
    config: Config
    runner: Runner = run_command
    which: Which = shutil.which
    notify: Callable[[str], None] = field(default=logger.info)

    def has_fork(self, repo_path: Path) -> bool:
        return git.remote_exists(repo_path, FORK_REMOTE, runner=self.runner)

    def resolve_repo_path(self, target: str | None = None, cwd: Path | None = None) -> Path:
        """Find the working tree an invocation refers to.

        ``target`` may be a directory inside a repository or a reference whose
        clone lives under the repos directory. Without it the current
        directory is searched upward.
        """

        resolved: Path | None = None
        text = (target or "").strip()
        if text:
            candidate = Path(text).expanduser()
            if candidate.is_dir():
                resolved = git.find_git_root(candidate)
            else:
                try:
                    ref = parse_reference(text)
                except InvalidReference:
                    ref = None
                if ref:
                    clone_path = CloneTarget.for_ref(ref, self.config.repos_dir).path
                    if clone_path.exists():
                        resolved = clone_path
        else:
            resolved = git.find_git_root(cwd or Path.cwd())
        if not resolved:
            raise RepoNotFound("Unable to determine repository path")
        return resolved.resolve()

    def next_branch(self, repo_path: Path) -> str:
        return next(
            candidate
            for candidate in branch_candidates()
            if not git.branch_exists(repo_path, candidate, runner=self.runner)
        )

    def next_worktree_path(self, repo_path: Path, branch: str) -> Path:
        root = ensure_directory(self.config.forked_dir)
        candidate = next(path for path in worktree_candidates(root, repo_path.name, branch) if not path.exists())
        return candidate.resolve()

    def require_tools(self) -> None:
        require_executable("git", "git is not available", which=self.which)
        require_executable("gh", "gh command is required to fork repositories", which=self.which)

    def run(self, target: str | None = None, cwd: Path | None = None) -> ForkResult:
        """Check tools, resolve ``target`` and fork it."""

        self.require_tools()
        return self.fork(self.resolve_repo_path(target, cwd))

    def fork(self, repo_path: Path) -> ForkResult:
        self.require_tools()

        origin = git.remote_url(repo_path, ORIGIN_REMOTE, runner=self.runner)
        if not origin:
            raise NoOriginRemote("Repository does not have an origin remote")
        try:
            ref = parse_reference(origin)
        except InvalidReference as exc:
            raise UnparsableOrigin("Unable to parse origin remote for forking") from exc

        created = False
        if not self.has_fork(repo_path):
            result = self.runner(
                ["gh", "repo", "fork", ref.slug, "--clone=false", "--remote", "--remote-name", FORK_REMOTE],
                cwd=repo_path,
            )
            if not result.ok:
                raise ForkCreationFailed(error_text(result, "gh repo fork failed"), result.args, result.returncode)
            created = True
            self.notify(f"Fork remote added for {ref.slug}")

        branch = self.next_branch(repo_path)
        worktree_path = self.next_worktree_path(repo_path, branch)
        result = git.worktree_add_new(repo_path, worktree_path, branch, runner=self.runner)
        if not result.ok:
            raise WorktreeCreationFailed(
                error_text(result, "Failed to create worktree"), result.args, result.returncode
            )
        allocation = WorktreeAllocation(branch_name=branch, worktree_path=worktree_path)
        self.notify(f"Created worktree {worktree_path} for branch {branch}")

        push = git.push_upstream(worktree_path, FORK_REMOTE, branch, runner=self.runner)
        push_error = None
        if push.ok:
            self.notify(f"Pushed {branch} to fork remote")
        else:
            # The worktree already exists, so a failed push only warns.
            push_error = error_text(push, f"git push to {FORK_REMOTE} failed")
            logger.debug("Push failed: %s", push_error)
        return ForkResult(ref=ref, allocation=allocation, fork_remote_created=created, push_error=push_error)
