"""Thin wrappers around git CLI commands."""

from __future__ import annotations

from pathlib import Path

from .process import CommandResult, Runner, run_command


def run_git(args: list[str], *, cwd: Path | None = None, runner: Runner = run_command) -> CommandResult:
    return runner(["git", *args], cwd=cwd)


def remote_url(path: Path, remote: str = "origin", *, runner: Runner = run_command) -> str | None:
    proc = run_git(["remote", "get-url", remote], cwd=path, runner=runner)
    if not proc.ok:
        return None
    url = proc.stdout.strip().splitlines()
    return url[0] if url and url[0] else None


def remote_exists(path: Path, remote: str, *, runner: Runner = run_command) -> bool:
    return remote_url(path, remote, runner=runner) is not None


def branch_exists(path: Path, branch: str, *, runner: Runner = run_command) -> bool:
    proc = run_git(["show-ref", "--verify", "--quiet", f"refs/heads/{branch}"], cwd=path, runner=runner)
    return proc.ok


def commit_count(path: Path, *, runner: Runner = run_command) -> int | None:
    proc = run_git(["-C", str(path), "rev-list", "--count", "HEAD"], runner=runner)
    if not proc.ok:
        return None
    lines = proc.stdout.strip().splitlines()
    if not lines:
        return None
    try:
        return int(lines[0])
    except ValueError:
        return None


def clone_shallow(url: str, target: Path, *, runner: Runner = run_command) -> CommandResult:
    return run_git(["clone", "--depth=1", url, str(target)], runner=runner)


def worktree_add_new(path: Path, target: Path, branch: str, *, runner: Runner = run_command) -> CommandResult:
    return run_git(["worktree", "add", "-b", branch, str(target)], cwd=path, runner=runner)


def push_upstream(path: Path, remote: str, branch: str, *, runner: Runner = run_command) -> CommandResult:
    return run_git(["push", "--set-upstream", remote, branch], cwd=path, runner=runner)


def find_git_root(start: Path) -> Path | None:
    """Walk upward from ``start`` to the first directory holding ``.git``."""

    resolved = start.expanduser().resolve()
    for candidate in (resolved, *resolved.parents):
        if (candidate / ".git").exists():
            return candidate
    return None
