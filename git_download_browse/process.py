"""Synchronous wrapper shared by every external tool invocation."""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Optional, Protocol

from .exceptions import MissingDependency

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    args: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class Runner(Protocol):
    def __call__(self, args: Iterable[str], *, cwd: Optional[Path] = None) -> CommandResult: ...


Which = Callable[[str], Optional[str]]


def run_command(args: Iterable[str], *, cwd: Optional[Path] = None) -> CommandResult:
    """Run a command to completion and capture its output.

    Missing executables are reported as exit code 127, and any other
    ``OSError`` (for example an unreadable ``cwd``) as exit code 126, so that
    every call site handles failure the same way.
    """

    cmd = [str(arg) for arg in args]
    logger.debug("Running command: %s", shlex.join(cmd))
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            capture_output=True,
            text=True,
            check=False,
        )
    except FileNotFoundError as exc:
        return CommandResult(args=cmd, returncode=127, stdout="", stderr=str(exc))
    except OSError as exc:
        logger.debug("Could not start %s: %s", cmd[0], exc)
        return CommandResult(args=cmd, returncode=126, stdout="", stderr=str(exc))
    if proc.returncode != 0:
        logger.debug("Command exited with %s: %s", proc.returncode, proc.stderr.strip())
    return CommandResult(args=cmd, returncode=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)


def error_text(result: CommandResult, fallback: str) -> str:
    """Prefer stderr, then stdout, then ``fallback``."""

    for stream in (result.stderr, result.stdout):
        message = (stream or "").strip()
        if message:
            return message
    return fallback


def require_executable(name: str, message: str | None = None, *, which: Which = shutil.which) -> str:
    path = which(name)
    if not path:
        raise MissingDependency(message or f"{name} is not available")
    return path
