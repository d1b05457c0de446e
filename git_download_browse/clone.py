"""Shallow-clone a resolved reference into the repos directory."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from . import git
from .config import ensure_directory
from .exceptions import AlreadyExists, CloneFailed
from .models import CloneTarget, RepoRef
from .process import Runner, Which, error_text, require_executable, run_command

logger = logging.getLogger(__name__)


@dataclass
class CloneExecutor:
    root_dir: Path
    runner: Runner = run_command
    which: Which = shutil.which
    notify: Callable[[str], None] = field(default=logger.info)

    def target_for(self, ref: RepoRef) -> Path:
        return CloneTarget.for_ref(ref, self.root_dir).path

    def clone(self, ref: RepoRef) -> Path:
        require_executable("git", "git is not available", which=self.which)
        target = self.target_for(ref)
        if target.exists():
            raise AlreadyExists(target)
        ensure_directory(self.root_dir)

        self.notify(f"Cloning {ref.canonical_url}...")
        result = git.clone_shallow(ref.canonical_url, target, runner=self.runner)
        if not result.ok:
            raise CloneFailed(error_text(result, "git clone failed"), result.args, result.returncode)
        self.notify(f"Cloned into {target}")
        return target
