"""Load runtime configuration from the environment and CLI overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from .exceptions import DirectoryError

ENV_PREFIX = "GIT_DOWNLOAD_BROWSE_"
REPOS_DIR_ENV = f"{ENV_PREFIX}REPOS_DIR"
FORKED_DIR_ENV = f"{ENV_PREFIX}FORKED_DIR"

DEFAULT_REPOS_DIR = "~/git"
DEFAULT_FORKED_DIR = "~/forked"
DEFAULT_KEYMAPS: dict[str, str] = {
    "browse": "<leader>gv",
    "clone": "<leader>gc",
    "fork": "<leader>gk",
}
ACTIONS = tuple(DEFAULT_KEYMAPS)


@dataclass(frozen=True)
class Config:
    """Explicit settings handed to every component."""

    repos_dir: Path
    forked_dir: Path
    keymaps: Mapping[str, str | None] = field(default_factory=lambda: dict(DEFAULT_KEYMAPS))

    def enabled_keymaps(self) -> dict[str, str]:
        return {action: key for action, key in self.keymaps.items() if key}


def load_config(
    repos_dir: Path | None = None,
    forked_dir: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    env = os.environ if environ is None else environ
    return Config(
        repos_dir=_resolve_dir(repos_dir, env.get(REPOS_DIR_ENV), DEFAULT_REPOS_DIR),
        forked_dir=_resolve_dir(forked_dir, env.get(FORKED_DIR_ENV), DEFAULT_FORKED_DIR),
        keymaps=_load_keymaps(env),
    )


def keymap_env_var(action: str) -> str:
    return f"{ENV_PREFIX}KEY_{action.upper()}"


def ensure_directory(path: Path) -> Path:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryError(f"Could not create directory {path}: {exc}") from exc
    return path


def _resolve_dir(override: Path | None, raw: str | None, default: str) -> Path:
    if override:
        return override.expanduser()
    return Path(raw or default).expanduser()


def _load_keymaps(env: Mapping[str, str]) -> dict[str, str | None]:
    keymaps: dict[str, str | None] = {}
    for action in ACTIONS:
        # An empty value disables the binding.
        raw = env.get(keymap_env_var(action), DEFAULT_KEYMAPS[action])
        keymaps[action] = raw.strip() or None
    return keymaps
