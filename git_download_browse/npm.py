"""Resolve npm package names to GitHub repositories via ``npm view``."""

from __future__ import annotations

import json
import shutil
from typing import Any

from .exceptions import ResolutionError
from .process import Runner, Which, error_text, require_executable, run_command
from .references import normalize_host_url


def repository_url_from_metadata(decoded: Any) -> str | None:
    """Pick a GitHub URL out of the ``repository`` field of npm metadata.

    The field is either a bare string, an object with ``url``/``path``, or a
    monorepo object with ``type``, ``user`` and ``directory``.
    """

    if isinstance(decoded, str):
        return normalize_host_url(decoded)
    if not isinstance(decoded, dict):
        return None
    url = None
    if decoded.get("url"):
        url = normalize_host_url(str(decoded["url"]))
    elif decoded.get("path"):
        url = normalize_host_url(str(decoded["path"]))
    if not url and decoded.get("type") == "git" and decoded.get("directory") and decoded.get("user"):
        url = normalize_host_url(f"https://github.com/{decoded['user']}/{decoded['directory']}")
    return url


def package_name_to_github_url(
    package_name: str,
    *,
    runner: Runner = run_command,
    which: Which = shutil.which,
) -> str:
    if not package_name:
        raise ResolutionError("Package name must be a non-empty string")
    require_executable("npm", "npm is not available", which=which)

    result = runner(["npm", "view", package_name, "repository", "--json"])
    if not result.ok:
        raise ResolutionError(error_text(result, f"npm view {package_name} failed"))

    raw = result.stdout.strip()
    try:
        url = repository_url_from_metadata(json.loads(raw))
    except json.JSONDecodeError:
        url = normalize_host_url(raw)
    if not url:
        raise ResolutionError(f"Could not determine GitHub URL for {package_name}")
    return url
