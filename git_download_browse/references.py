"""Parse user-supplied repository references into ``RepoRef`` values."""

from __future__ import annotations

import re

from .exceptions import InvalidReference
from .models import RepoRef

GITHUB_HOST = "github.com"

# Ordered: first match wins.
_REFERENCE_PATTERNS = (
    re.compile(r"^https://github\.com/(?P<owner>[^/]+)/(?P<name>[^/]+)\.git/?$"),
    re.compile(r"^https://github\.com/(?P<owner>[^/]+)/(?P<name>[^/]+)/?$"),
    re.compile(r"^(?P<owner>[^/]+)/(?P<name>[^/]+)\.git$"),
    re.compile(r"^(?P<owner>[^/]+)/(?P<name>[^/]+)$"),
)

_HOST_PREFIXES = (
    "git@github.com:",
    "ssh://git@github.com/",
    "github:",
    "git://github.com/",
    "https://github.com/",
    "http://github.com/",
)

INVALID_REFERENCE_MESSAGE = "Invalid repository. Use https://github.com/user/repo or user/repo"


def canonical_url(owner: str, name: str) -> str:
    return f"https://{GITHUB_HOST}/{owner}/{name}"


def normalize(value: str) -> RepoRef:
    """Parse a GitHub https URL or an ``owner/name`` slug."""

    text = value or ""
    for pattern in _REFERENCE_PATTERNS:
        match = pattern.match(text)
        if match:
            break
    else:
        raise InvalidReference(INVALID_REFERENCE_MESSAGE)
    owner = match.group("owner")
    name = _strip_git_suffix(match.group("name"))
    if not owner or not name:
        raise InvalidReference(INVALID_REFERENCE_MESSAGE)
    return RepoRef(owner=owner, name=name, canonical_url=canonical_url(owner, name))


def normalize_host_url(url: str) -> str | None:
    """Rewrite SSH, ``github:``, ``git://`` and ``git+`` URLs to https.

    Returns ``None`` for other hosts, unrecognised schemes and paths that are
    not exactly ``owner/name``.
    """

    text = (url or "").strip()
    if text.startswith("git+"):
        text = text[len("git+"):]
    for prefix in _HOST_PREFIXES:
        if text.startswith(prefix):
            remainder = text[len(prefix):]
            break
    else:
        return None
    remainder = _strip_git_suffix(remainder.rstrip("/"))
    segments = remainder.split("/")
    if len(segments) != 2 or not all(segments):
        return None
    return f"https://{GITHUB_HOST}/{remainder}"


def parse_reference(value: str) -> RepoRef:
    """Accept any host-specific URL form as well as plain slugs."""

    text = (value or "").strip()
    rewritten = normalize_host_url(text)
    if rewritten:
        return normalize(rewritten)
    if ":" in text:
        # URL-like input for another host or with a deeper path.
        raise InvalidReference(INVALID_REFERENCE_MESSAGE)
    return normalize(text)


def _strip_git_suffix(value: str) -> str:
    if value.endswith(".git"):
        return value[: -len(".git")]
    return value
