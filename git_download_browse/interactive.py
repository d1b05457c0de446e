"""Interactive prompt helpers built on InquirerPy."""

from __future__ import annotations

import sys
from typing import Any, Iterable, Sequence

from InquirerPy import inquirer
from InquirerPy.base.control import Choice

from .exceptions import UserAbort, ValidationError
from .models import RepoEntry, Resolution

REFERENCE_HINT = "Use https://github.com/user/repo or user/repo"


def _ensure_tty() -> None:
    if not sys.stdin.isatty():
        raise ValidationError(
            "Interactive mode requires a TTY. Pass the repository as an argument to run non-interactively."
        )


def _execute(prompt) -> Any:
    try:
        return prompt.execute()
    except KeyboardInterrupt as exc:
        raise UserAbort("Cancelled") from exc


def fuzzy_select(message: str, choices: Sequence[Choice | str]) -> Any:
    _ensure_tty()
    return _execute(inquirer.fuzzy(message=message, choices=choices))


def text_input(message: str, default: str = "") -> str:
    _ensure_tty()
    return (_execute(inquirer.text(message=message, default=default)) or "").strip()


def confirm(message: str, default: bool = True) -> bool:
    _ensure_tty()
    return bool(_execute(inquirer.confirm(message=message, default=default)))


def prompt_reference() -> str:
    return text_input(f"repo> ({REFERENCE_HINT})")


def confirm_clone(resolution: Resolution) -> bool:
    ref = resolution.ref
    message = f"Clone {ref.slug} ({resolution.source_label}, {ref.canonical_url})?"
    return confirm(message)


def build_repo_choices(entries: Iterable[RepoEntry]) -> list[Choice]:
    return [Choice(value=str(entry.path), name=entry.display) for entry in entries]
