"""Read clipboard text through the platform's clipboard utilities."""

from __future__ import annotations

import shutil

from .process import Runner, Which, run_command

# The system clipboard first, then the X/Wayland primary selection.
CLIPBOARD_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("pbpaste",),
    ("wl-paste", "--no-newline"),
    ("xclip", "-selection", "clipboard", "-o"),
    ("xsel", "--clipboard", "--output"),
    ("wl-paste", "--no-newline", "--primary"),
    ("xclip", "-selection", "primary", "-o"),
    ("xsel", "--primary", "--output"),
)


def read_clipboard(*, runner: Runner = run_command, which: Which = shutil.which) -> str:
    """Return the first non-empty clipboard text, stripped, or ``""``."""

    for command in CLIPBOARD_COMMANDS:
        if not which(command[0]):
            continue
        result = runner(list(command))
        text = result.stdout.strip() if result.ok else ""
        if text:
            return text
    return ""
