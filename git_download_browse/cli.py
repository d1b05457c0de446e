"""Typer-based CLI for git-download-browse."""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from . import __version__
from .catalog import RepoCatalog
from .clipboard import read_clipboard
from .clone import CloneExecutor
from .config import Config, keymap_env_var, load_config
from .exceptions import DownloadBrowseError, Severity, ValidationError
from .fork import ForkWorkflow
from .interactive import build_repo_choices, confirm_clone, fuzzy_select, prompt_reference
from .manifest import MANIFEST_NAME, package_names_from_package_json
from .models import EditorContext
from .resolver import ResolverChain, package_json_detector

app = typer.Typer(help="Clone, browse and fork GitHub repositories")
console = Console(stderr=True)
output = Console()

_SEVERITY_STYLES = {
    Severity.INFO: "cyan",
    Severity.WARNING: "yellow",
    Severity.ERROR: "red",
}

_KEYMAP_COMMANDS = {
    "browse": (
        ":let g:git_download_browse_selection = tempname()"
        "<Bar>execute '!git-download-browse browse --output ' . shellescape(g:git_download_browse_selection, 1)"
        "<Bar>if filereadable(g:git_download_browse_selection)"
        "<Bar>execute 'lcd ' . fnameescape(readfile(g:git_download_browse_selection)[0])"
        "<Bar>endif<CR>"
    ),
    "clone": (
        ":execute '!git-download-browse clone --file ' . shellescape(expand('%:p'), 1)"
        " . ' --line ' . line('.') . ' --column ' . col('.')<CR>"
    ),
    "fork": ":execute '!git-download-browse fork ' . shellescape(expand('%:p:h'), 1)<CR>",
}


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    repos_dir: Path | None = typer.Option(
        None,
        "--repos-dir",
        help="Directory holding clones (default $GIT_DOWNLOAD_BROWSE_REPOS_DIR or ~/git).",
        file_okay=False,
    ),
    forked_dir: Path | None = typer.Option(
        None,
        "--forked-dir",
        help="Directory holding fork worktrees (default $GIT_DOWNLOAD_BROWSE_FORKED_DIR or ~/forked).",
        file_okay=False,
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show additional debug information."),
    version: bool = typer.Option(
        False, "--version", callback=_print_version, is_eager=True, help="Show the version and exit."
    ),
) -> None:
    configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config"] = load_config(repos_dir, forked_dir)


@app.command(help="Clone a repository as <repos-dir>/<owner>---<name>")
def clone(
    ctx: typer.Context,
    repo: str | None = typer.Argument(None, help="GitHub URL or owner/name. Detected when omitted."),
    file: Path | None = typer.Option(None, "--file", help="File open in the editor."),
    line: int | None = typer.Option(None, "--line", min=1, help="Caret line (1-based)."),
    column: int = typer.Option(1, "--column", min=1, help="Caret column (1-based)."),
) -> None:
    config = _config(ctx)
    chain = ResolverChain(
        detectors=[package_json_detector(notify=notify)],
        clipboard=read_clipboard,
        prompt=prompt_reference,
        confirm=confirm_clone,
        warn=lambda message: notify(message, Severity.WARNING),
    )
    context = EditorContext(file=file, line=line, column=column - 1)
    with _reported():
        resolution = chain.resolve_confirmed(repo, context)
        CloneExecutor(config.repos_dir, notify=notify).clone(resolution.ref)


@app.command(help="Pick a cloned repository and print its path")
def browse(
    ctx: typer.Context,
    output_file: Path | None = typer.Option(
        None,
        "--output",
        dir_okay=False,
        help="Write the selected path to this file instead of stdout.",
    ),
) -> None:
    config = _config(ctx)
    with _reported():
        entries = RepoCatalog(config.repos_dir).list_repos()
        if not entries:
            raise ValidationError(f"No repositories found in {config.repos_dir}")
        selection = fuzzy_select("Git Repos", build_repo_choices(entries))
        if output_file is None:
            typer.echo(str(selection))
            return
        try:
            output_file.expanduser().write_text(f"{selection}\n", encoding="utf-8")
        except OSError as exc:
            raise ValidationError(f"Could not write selection to {output_file}: {exc}") from exc


@app.command(help="List cloned repositories")
def ls(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Output JSON for scripting."),
) -> None:
    config = _config(ctx)
    entries = RepoCatalog(config.repos_dir).list_repos()
    if as_json:
        data = [
            {
                "name": entry.name,
                "path": str(entry.path),
                "language": entry.language,
                "depth": entry.depth,
                "forked": entry.forked,
            }
            for entry in entries
        ]
        typer.echo(json.dumps(data, indent=2))
        return
    if not entries:
        console.print("No repositories found.")
        return
    table = Table(show_header=True, header_style="bold")
    table.add_column("F")
    table.add_column("Language")
    table.add_column("Depth", justify="right")
    table.add_column("Name")
    for entry in entries:
        table.add_row(entry.marker, entry.language or "", entry.depth, entry.name)
    output.print(table)


@app.command(help="Fork a repository and create a worktree on a new branch")
def fork(
    ctx: typer.Context,
    target: str | None = typer.Argument(
        None,
        help="Repository directory or owner/name of a clone. Defaults to the current repository.",
    ),
) -> None:
    config = _config(ctx)
    workflow = ForkWorkflow(config, notify=notify)
    with _reported():
        result = workflow.run(target)
        if result.push_error:
            notify(result.push_error, Severity.WARNING)
        typer.echo(str(result.allocation.worktree_path))


@app.command(help="List dependency names declared in a package.json")
def deps(
    manifest: Path = typer.Argument(Path(MANIFEST_NAME), help="Path to package.json."),
) -> None:
    with _reported():
        for name in package_names_from_package_json(manifest):
            typer.echo(name)


@app.command(help="Print editor key mappings for the enabled actions")
def keymaps(ctx: typer.Context) -> None:
    config = _config(ctx)
    enabled = config.enabled_keymaps()
    if not enabled:
        console.print(f"All actions are disabled. Set {keymap_env_var('clone')} and friends to enable them.")
        return
    for line in render_keymaps(config):
        typer.echo(line)


def render_keymaps(config: Config) -> list[str]:
    """Vim mappings that run each action in the terminal.

    The picker needs a TTY, so ``browse`` runs under ``:!`` and hands the
    selection back through a temporary file.
    """

    lines = []
    for action, key in config.enabled_keymaps().items():
        lines.append(f"nnoremap <silent> {key} {_KEYMAP_COMMANDS[action]}")
    return lines


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def notify(message: str, severity: Severity = Severity.INFO) -> None:
    console.print(message, style=_SEVERITY_STYLES[severity], markup=False, highlight=False)


def _config(ctx: typer.Context) -> Config:
    ctx.ensure_object(dict)
    config = ctx.obj.get("config")
    if config is None:
        config = load_config()
        ctx.obj["config"] = config
    return config


@contextmanager
def _reported() -> Iterator[None]:
    try:
        yield
    except DownloadBrowseError as err:
        _fail(str(err), err.severity)


def _fail(message: str, severity: Severity = Severity.ERROR) -> None:
    notify(message, severity)
    raise typer.Exit(1 if severity is Severity.ERROR else 0)


if __name__ == "__main__":
    app()
