"""Command line interface for aicli."""

from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import Iterable, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from aicli.application.history import ListHistory
from aicli.application.session import SuggestionSession
from aicli.config_loader import ConfigError, Configuration, load_configuration
from aicli.domain.config import SECTION_TYPES
from aicli.utils import redact_possible_secrets

app = typer.Typer(help="Obtain AI suggestions for command-line editing and inspect their configuration.")
console = Console()
err_console = Console(stderr=True)

_SECRET_KEYS = {"key"}


def _config_option() -> Optional[List[Path]]:
    return typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        dir_okay=False,
        readable=True,
        help="Configuration file to read instead of the default search path (repeatable).",
    )


def _program_option() -> Optional[str]:
    return typer.Option(
        None,
        "--program",
        "-p",
        help="Program name whose [prompt-NAME] settings apply. Defaults to this program.",
    )


def _handle_config_error(exc: ConfigError) -> None:
    err_console.print(str(exc), markup=exc.markup, highlight=False)
    raise typer.Exit(code=1) from exc


def _load(config_files: Optional[List[Path]], program: Optional[str]) -> Configuration:
    try:
        return load_configuration(program_name=program, sources=config_files or None, console=err_console)
    except ConfigError as exc:
        _handle_config_error(exc)
        raise  # pragma: no cover


@app.command()
def validate(
    config_files: Optional[List[Path]] = _config_option(),
    program: Optional[str] = _program_option(),
) -> None:
    """Validate the configuration sources."""

    config = _load(config_files, program)
    console.print(f"[green]Config OK[/green] (api: {config.general.api}, program: {config.program_name})")


@app.command()
def show(
    config_files: Optional[List[Path]] = _config_option(),
    program: Optional[str] = _program_option(),
) -> None:
    """Display the explicitly set configuration values."""

    config = _load(config_files, program)
    _print_configuration(config)


def _print_configuration(config: Configuration) -> None:
    console.print(f"[bold]Program:[/bold] {config.program_name}")
    console.print(f"[bold]API:[/bold] {config.general.api}")
    console.print("")

    table = Table(title="Configuration")
    table.add_column("Section", justify="left")
    table.add_column("Key", justify="left")
    table.add_column("Value", justify="left")
    for section in SECTION_TYPES:
        for key, value in asdict(config.section(section)).items():
            if not config.is_set(section, key):
                continue
            shown = str(value)
            if key in _SECRET_KEYS:
                shown = redact_possible_secrets(shown)
            table.add_row(section, key, shown)
    console.print(table)

    profile = config.profile
    if profile is None:
        return
    console.print("")
    console.print(f"[bold]Prompt profile:[/bold] {profile.program}")
    table = Table()
    table.add_column("Setting", justify="left")
    table.add_column("Value", justify="left")
    for name in ("system", "context", "comment"):
        value = getattr(profile, name)
        if value is not None:
            table.add_row(name, str(value))
    for slot, (user, assistant) in enumerate(zip(profile.user, profile.assistant), start=1):
        if user:
            table.add_row(f"user-{slot}", user)
        if assistant:
            table.add_row(f"assistant-{slot}", assistant)
    console.print(table)


@app.command()
def ask(
    prompt: str = typer.Argument(..., help="Request to send to the configured backend."),
    config_files: Optional[List[Path]] = _config_option(),
    program: Optional[str] = _program_option(),
    history_file: Optional[Path] = typer.Option(
        None,
        "--history-file",
        exists=True,
        dir_okay=False,
        readable=True,
        help="History file (one entry per line) supplying context entries.",
    ),
) -> None:
    """Send one request and print the suggestion."""

    config = _load(config_files, program)
    store = ListHistory.from_file(history_file) if history_file else ListHistory()
    try:
        session = SuggestionSession.create(config, console=err_console)
    except ConfigError as exc:
        _handle_config_error(exc)
        return

    result = session.fetch(prompt, store.length(), store)
    if not result.ok:
        raise typer.Exit(code=1)
    prefix = config.general.response_prefix
    text = f"{prefix} {result.text}" if prefix is not None else result.text
    console.print(text, markup=False, highlight=False)


def main(argv: Iterable[str] | None = None) -> None:
    """Invoke the Typer application."""
    app(args=list(argv) if argv is not None else None)


if __name__ == "__main__":
    main()
