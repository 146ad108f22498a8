"""depfile CLI — Typer application with inspect, staged, dedupe, decode, and init commands."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

from depfile import __version__

app = typer.Typer(
    name="depfile",
    help="Build, deduplicate, and inspect dependency file change records.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _fail(label: str, exc: Exception, code: int = 2) -> typer.Exit:
    console.print(f"[bold red]{label}:[/bold red] {escape(str(exc))}")
    return typer.Exit(code=code)


def _resolve_repo_root() -> Path:
    """Find the git repo root, exit 2 on failure."""
    from depfile.git.adapter import GitError, get_repo_root

    try:
        return get_repo_root()
    except GitError as exc:
        raise _fail("Error", exc) from exc


def _load_config(root: Path, config: Optional[str], fmt: Optional[str]):
    from depfile.config.loader import ConfigError, load_config
    from depfile.config.schema import OUTPUT_FORMATS

    try:
        cfg = load_config(root, config)
    except ConfigError as exc:
        raise _fail("Config error", exc) from exc

    if fmt:
        if fmt not in OUTPUT_FORMATS:
            console.print(f"[bold red]Invalid format:[/bold red] {escape(fmt)}")
            raise typer.Exit(code=2)
        cfg.output.format = fmt  # type: ignore[assignment]
    return cfg


def _emit(records, fmt: str, output: Optional[str], show_summary: bool = True) -> None:
    """Render *records* to stdout and optionally write a document to *output*."""
    from depfile.output import serialize, terminal

    report_text: Optional[str] = None
    if fmt == "terminal":
        terminal.render(records, show_summary=show_summary)
    else:
        report_text = serialize.dumps(records, fmt)
        print(report_text)

    if output:
        if report_text is None:
            # Terminal output requested alongside a file: write the file in
            # the format its suffix asks for
            report_text = serialize.dumps(records, serialize.format_for_path(Path(output)))
        Path(output).write_text(report_text, encoding="utf-8")


# ── inspect ───────────────────────────────────────────────────────────────────


@app.command()
def inspect(
    paths: List[str] = typer.Argument(..., help="Files to load, relative to --directory"),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Repository root on disk"),
    directory: Optional[str] = typer.Option(None, "--directory", "-d", help="Root-relative directory of the files"),
    support: bool = typer.Option(False, "--support", help="Mark every file as a support file"),
    operation: str = typer.Option("update", "--operation", help="update | create | delete"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .depfile.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json | yaml"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write records to file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Build records for files in a working tree."""
    from depfile.errors import ConfigurationError
    from depfile.files.collection import deduplicate
    from depfile.files.loader import is_support_path, load_file

    cfg = _load_config(root, config, format)
    directory = directory if directory is not None else cfg.files.directory

    if verbose:
        console.print(f"[dim]Root: {escape(str(root.resolve()))}[/dim]")
        console.print(f"[dim]Directory: {escape(directory)}[/dim]")

    records = []
    for path in paths:
        try:
            records.append(
                load_file(
                    root,
                    path,
                    directory=directory,
                    support_file=support or is_support_path(path, cfg.files.support_patterns),
                    operation=operation,
                    max_size_kb=cfg.files.max_file_size_kb,
                )
            )
        except FileNotFoundError as exc:
            raise _fail("Missing file", exc) from exc
        except ConfigurationError as exc:
            raise _fail("Invalid file", exc) from exc

    unique = deduplicate(records)
    if verbose and len(unique) != len(records):
        console.print(f"[dim]Dropped {len(records) - len(unique)} duplicate(s)[/dim]")

    _emit(unique, cfg.output.format, output, cfg.output.show_summary)


# ── staged ────────────────────────────────────────────────────────────────────


@app.command()
def staged(
    directory: Optional[str] = typer.Option(None, "--directory", "-d", help="Only include files under this directory"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .depfile.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json | yaml"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write records to file"),
) -> None:
    """Build records for the changes currently staged in git."""
    from depfile.errors import ConfigurationError
    from depfile.git.adapter import GitError
    from depfile.git.staged import staged_records

    repo_root = _resolve_repo_root()
    cfg = _load_config(repo_root, config, format)

    try:
        records = staged_records(
            repo_root,
            directory=directory if directory is not None else cfg.files.directory,
            support_patterns=cfg.files.support_patterns,
        )
    except GitError as exc:
        raise _fail("Git error", exc) from exc
    except ConfigurationError as exc:
        raise _fail("Invalid file", exc) from exc

    if not records and cfg.output.format == "terminal":
        console.print("[dim]No staged changes.[/dim]")
        raise typer.Exit(code=0)

    _emit(records, cfg.output.format, output, cfg.output.show_summary)


# ── dedupe ────────────────────────────────────────────────────────────────────


@app.command()
def dedupe(
    file: Path = typer.Argument(..., help="JSON or YAML document of records"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json | yaml"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Write records to file"),
) -> None:
    """Remove duplicate records from a document."""
    from depfile.errors import DecodeError
    from depfile.files.collection import deduplicate
    from depfile.output import serialize

    if format and format not in ("terminal", *serialize.FORMATS):
        console.print(f"[bold red]Invalid format:[/bold red] {escape(format)}")
        raise typer.Exit(code=2)

    try:
        records = serialize.load_path(file)
    except FileNotFoundError as exc:
        raise _fail("Missing file", exc) from exc
    except DecodeError as exc:
        raise _fail("Decode error", exc) from exc

    unique = deduplicate(records)
    console.print(f"[dim]{len(records)} record(s), {len(unique)} unique[/dim]")
    _emit(unique, format or serialize.format_for_path(file), output)


# ── decode ────────────────────────────────────────────────────────────────────


@app.command()
def decode(
    file: Path = typer.Argument(..., help="JSON or YAML document of records"),
    path: str = typer.Argument(..., help="Path of the record to decode"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write content to file"),
) -> None:
    """Print the decoded content of one record."""
    from depfile.errors import DecodeError
    from depfile.files.collection import find
    from depfile.output import serialize

    try:
        records = serialize.load_path(file)
    except FileNotFoundError as exc:
        raise _fail("Missing file", exc) from exc
    except DecodeError as exc:
        raise _fail("Decode error", exc) from exc

    record = find(records, path)
    if record is None:
        console.print(f"[red]✗[/red] No record for {escape(path)}")
        raise typer.Exit(code=1)

    try:
        content = record.decoded_content()
    except DecodeError as exc:
        raise _fail("Decode error", exc) from exc

    if content is None:
        console.print(f"[dim]{escape(record.path)} has no content ({record.operation.value})[/dim]")
        raise typer.Exit(code=0)

    if output:
        if isinstance(content, bytes):
            output.write_bytes(content)
        else:
            output.write_text(content, encoding="utf-8")
        console.print(f"[green]✓[/green] Wrote {escape(str(output))}")
    else:
        typer.echo(content, nl=False)


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .depfile.toml in the repo root."""
    from depfile.config.defaults import DEFAULT_TOML
    from depfile.config.loader import CONFIG_FILENAME

    repo_root = _resolve_repo_root()
    config_path = repo_root / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {escape(str(config_path))}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {escape(str(config_path))}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"depfile {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
) -> None:
    """depfile — dependency file records for automated update commits."""
