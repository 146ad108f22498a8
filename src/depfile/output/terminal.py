"""Rich terminal reporter for dependency file records."""

from __future__ import annotations

from typing import List, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from depfile.files.collection import group_by_operation, support_files
from depfile.files.models import DependencyFile, Operation

_OPERATION_STYLE = {
    Operation.CREATE: "bold green",
    Operation.UPDATE: "bold yellow",
    Operation.DELETE: "bold red",
}


def _operation_cell(record: DependencyFile) -> Text:
    op = record.operation
    return Text(op.value, style=_OPERATION_STYLE.get(op, ""))


def _type_cell(record: DependencyFile) -> Text:
    if record.symlink_target is not None:
        return Text(f"{record.type.value} → {record.symlink_target}")
    return Text(record.type.value)


def render(
    records: List[DependencyFile],
    *,
    console: Optional[Console] = None,
    show_summary: bool = True,
) -> None:
    """Print *records* as a table."""
    console = console or Console()

    if not records:
        console.print("[dim]No dependency files.[/dim]")
        return

    table = Table(
        title="Dependency Files",
        title_style="bold",
        border_style="dim",
    )
    table.add_column("Path", style="magenta")
    table.add_column("Operation", justify="center")
    table.add_column("Encoding", style="cyan")
    table.add_column("Type")
    table.add_column("Support", justify="center")

    for record in records:
        table.add_row(
            Text(record.path),
            _operation_cell(record),
            record.content_encoding.value,
            _type_cell(record),
            "✓" if record.support_file else "",
        )

    console.print(table)

    if show_summary:
        _print_summary(console, records)


def _print_summary(console: Console, records: List[DependencyFile]) -> None:
    groups = group_by_operation(records)
    console.print(
        f"[dim]Files:[/dim] {len(records)}  "
        f"[dim]create:[/dim] {len(groups[Operation.CREATE])}  "
        f"[dim]update:[/dim] {len(groups[Operation.UPDATE])}  "
        f"[dim]delete:[/dim] {len(groups[Operation.DELETE])}  "
        f"[dim]support:[/dim] {len(support_files(records))}"
    )
