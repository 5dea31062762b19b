"""Terminal rendering of dependency graphs and folded diffs."""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from interlens_core.diff.folding import FoldedDiffView
from interlens_core.graph.builder import DependencyGraph, FileObject
from interlens_core.graph.node import ContextNode

LINE_CHAR_LIMIT = 50
DEFAULT_COLORS = {"main": "#1F6FEB", "alt": "#142A38"}


def truncate(line: str, limit: int = LINE_CHAR_LIMIT) -> str:
    return line[:limit] + (" ..." if len(line) > limit else "")


def _flags(node: ContextNode) -> str:
    parts = []
    if node.is_source:
        parts.append("source")
    if node.is_sink:
        parts.append("sink")
    if node.is_call:
        parts.append(f"calls {node.called_file}")
    return " · ".join(parts)


def node_panel(node: ContextNode, colors: dict | None = None, width: int | None = None) -> Panel:
    colors = {**DEFAULT_COLORS, **(colors or {})}
    table = Table.grid(padding=(0, 2))
    table.add_column(justify="right", style="dim")
    table.add_column(no_wrap=True)
    for i, line in enumerate(node.lines):
        number = node.first_line + i
        if number == node.number_highlight:
            table.add_row(str(number), Text(truncate(line)), style=f"bold on {colors['main']}")
        else:
            table.add_row(str(number), Text(truncate(line)))

    return Panel(
        table,
        title=node.role or None,
        subtitle=_flags(node) or None,
        box=box.ASCII2 if node.is_dashed else box.ROUNDED,
        border_style=colors["alt"],
        width=width,
    )


def file_header(file: FileObject) -> Rule:
    return Rule(f"[bold]{file.file_name}[/bold]", align="left")


def render_graph(graph: DependencyGraph, console: Console, colors: dict | None = None) -> None:
    """Print every node of the graph under its file header.

    Call and sink nodes take half the console width, the rest 60%.
    """
    console.print(f"[bold]{graph.dependency.label}[/bold] [dim]({graph.dependency.type.value})[/dim]")
    if graph.dependency.body.description:
        console.print(graph.dependency.body.description)
    for file in graph.files:
        console.print(file_header(file))
        for node in graph.nodes_in(file):
            share = 0.5 if node.is_special else 0.6
            console.print(node_panel(node, colors, width=max(int(console.width * share), 30)))


def render_diff(view: FoldedDiffView, file: str, console: Console, around: int | None = None) -> None:
    """Print the folded diff of ``file`` with the focused line highlighted.

    With ``around``, only lines within that distance of the focused line are
    printed.
    """
    focused = view.focused.line if view.focused is not None and view.focused.file.endswith(file) else None
    console.print(Rule(f"[bold]{file}[/bold]", align="left"))
    for kind, start, end in view.rows(file):
        if around is not None and focused is not None and (end < focused - around or start > focused + around):
            continue
        if kind == "fold":
            console.print(f"[dim]   ⋯ lines {start}-{end} hidden[/dim]")
        elif start == focused:
            console.print(Text(f"{start:>5}  {view.text(file, start)}", style="bold reverse"))
        else:
            console.print(f"{start:>5}  {view.text(file, start)}", markup=False, highlight=False)
