"""deps command: list the dependencies reported for a pull request."""

from __future__ import annotations

import click
from rich.console import Console
from rich.table import Table

from interlens_cli.options import load_analysis, pr_option, repo_option

console = Console()

_family_style = {"OA": "magenta", "DF": "cyan", "DEFAULT": "yellow"}


@click.command("deps")
@repo_option
@pr_option
@click.pass_context
def deps_cmd(ctx, repo: str, pr_number: int):
    """List interference dependencies in the order the analyzer reported them."""
    analysis = load_analysis(ctx.obj["config"], repo, pr_number)

    dependencies = analysis.get_dependencies()
    if not dependencies:
        console.print("[green]No dependencies reported for this pull request.[/green]")
        return

    table = Table(title=f"Dependencies in {repo}#{pr_number}", show_header=True, header_style="bold cyan")
    table.add_column("#", style="bold", width=4)
    table.add_column("Type", width=10)
    table.add_column("Label", max_width=40)
    table.add_column("Locations", max_width=50)
    table.add_column("Description", max_width=60)

    for i, dep in enumerate(dependencies, 1):
        style = _family_style.get(dep.type.family, "white")
        locations = "\n".join(
            f"{n.branch.value} {n.type.value} {n.location.file}:{n.location.line}" for n in dep.body.interference
        )
        table.add_row(
            str(i),
            f"[{style}]{dep.type.value}[/{style}]",
            dep.label,
            locations,
            dep.body.description,
        )

    console.print(table)
