"""show command: render one dependency as context nodes."""

from __future__ import annotations

import click
from github import GithubException
from rich.console import Console

from interlens_cli.options import load_analysis, pr_option, repo_option
from interlens_core.errors import InterlensError
from interlens_core.gh.pull_request import GithubSourceProvider, get_pull, get_repo
from interlens_core.graph.builder import build_graph
from interlens_core.navigator import select_dependency
from interlens_core.render import render_graph

console = Console()


@click.command("show")
@repo_option
@pr_option
@click.option("--dep", "dep_index", type=int, default=1, show_default=True, help="Dependency number (see `deps`).")
@click.pass_context
def show_cmd(ctx, repo: str, pr_number: int, dep_index: int):
    """Render a dependency's locations, call chains and file grouping."""
    config = ctx.obj["config"]
    analysis = load_analysis(config, repo, pr_number)

    try:
        dependency = select_dependency(analysis, dep_index)
    except IndexError as e:
        raise click.BadParameter(str(e), param_hint="--dep")

    try:
        this_repo = get_repo(repo, token=config.get("github_token"))
        sources = GithubSourceProvider.for_pull(this_repo, get_pull(this_repo, pr_number))
        graph = build_graph(
            dependency,
            sources,
            lines_around=config.get("context_lines", 1),
            mod_lines=analysis.mod_lines(),
            extension=config.get("file_extension", ".java"),
        )
    except GithubException as e:
        raise click.ClickException(f"Could not read sources for {repo}#{pr_number}: {e}")
    except InterlensError as e:
        raise click.ClickException(str(e))

    render_graph(graph, console, colors=config.get("colors"))
