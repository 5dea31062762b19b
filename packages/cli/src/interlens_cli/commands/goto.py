"""goto command: reveal and focus an analysis location in the folded diff."""

from __future__ import annotations

import click
from github import GithubException
from rich.console import Console

from interlens_cli.options import load_analysis, pr_option, repo_option
from interlens_core.errors import InterlensError, VisibilityResolutionFailed
from interlens_core.gh.pull_request import get_pull, get_repo
from interlens_core.navigator import build_diff_view, goto, select_node
from interlens_core.render import render_diff
from interlens_core.taxonomy import Branch

console = Console()


@click.command("goto")
@repo_option
@pr_option
@click.option("--dep", "dep_index", type=int, default=None, help="Dependency number (see `deps`).")
@click.option("--node", "node_index", type=int, default=1, show_default=True, help="Location within the dependency.")
@click.option("--file", "file_name", default=None, help="File to focus instead of an analysis location.")
@click.option("--line", type=int, default=None, help="Head-side line to focus, together with --file.")
@click.option("--around", type=int, default=5, show_default=True, help="Lines of context printed around the focus.")
@click.pass_context
def goto_cmd(
    ctx,
    repo: str,
    pr_number: int,
    dep_index: int | None,
    node_index: int,
    file_name: str | None,
    line: int | None,
    around: int,
):
    """Expand the pull request's folded diff until a location is visible, then focus it.

    \b
    Target either an analysis location:
      interlens goto --repo owner/name --pr 7 --dep 2 --node 1
    or a file and line directly:
      interlens goto --repo owner/name --pr 7 --file Foo.java --line 57
    """
    config = ctx.obj["config"]
    branch = Branch.R

    if dep_index is not None:
        analysis = load_analysis(config, repo, pr_number)
        try:
            _, node = select_node(analysis, dep_index, node_index)
        except IndexError as e:
            raise click.BadParameter(str(e), param_hint="--dep/--node")
        file_name, line, branch = node.location.file, node.location.line, node.branch
    elif file_name is None or line is None:
        raise click.UsageError("Pass --dep (and optionally --node), or both --file and --line.")

    try:
        this_repo = get_repo(repo, token=config.get("github_token"))
        view = build_diff_view(this_repo, get_pull(this_repo, pr_number), config)
    except GithubException as e:
        raise click.ClickException(f"Could not load the diff of {repo}#{pr_number}: {e}")

    try:
        resolution = goto(view, file_name, line, config, branch=branch)
    except VisibilityResolutionFailed as e:
        render_diff(view, e.file, console)
        raise click.ClickException(str(e))
    except InterlensError as e:
        raise click.ClickException(str(e))

    if resolution is None:
        return
    console.print(
        f"[green]Focused {resolution.element.file}:{resolution.line}[/green] "
        f"[dim]({resolution.expansions} expansion(s))[/dim]"
    )
    render_diff(view, resolution.element.file, console, around=around)
