"""Pull request level orchestration.

Loads the analysis for a pull request, builds the folded diff view from the
PR's changed files, and resolves analysis locations against that view.
"""

from __future__ import annotations

import asyncio
import logging

from github import GithubException
from rich.console import Console

from interlens_core.diff.folding import FoldedDiffView
from interlens_core.diff.resolver import Resolution, VisibilityResolver
from interlens_core.errors import LineNotFound
from interlens_core.gh.pull_request import get_diff, get_file_lines
from interlens_core.models import AnalysisOutput, Dependency, InterferenceNode
from interlens_core.service import load
from interlens_core.taxonomy import Branch, parse_branch
from interlens_core.utils.files import is_code_file, is_excluded, normalize_filename

console = Console()
logger = logging.getLogger(__name__)


def fetch_analysis(owner: str, repository: str, pull_number: int, config: dict) -> AnalysisOutput:
    """Blocking wrapper around the single analysis fetch."""
    return asyncio.run(
        load(
            owner,
            repository,
            pull_number,
            analysis_api=config["analysis_api"],
            timeout=config.get("request_timeout", 10.0),
        )
    )


def select_dependency(analysis: AnalysisOutput, dep_index: int) -> Dependency:
    """Pick a dependency by its 1-based position in the analyzer's report."""
    dependencies = analysis.get_dependencies()
    if not 1 <= dep_index <= len(dependencies):
        raise IndexError(f"Dependency #{dep_index} does not exist ({len(dependencies)} reported).")
    return dependencies[dep_index - 1]


def select_node(analysis: AnalysisOutput, dep_index: int, node_index: int = 1) -> tuple[Dependency, InterferenceNode]:
    """Pick a dependency and one of its interference nodes by 1-based position."""
    dependency = select_dependency(analysis, dep_index)
    nodes = dependency.body.interference
    if not 1 <= node_index <= len(nodes):
        raise IndexError(f"Dependency #{dep_index} has no node #{node_index} ({len(nodes)} node(s)).")
    return dependency, nodes[node_index - 1]


def build_diff_view(repo, pr, config: dict) -> FoldedDiffView:
    """Fold every changed code file of ``pr`` at its head commit.

    Files that cannot be fetched are left out of the view; resolving a line
    in them then fails with LineNotFound.
    """
    view = FoldedDiffView()
    exclude_patterns = config.get("exclude", [])
    diff_files = sorted(get_diff(pr), key=lambda f: f.filename)

    for file in diff_files:
        if file.status == "removed" or is_excluded(file.filename, exclude_patterns) or not is_code_file(file.filename):
            logger.debug("Leaving %s out of the diff view", file.filename)
            continue
        try:
            lines = get_file_lines(repo, file.filename, pr.head.sha)
        except GithubException as e:
            console.print(f"  [red]Could not fetch {file.filename}: {e}[/red]")
            continue
        view.add_patch(file.filename, file.patch or "", source_lines=lines)

    logger.debug("Diff view holds %d file(s)", len(view.files))
    return view


def goto(view: FoldedDiffView, file: str, line: int, config: dict, branch: Branch | str = Branch.R) -> Resolution | None:
    """Reveal and focus ``file:line`` in the head-side diff view.

    Branch L lines number the base snapshot and are first carried over to the
    head side; a line the pull request removed raises LineNotFound.
    """
    extension = config.get("file_extension", ".java")
    if parse_branch(branch) is Branch.L:
        head_line = view.head_line(normalize_filename(file, extension), line)
        if head_line is None:
            raise LineNotFound(file, line)
        logger.debug("Base line %s:%d is head line %d", file, line, head_line)
        line = head_line
    resolver = VisibilityResolver(view, extension=extension)
    return resolver.resolve(file, line)
