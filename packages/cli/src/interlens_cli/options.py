"""Helpers shared by the interlens commands."""

from __future__ import annotations

import click

from interlens_core.errors import InterlensError
from interlens_core.models import AnalysisOutput
from interlens_core.navigator import fetch_analysis


def split_repo(repo: str) -> tuple[str, str]:
    owner, _, name = repo.partition("/")
    if not owner or not name or "/" in name:
        raise click.BadParameter(f"{repo!r} is not in owner/name format.", param_hint="--repo")
    return owner, name


def load_analysis(config: dict, repo: str, pr_number: int) -> AnalysisOutput:
    owner, name = split_repo(repo)
    try:
        return fetch_analysis(owner, name, pr_number, config)
    except InterlensError as e:
        raise click.ClickException(str(e))


repo_option = click.option("--repo", required=True, help="GitHub repository in owner/name format.")
pr_option = click.option("--pr", "pr_number", type=int, required=True, help="Pull request number.")
