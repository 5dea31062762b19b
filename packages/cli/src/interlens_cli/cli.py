"""CLI entry point for interlens.

Commands:
  deps  list the dependencies the analyzer reported for a pull request
  show  render one dependency as context nodes grouped by file
  goto  reveal and focus an analysis location in the PR's folded diff
"""

from __future__ import annotations

import logging

import click
from rich.console import Console
from rich.logging import RichHandler

from interlens_cli.commands.deps import deps_cmd
from interlens_cli.commands.goto import goto_cmd
from interlens_cli.commands.show import show_cmd


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(
    package_name="interlens",
    prog_name="interlens",
)
@click.option(
    "--config",
    "config_path",
    default=".interlens.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="INTERLENS_CONFIG",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def main(ctx: click.Context, config_path: str, verbose: bool):
    """Interference analysis overlay for GitHub pull request diffs."""
    from interlens_core.config import load_config
    from interlens_cli.auth import resolve_github_token

    _configure_logging(verbose)
    ctx.ensure_object(dict)

    config = load_config(config_path)
    token = resolve_github_token()
    if token:
        config["github_token"] = token
    ctx.obj["config"] = config


main.add_command(deps_cmd)
main.add_command(show_cmd)
main.add_command(goto_cmd)
