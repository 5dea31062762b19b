from __future__ import annotations

import logging

from github import Github, GithubException
from rich.console import Console

from interlens_core.graph.builder import SourceProvider
from interlens_core.taxonomy import Branch
from interlens_core.utils.files import match_path

console = Console()
logger = logging.getLogger(__name__)


def get_repo(repo_name: str, token: str | None):
    return Github(token).get_repo(repo_name)


def get_pull(repo, pr_number: int):
    return repo.get_pull(pr_number)


def get_diff(pr):
    return pr.get_files()


def get_file_lines(repo, path: str, ref: str) -> list[str]:
    """Return the lines of ``path`` at ``ref``, decoded as UTF-8."""
    content = repo.get_contents(path, ref=ref).decoded_content.decode("utf-8", errors="replace")
    return content.splitlines()


class GithubSourceProvider(SourceProvider):
    """Serves file snapshots for both sides of a pull request.

    Branch L reads the base commit and branch R the head commit. Analyzer
    file names are matched against ``paths`` (the PR's changed files) so a
    bare ``Foo.java`` finds ``src/main/java/Foo.java``. Each (file, branch)
    pair is fetched once per provider. A file GitHub cannot serve (commonly a
    stack frame outside the repository) is reported once and read as None.
    """

    def __init__(self, repo, base_sha: str, head_sha: str, paths: list[str] | None = None):
        self._repo = repo
        self._refs = {Branch.L: base_sha, Branch.R: head_sha}
        self._paths = list(paths or [])
        self._cache: dict[tuple[str, Branch], list[str] | None] = {}

    @classmethod
    def for_pull(cls, repo, pr) -> GithubSourceProvider:
        paths = [f.filename for f in get_diff(pr)]
        return cls(repo, base_sha=pr.base.sha, head_sha=pr.head.sha, paths=paths)

    def lines(self, file_name: str, branch: Branch) -> list[str] | None:
        path = match_path(file_name, self._paths) or file_name
        key = (path, Branch(branch))
        if key not in self._cache:
            ref = self._refs[key[1]]
            logger.debug("Fetching %s at %s", path, ref[:7])
            try:
                self._cache[key] = get_file_lines(self._repo, path, ref)
            except GithubException as e:
                console.print(f"  [red]Could not fetch {path} at {ref[:7]}: {e}[/red]")
                self._cache[key] = None
        return self._cache[key]
