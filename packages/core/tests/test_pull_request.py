"""Tests for GitHub pull request helpers and the PR-backed source provider."""

from unittest.mock import MagicMock

from github import GithubException

from interlens_core.gh.pull_request import GithubSourceProvider, get_diff, get_file_lines, get_pull
from interlens_core.graph.builder import build_graph
from interlens_core.models import AnalysisOutput
from interlens_core.taxonomy import Branch

BASE = "a" * 40
HEAD = "b" * 40


def _repo(contents=b"line 1\nline 2\n"):
    repo = MagicMock()
    repo.get_contents.return_value.decoded_content = contents
    return repo


def _diff_file(filename):
    f = MagicMock()
    f.filename = filename
    return f


class TestHelpers:
    def test_get_pull(self):
        repo = MagicMock()
        get_pull(repo, 7)
        repo.get_pull.assert_called_once_with(7)

    def test_get_diff_returns_pr_files(self):
        pr = MagicMock()
        pr.get_files.return_value = ["f"]
        assert get_diff(pr) == ["f"]

    def test_get_file_lines_splits_decoded_content(self):
        repo = _repo(b"class A {\n}\n")
        assert get_file_lines(repo, "A.java", HEAD) == ["class A {", "}"]
        repo.get_contents.assert_called_once_with("A.java", ref=HEAD)

    def test_get_file_lines_replaces_invalid_utf8(self):
        repo = _repo(b"caf\xe9\n")
        assert get_file_lines(repo, "A.java", HEAD) == ["caf�"]


class TestGithubSourceProvider:
    def test_left_branch_reads_base_commit(self):
        repo = _repo()
        provider = GithubSourceProvider(repo, BASE, HEAD)
        provider.lines("A.java", Branch.L)
        repo.get_contents.assert_called_once_with("A.java", ref=BASE)

    def test_right_branch_reads_head_commit(self):
        repo = _repo()
        provider = GithubSourceProvider(repo, BASE, HEAD)
        provider.lines("A.java", "R")
        repo.get_contents.assert_called_once_with("A.java", ref=HEAD)

    def test_each_snapshot_fetched_once(self):
        repo = _repo()
        provider = GithubSourceProvider(repo, BASE, HEAD)
        first = provider.lines("A.java", Branch.R)
        second = provider.lines("A.java", Branch.R)
        assert first == second == ["line 1", "line 2"]
        assert repo.get_contents.call_count == 1

    def test_branches_cached_separately(self):
        repo = _repo()
        provider = GithubSourceProvider(repo, BASE, HEAD)
        provider.lines("A.java", Branch.L)
        provider.lines("A.java", Branch.R)
        assert repo.get_contents.call_count == 2

    def test_bare_name_matched_to_changed_path(self):
        repo = _repo()
        provider = GithubSourceProvider(repo, BASE, HEAD, paths=["src/main/java/A.java", "src/main/java/B.java"])
        provider.lines("A.java", Branch.R)
        repo.get_contents.assert_called_once_with("src/main/java/A.java", ref=HEAD)

    def test_unmatched_name_fetched_as_is(self):
        repo = _repo()
        provider = GithubSourceProvider(repo, BASE, HEAD, paths=["src/main/java/A.java"])
        provider.lines("com/acme/Main.java", Branch.L)
        repo.get_contents.assert_called_once_with("com/acme/Main.java", ref=BASE)

    def test_for_pull_uses_pr_refs_and_files(self):
        repo = _repo()
        pr = MagicMock()
        pr.base.sha = BASE
        pr.head.sha = HEAD
        pr.get_files.return_value = [_diff_file("src/A.java")]

        provider = GithubSourceProvider.for_pull(repo, pr)
        provider.lines("A.java", Branch.L)

        repo.get_contents.assert_called_once_with("src/A.java", ref=BASE)

    def test_unfetchable_file_reads_as_none(self, capsys):
        repo = _repo()
        repo.get_contents.side_effect = GithubException(404, {"message": "Not Found"}, None)
        provider = GithubSourceProvider(repo, BASE, HEAD)

        assert provider.lines("Main.java", Branch.R) is None
        assert provider.lines("Main.java", Branch.R) is None
        assert repo.get_contents.call_count == 1
        assert "Could not fetch Main.java" in capsys.readouterr().out

    def test_graph_built_without_unfetchable_frame(self, payload):
        def get_contents(path, ref):
            if path == "Main.java":
                raise GithubException(404, {"message": "Not Found"}, None)
            content = MagicMock()
            content.decoded_content = "\n".join(f"a line {n}" for n in range(1, 21)).encode()
            return content

        repo = MagicMock()
        repo.get_contents.side_effect = get_contents
        dependency = AnalysisOutput.from_dict(payload).events[0]

        graph = build_graph(dependency, GithubSourceProvider(repo, BASE, HEAD))

        assert [n.file_name for n in graph.nodes] == ["A.java", "A.java", "A.java"]
        assert graph.anchors == [0, 2]
