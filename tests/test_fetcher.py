# tests/test_fetcher.py
"""
Tests for fetcher.py - GitHub contents API client

The HTTP session is mocked; no test touches the network.
"""
import base64
import logging
import subprocess

import pytest
import requests

from fumagen.errors import FetchError
from fumagen.fetcher import (
    GitHubFetcher,
    fetch_all_repos,
    resolve_github_token,
)


def contents_response(mocker, text, ok=True, status=200):
    encoded = base64.b64encode(text.encode("utf-8")).decode("ascii")
    # The API wraps base64 at 60 columns
    wrapped = "\n".join(encoded[i:i + 60] for i in range(0, len(encoded), 60))
    return mocker.Mock(
        ok=ok,
        status_code=status,
        json=mocker.Mock(return_value={"content": wrapped, "encoding": "base64"}),
    )


def routed_session(mocker, routes):
    """Session whose get() answers from {url suffix: response}"""
    session = requests.Session()

    def get(url, params=None, timeout=None):
        for suffix, response in routes.items():
            if url.endswith(suffix):
                if isinstance(response, Exception):
                    raise response
                return response
        return mocker.Mock(ok=False, status_code=404)

    session.get = mocker.Mock(side_effect=get)
    return session


class TestGitHubFetcher:
    """Tests for single-file fetching"""

    def test_headers(self, mocker):
        fetcher = GitHubFetcher("tok", session=requests.Session())
        headers = fetcher.session.headers
        assert headers["Authorization"] == "Bearer tok"
        assert headers["User-Agent"] == "fumagen"

    def test_decodes_base64(self, mocker):
        long_text = "# 课程\n\n" + "内容" * 100
        session = routed_session(mocker, {"/README.md": contents_response(mocker, long_text)})

        text = GitHubFetcher("tok", session=session).fetch_readme("HITSZ-OpenAuto", "AUTO1001")

        assert text == long_text
        url = session.get.call_args[0][0]
        assert url == "https://api.github.com/repos/HITSZ-OpenAuto/AUTO1001/contents/README.md"

    def test_worktree_uses_branch(self, mocker):
        session = routed_session(mocker, {"/worktree.json": contents_response(mocker, "{}")})

        GitHubFetcher("tok", session=session).fetch_worktree_json("org", "repo")

        assert session.get.call_args[1]["params"] == {"ref": "worktree"}

    def test_http_error(self, mocker):
        session = routed_session(mocker, {})
        with pytest.raises(FetchError) as exc_info:
            GitHubFetcher("tok", session=session).fetch_readme("org", "missing")
        assert "404" in exc_info.value.message

    def test_network_error(self, mocker):
        session = routed_session(mocker, {"/README.md": requests.ConnectionError("down")})
        with pytest.raises(FetchError):
            GitHubFetcher("tok", session=session).fetch_readme("org", "repo")

    def test_unexpected_body(self, mocker):
        response = mocker.Mock(ok=True, status_code=200, json=mocker.Mock(return_value={"message": "?"}))
        session = routed_session(mocker, {"/README.md": response})
        with pytest.raises(FetchError):
            GitHubFetcher("tok", session=session).fetch_readme("org", "repo")


class TestFetchRepoData:
    """Tests for per-repository downloads"""

    def test_writes_both_files(self, mocker, tmp_path):
        session = routed_session(mocker, {
            "/README.md": contents_response(mocker, "# R\n"),
            "/worktree.json": contents_response(mocker, '{"a.pdf": {}}'),
        })

        GitHubFetcher("tok", session=session).fetch_repo_data("org", "R", tmp_path)

        assert (tmp_path / "R.mdx").read_text(encoding="utf-8") == "# R\n"
        assert (tmp_path / "R.json").read_text(encoding="utf-8") == '{"a.pdf": {}}'

    def test_existing_files_not_refetched(self, mocker, tmp_path):
        (tmp_path / "R.mdx").write_text("local", encoding="utf-8")
        session = routed_session(mocker, {"/worktree.json": contents_response(mocker, "{}")})

        GitHubFetcher("tok", session=session).fetch_repo_data("org", "R", tmp_path)

        assert (tmp_path / "R.mdx").read_text(encoding="utf-8") == "local"
        assert session.get.call_count == 1

    def test_missing_file_logged_not_written(self, mocker, tmp_path, caplog):
        session = routed_session(mocker, {"/README.md": contents_response(mocker, "# R\n")})

        with caplog.at_level(logging.WARNING):
            GitHubFetcher("tok", session=session).fetch_repo_data("org", "R", tmp_path)

        assert (tmp_path / "R.mdx").exists()
        assert not (tmp_path / "R.json").exists()
        assert "worktree.json" in caplog.text


class TestFetchAllRepos:
    """Tests for the concurrent driver"""

    def test_counts(self, mocker, tmp_path):
        session = routed_session(mocker, {
            "/README.md": contents_response(mocker, "# R\n"),
            "/worktree.json": contents_response(mocker, "{}"),
        })
        repos_dir = tmp_path / "repos"

        succeeded, failed = fetch_all_repos("tok", "org", ["A", "B", "C"], repos_dir,
                                            concurrency=2, session=session)

        assert (succeeded, failed) == (3, 0)
        assert sorted(p.name for p in repos_dir.iterdir()) == [
            "A.json", "A.mdx", "B.json", "B.mdx", "C.json", "C.mdx",
        ]

    def test_write_failure_counted(self, mocker, tmp_path):
        session = routed_session(mocker, {"/README.md": contents_response(mocker, "# R\n")})
        mocker.patch.object(GitHubFetcher, "fetch_repo_data", side_effect=OSError("disk full"))

        succeeded, failed = fetch_all_repos("tok", "org", ["A"], tmp_path, session=session)

        assert (succeeded, failed) == (0, 1)


class TestResolveGithubToken:
    """Tests for token discovery"""

    def test_personal_access_token_first(self, monkeypatch):
        monkeypatch.setenv("PERSONAL_ACCESS_TOKEN", "pat")
        monkeypatch.setenv("GITHUB_TOKEN", "gh")
        assert resolve_github_token() == "pat"

    def test_github_token(self, monkeypatch):
        monkeypatch.setenv("GITHUB_TOKEN", "gh")
        assert resolve_github_token() == "gh"

    def test_gh_cli(self, mocker):
        run = mocker.patch("fumagen.fetcher.subprocess.run", return_value=subprocess.CompletedProcess(
            args=["gh"], returncode=0, stdout="cli-token\n", stderr=""))
        assert resolve_github_token() == "cli-token"
        assert run.call_args[0][0] == ["gh", "auth", "token"]

    def test_gh_not_logged_in(self, mocker):
        mocker.patch("fumagen.fetcher.subprocess.run", return_value=subprocess.CompletedProcess(
            args=["gh"], returncode=1, stdout="", stderr="not logged in"))
        assert resolve_github_token() is None

    def test_gh_not_installed(self, mocker):
        mocker.patch("fumagen.fetcher.subprocess.run", side_effect=FileNotFoundError("gh"))
        assert resolve_github_token() is None
