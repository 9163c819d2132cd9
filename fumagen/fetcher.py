# Fumagen
# Copyright (c) 2026 The Fumagen Authors
# Licensed under the MIT License. See LICENSE in the project root.

"""
fetcher.py - Download course READMEs and worktree manifests from GitHub

For every repository in repos_list.txt:

    README.md                       -> repos/<repo>.mdx
    worktree.json (branch worktree) -> repos/<repo>.json

Files that already exist locally are never re-downloaded; delete them to
refresh. Requests run on a bounded thread pool; there are no retries.
"""

import base64
import logging
import os
import subprocess
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Iterable, Optional, Tuple

import requests

from fumagen.errors import FetchError, fetch_failed_error


logger = logging.getLogger(__name__)

GITHUB_API = "https://api.github.com"
USER_AGENT = "fumagen"

REQUEST_TIMEOUT = (10, 30)      # (connect, read)

TOKEN_ENV_VARS = ("PERSONAL_ACCESS_TOKEN", "GITHUB_TOKEN")

README_PATH = "README.md"
WORKTREE_PATH = "worktree.json"
WORKTREE_REF = "worktree"


class GitHubFetcher:
    """Thin client for the GitHub contents API."""

    def __init__(
        self,
        token: str,
        session: Optional[requests.Session] = None,
        timeout=REQUEST_TIMEOUT,
    ):
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": USER_AGENT,
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {token}",
        })
        self.timeout = timeout

    def fetch_file(self, org: str, repo: str, path: str, ref: Optional[str] = None) -> str:
        """
        Fetch one file's text through the contents API.

        Raises:
            FetchError: On a network error, non-2xx status or undecodable body
        """
        url = f"{GITHUB_API}/repos/{org}/{repo}/contents/{path}"
        params = {"ref": ref} if ref else None

        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise FetchError(
                message=f"Request failed for {url}",
                context={"url": url},
                cause=e,
            ) from e

        if not resp.ok:
            raise fetch_failed_error(url, resp.status_code)

        try:
            payload = resp.json()
            content = payload["content"]
            if payload.get("encoding") == "base64":
                return base64.b64decode(content.replace("\n", "")).decode("utf-8")
            return content
        except (ValueError, KeyError, TypeError) as e:
            raise FetchError(
                message=f"Unexpected contents API response for {url}",
                context={"url": url},
                cause=e,
            ) from e

    def fetch_readme(self, org: str, repo: str) -> str:
        return self.fetch_file(org, repo, README_PATH)

    def fetch_worktree_json(self, org: str, repo: str) -> str:
        return self.fetch_file(org, repo, WORKTREE_PATH, ref=WORKTREE_REF)

    def fetch_repo_data(self, org: str, repo: str, repos_dir: Path) -> None:
        """
        Download README and manifest for one repo unless already present.

        A file that cannot be fetched is logged and skipped; only local
        write errors propagate.
        """
        targets = (
            (repos_dir / f"{repo}.mdx", self.fetch_readme, README_PATH),
            (repos_dir / f"{repo}.json", self.fetch_worktree_json, WORKTREE_PATH),
        )

        for target, fetch, label in targets:
            if target.exists():
                continue
            try:
                content = fetch(org, repo)
            except FetchError as e:
                logger.warning("Failed to fetch %s for %s: %s", label, repo, e.message)
                continue
            target.write_text(content, encoding="utf-8")
            logger.debug("Saved %s", target)


def fetch_all_repos(
    token: str,
    org: str,
    repos: Iterable[str],
    repos_dir: Path,
    concurrency: int = 10,
    session: Optional[requests.Session] = None,
) -> Tuple[int, int]:
    """
    Fetch data for every repository with at most ``concurrency`` requests
    in flight.

    Returns:
        (succeeded, failed) repository counts
    """
    repos = sorted(repos)
    repos_dir = Path(repos_dir)
    repos_dir.mkdir(parents=True, exist_ok=True)

    logger.info("Fetching %d repositories from GitHub...", len(repos))

    fetcher = GitHubFetcher(token, session=session)
    succeeded = 0
    failed = 0

    with ThreadPoolExecutor(max_workers=max(1, concurrency)) as pool:
        futures = {
            pool.submit(fetcher.fetch_repo_data, org, repo, repos_dir): repo
            for repo in repos
        }
        for future in as_completed(futures):
            repo = futures[future]
            try:
                future.result()
                succeeded += 1
            except OSError as e:
                failed += 1
                logger.error("Error saving data for %s: %s", repo, e)

    logger.info("Fetch complete: %d succeeded, %d failed", succeeded, failed)
    return succeeded, failed


def resolve_github_token() -> Optional[str]:
    """
    Find a GitHub token: PERSONAL_ACCESS_TOKEN, GITHUB_TOKEN, then the
    GitHub CLI (``gh auth token``).
    """
    for var in TOKEN_ENV_VARS:
        token = os.environ.get(var)
        if token:
            return token

    try:
        result = subprocess.run(
            ["gh", "auth", "token"],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError:
        return None

    if result.returncode != 0:
        return None
    return result.stdout.strip() or None
