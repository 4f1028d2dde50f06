"""GitHub API utilities for coverdiff.

Only the pieces needed to publish a coverage comment on a pull request:
resolving the pull request from the environment and listing, creating and
editing issue comments.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any

import requests

logger = logging.getLogger(__name__)

# GitHub API constants
GITHUB_API_BASE = "https://api.github.com"
_GITHUB_AUTH_ENV_KEY = "GITHUB_" + "TOKEN"
_REQUEST_TIMEOUT = 30
_COMMENTS_PER_PAGE = 100

# Expected number of parts when splitting "owner/repo"
_OWNER_REPO_PARTS = 2


@dataclass
class GitHubPRInfo:
    """Information about a GitHub pull request."""

    owner: str
    """Repository owner (username or organization)."""

    repo: str
    """Repository name."""

    pr_number: int
    """Pull request number."""


class GitHubAPIError(Exception):
    """Exception raised when GitHub API operations fail."""


class GitHubAPI:
    """Client for the GitHub issue comments API."""

    def __init__(self, token: str | None = None, *, api_base: str = GITHUB_API_BASE) -> None:
        """Initialize the GitHub API client.

        Args:
            token: GitHub access token. If not provided, will try to read
                from the GITHUB_TOKEN environment variable.
            api_base: API root, overridable for GitHub Enterprise.

        Raises:
            GitHubAPIError: If no token is available.
        """
        self._token = token or os.environ.get(_GITHUB_AUTH_ENV_KEY)
        if not self._token:
            raise GitHubAPIError(
                f"GitHub token required. Set {_GITHUB_AUTH_ENV_KEY} environment variable "
                "or pass token to constructor."
            )

        self._api_base = api_base.rstrip("/")
        self._session_headers = {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }

    def list_comments(self, pr_info: GitHubPRInfo) -> list[dict[str, Any]]:
        """Return all comments on a pull request, oldest first.

        Raises:
            GitHubAPIError: If the API request fails.
        """
        url = (
            f"{self._api_base}/repos/{pr_info.owner}/{pr_info.repo}/"
            f"issues/{pr_info.pr_number}/comments"
        )

        comments: list[dict[str, Any]] = []
        page = 1
        while True:
            batch: list[dict[str, Any]] = self._get(
                url, params={"per_page": _COMMENTS_PER_PAGE, "page": page}
            )
            comments.extend(batch)
            if len(batch) < _COMMENTS_PER_PAGE:
                return comments
            page += 1

    def create_comment(self, pr_info: GitHubPRInfo, body: str) -> dict[str, Any]:
        """Create a new comment on a pull request.

        Raises:
            GitHubAPIError: If the API request fails.
        """
        url = (
            f"{self._api_base}/repos/{pr_info.owner}/{pr_info.repo}/"
            f"issues/{pr_info.pr_number}/comments"
        )

        result: dict[str, Any] = self._post(url, {"body": body})
        return result

    def update_comment(self, pr_info: GitHubPRInfo, comment_id: int, body: str) -> dict[str, Any]:
        """Replace the body of an existing comment.

        Raises:
            GitHubAPIError: If the API request fails.
        """
        url = f"{self._api_base}/repos/{pr_info.owner}/{pr_info.repo}/issues/comments/{comment_id}"

        result: dict[str, Any] = self._patch(url, {"body": body})
        return result

    def _get(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """Make a GET request to the GitHub API.

        Raises:
            GitHubAPIError: If the request fails.
        """
        try:
            response = requests.get(
                url, params=params, headers=self._session_headers, timeout=_REQUEST_TIMEOUT
            )
            response.raise_for_status()
            return response.json()
        except Exception as exc:
            raise GitHubAPIError(f"GET request failed: {exc}") from exc

    def _post(self, url: str, data: dict[str, Any]) -> Any:
        """Make a POST request to the GitHub API.

        Raises:
            GitHubAPIError: If the request fails.
        """
        try:
            response = requests.post(
                url, json=data, headers=self._session_headers, timeout=_REQUEST_TIMEOUT
            )
            response.raise_for_status()
            return response.json()
        except Exception as exc:
            raise GitHubAPIError(f"POST request failed: {exc}") from exc

    def _patch(self, url: str, data: dict[str, Any]) -> Any:
        """Make a PATCH request to the GitHub API.

        Raises:
            GitHubAPIError: If the request fails.
        """
        try:
            response = requests.patch(
                url, json=data, headers=self._session_headers, timeout=_REQUEST_TIMEOUT
            )
            response.raise_for_status()
            return response.json()
        except Exception as exc:
            raise GitHubAPIError(f"PATCH request failed: {exc}") from exc


def parse_repository(repository: str) -> tuple[str, str] | None:
    """Split ``owner/repo`` into its parts, or return None when malformed."""
    parts = repository.split("/")
    if len(parts) != _OWNER_REPO_PARTS or not all(parts):
        return None
    return parts[0], parts[1]


def _pr_number_from_ref(ref: str | None) -> int | None:
    """Extract the PR number from a ``refs/pull/<number>/merge`` ref."""
    if not ref or not ref.startswith("refs/pull/"):
        return None
    try:
        return int(ref.split("/")[2])
    except (IndexError, ValueError):
        return None


def get_pr_info_from_env(
    repository: str | None = None,
    pull_request: str | None = None,
) -> GitHubPRInfo | None:
    """Resolve the pull request to comment on.

    Explicit arguments win over ``GITHUB_REPOSITORY`` and
    ``GITHUB_PULL_REQUEST_ID``; when no pull request number is set the GitHub
    Actions ``GITHUB_REF`` (``refs/pull/<number>/merge``) is used.

    Returns:
        GitHubPRInfo when a repository and pull request number are known, None otherwise.
    """
    repository = repository or os.environ.get("GITHUB_REPOSITORY", "")
    if not repository:
        logger.info("No GITHUB_REPOSITORY set, not reporting to GitHub")
        return None

    owner_repo = parse_repository(repository)
    if owner_repo is None:
        logger.warning("GITHUB_REPOSITORY %r is not in owner/repo form", repository)
        return None

    pull_request = pull_request or os.environ.get("GITHUB_PULL_REQUEST_ID", "")
    if pull_request:
        try:
            pr_number = int(pull_request)
        except ValueError:
            logger.warning("Pull request id %r is not a valid number", pull_request)
            return None
    else:
        pr_number_from_ref = _pr_number_from_ref(os.environ.get("GITHUB_REF"))
        if pr_number_from_ref is None:
            logger.info("No pull request id available, not reporting to GitHub")
            return None
        pr_number = pr_number_from_ref

    owner, repo = owner_repo
    return GitHubPRInfo(owner=owner, repo=repo, pr_number=pr_number)
