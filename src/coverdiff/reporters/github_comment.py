"""GitHub comment reporter for posting coverage deltas to pull requests.

The comment is identified by its ``### coverage diff`` heading: an earlier
comment with that heading is edited in place, and nothing is sent at all
when the rendered body is unchanged.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from coverdiff.utils.git import GitHubAPI, GitHubAPIError, get_pr_info_from_env

if TYPE_CHECKING:
    from coverdiff.config import GitHubConfig
    from coverdiff.utils.git import GitHubPRInfo

logger = logging.getLogger(__name__)

COMMENT_MARKER = "### coverage diff"


def format_comment_body(summary: str, table: str) -> str:
    """Return the markdown body for a coverage comment."""
    return f"{COMMENT_MARKER}\n{summary}\n\n```\n{table}\n```\n"


class GitHubCommentReporter:
    """Reporter that posts a coverage diff as a pull request comment."""

    def __init__(self, github_token: str | None = None, *, api: GitHubAPI | None = None) -> None:
        """Initialize the GitHub comment reporter.

        Args:
            github_token: GitHub access token. If not provided, will try to read
                from the GITHUB_TOKEN environment variable.
            api: Preconfigured API client (takes precedence over ``github_token``).

        Raises:
            GitHubAPIError: If no token is available.
        """
        self._api = api or GitHubAPI(token=github_token)

    def post_coverage_diff(self, pr_info: GitHubPRInfo, summary: str, table: str) -> dict[str, str]:
        """Create or update the coverage comment on a pull request.

        Args:
            pr_info: Pull request information.
            summary: One-line coverage summary.
            table: Fixed-width coverage table.

        Returns:
            Dict with status (``created``, ``updated`` or ``unchanged``) and comment URL.

        Raises:
            GitHubAPIError: If talking to GitHub fails.
        """
        logger.info(
            "Posting coverage diff to PR #%d in %s/%s",
            pr_info.pr_number,
            pr_info.owner,
            pr_info.repo,
        )

        body = format_comment_body(summary, table)

        for comment in self._api.list_comments(pr_info):
            existing = comment.get("body")
            if existing is None:
                continue

            if existing == body:
                logger.info("Coverage comment %s is already up to date", comment.get("id"))
                return {"status": "unchanged", "comment_url": comment.get("html_url", "")}

            if existing.startswith(COMMENT_MARKER):
                logger.info("Updating existing comment %s", comment["id"])
                result = self._api.update_comment(pr_info, comment["id"], body)
                return {"status": "updated", "comment_url": result.get("html_url", "")}

        logger.info("Creating new coverage comment")
        result = self._api.create_comment(pr_info, body)
        return {"status": "created", "comment_url": result.get("html_url", "")}


def post_coverage_diff_from_env(summary: str, table: str, github: GitHubConfig) -> bool:
    """Post a coverage diff using configuration and CI environment.

    Args:
        summary: One-line coverage summary.
        table: Fixed-width coverage table.
        github: GitHub settings (token, repository, pull request).

    Returns:
        True if the comment was created, updated or already current, False otherwise.
    """
    if not github.enabled:
        logger.debug("GitHub reporting disabled")
        return False

    if not github.is_configured:
        logger.info("No GitHub token or repository, unable to report back to pull request")
        return False

    pr_info = get_pr_info_from_env(github.repository, github.pull_request)
    if pr_info is None:
        return False

    try:
        api = GitHubAPI(token=github.token, api_base=github.api_url)
        result = GitHubCommentReporter(api=api).post_coverage_diff(pr_info, summary, table)
    except GitHubAPIError as exc:
        logger.error("Failed to post coverage comment: %s", exc)
        return False

    logger.info("Coverage comment %s: %s", result["status"], result["comment_url"])
    return True
