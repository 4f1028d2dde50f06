"""Tests for GitHub comment reporter."""

from __future__ import annotations

import os
from unittest import mock

import pytest

from coverdiff.config import GitHubConfig
from coverdiff.reporters.github_comment import (
    COMMENT_MARKER,
    GitHubCommentReporter,
    format_comment_body,
    post_coverage_diff_from_env,
)
from coverdiff.utils.git import GitHubAPIError, GitHubPRInfo

_SUMMARY = "Coverage increased by 7.92%."
_TABLE = "package  before  after  delta\ntotal:  33.33%  41.25%  +7.92%"


@pytest.fixture
def mock_api() -> mock.Mock:
    """Create a mocked GitHub API."""
    api_mock = mock.Mock()
    api_mock.list_comments.return_value = []
    api_mock.create_comment.return_value = {
        "id": 123,
        "html_url": "https://github.com/owner/repo/pull/42#issuecomment-123",
    }
    api_mock.update_comment.return_value = {
        "id": 99,
        "html_url": "https://github.com/owner/repo/pull/42#issuecomment-99",
    }
    return api_mock


@pytest.fixture
def sample_pr_info() -> GitHubPRInfo:
    """Create sample PR info."""
    return GitHubPRInfo(owner="test-owner", repo="test-repo", pr_number=42)


class TestFormatCommentBody:
    def test_layout(self) -> None:
        body = format_comment_body(_SUMMARY, _TABLE)
        assert body == f"### coverage diff\n{_SUMMARY}\n\n```\n{_TABLE}\n```\n"

    def test_starts_with_marker(self) -> None:
        assert format_comment_body(_SUMMARY, _TABLE).startswith(COMMENT_MARKER)


class TestGitHubCommentReporter:
    def test_creates_comment_when_none_exists(
        self, mock_api: mock.Mock, sample_pr_info: GitHubPRInfo
    ) -> None:
        reporter = GitHubCommentReporter(api=mock_api)
        result = reporter.post_coverage_diff(sample_pr_info, _SUMMARY, _TABLE)

        assert result["status"] == "created"
        assert result["comment_url"].endswith("issuecomment-123")
        mock_api.create_comment.assert_called_once_with(
            sample_pr_info, format_comment_body(_SUMMARY, _TABLE)
        )
        mock_api.update_comment.assert_not_called()

    def test_updates_existing_coverage_comment(
        self, mock_api: mock.Mock, sample_pr_info: GitHubPRInfo
    ) -> None:
        mock_api.list_comments.return_value = [
            {"id": 1, "body": "LGTM"},
            {"id": None, "body": None},
            {"id": 99, "body": "### coverage diff\nCoverage unchanged.\n"},
        ]
        reporter = GitHubCommentReporter(api=mock_api)
        result = reporter.post_coverage_diff(sample_pr_info, _SUMMARY, _TABLE)

        assert result["status"] == "updated"
        mock_api.update_comment.assert_called_once_with(
            sample_pr_info, 99, format_comment_body(_SUMMARY, _TABLE)
        )
        mock_api.create_comment.assert_not_called()

    def test_identical_comment_is_left_alone(
        self, mock_api: mock.Mock, sample_pr_info: GitHubPRInfo
    ) -> None:
        mock_api.list_comments.return_value = [
            {
                "id": 5,
                "body": format_comment_body(_SUMMARY, _TABLE),
                "html_url": "https://github.com/owner/repo/pull/42#issuecomment-5",
            }
        ]
        reporter = GitHubCommentReporter(api=mock_api)
        result = reporter.post_coverage_diff(sample_pr_info, _SUMMARY, _TABLE)

        assert result == {
            "status": "unchanged",
            "comment_url": "https://github.com/owner/repo/pull/42#issuecomment-5",
        }
        mock_api.update_comment.assert_not_called()
        mock_api.create_comment.assert_not_called()

    def test_api_errors_propagate(
        self, mock_api: mock.Mock, sample_pr_info: GitHubPRInfo
    ) -> None:
        mock_api.list_comments.side_effect = GitHubAPIError("GET request failed")
        reporter = GitHubCommentReporter(api=mock_api)
        with pytest.raises(GitHubAPIError):
            reporter.post_coverage_diff(sample_pr_info, _SUMMARY, _TABLE)

    def test_requires_token(self) -> None:
        with (
            mock.patch.dict(os.environ, {}, clear=True),
            pytest.raises(GitHubAPIError, match="GitHub token required"),
        ):
            GitHubCommentReporter()


class TestPostCoverageDiffFromEnv:
    def _config(self, **overrides: str | bool) -> GitHubConfig:
        values: dict[str, str | bool] = {
            "token": "test-token",
            "repository": "owner/repo",
            "pull_request": "42",
        }
        values.update(overrides)
        return GitHubConfig(**values)  # type: ignore[arg-type]

    @mock.patch("coverdiff.reporters.github_comment.GitHubCommentReporter")
    def test_posts_with_complete_settings(self, mock_reporter_cls: mock.Mock) -> None:
        mock_reporter_cls.return_value.post_coverage_diff.return_value = {
            "status": "created",
            "comment_url": "https://github.com/owner/repo/pull/42#issuecomment-1",
        }
        with mock.patch.dict(os.environ, {}, clear=True):
            assert post_coverage_diff_from_env(_SUMMARY, _TABLE, self._config()) is True

        args = mock_reporter_cls.return_value.post_coverage_diff.call_args[0]
        assert args[0] == GitHubPRInfo(owner="owner", repo="repo", pr_number=42)
        assert args[1:] == (_SUMMARY, _TABLE)

    def test_disabled(self) -> None:
        assert post_coverage_diff_from_env(_SUMMARY, _TABLE, self._config(enabled=False)) is False

    def test_missing_token(self) -> None:
        assert post_coverage_diff_from_env(_SUMMARY, _TABLE, self._config(token="")) is False

    def test_missing_repository(self) -> None:
        with mock.patch.dict(os.environ, {"GITHUB_REPOSITORY": "owner/repo"}, clear=True):
            config = self._config(repository="")
            assert post_coverage_diff_from_env(_SUMMARY, _TABLE, config) is False

    def test_missing_pull_request(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            config = self._config(pull_request="")
            assert post_coverage_diff_from_env(_SUMMARY, _TABLE, config) is False

    def test_invalid_pull_request(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            config = self._config(pull_request="not-a-number")
            assert post_coverage_diff_from_env(_SUMMARY, _TABLE, config) is False

    @mock.patch("coverdiff.reporters.github_comment.GitHubCommentReporter")
    def test_api_error_returns_false(self, mock_reporter_cls: mock.Mock) -> None:
        mock_reporter_cls.return_value.post_coverage_diff.side_effect = GitHubAPIError("boom")
        with mock.patch.dict(os.environ, {}, clear=True):
            assert post_coverage_diff_from_env(_SUMMARY, _TABLE, self._config()) is False
