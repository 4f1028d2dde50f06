"""Configuration parsing from ``.coverdiff.yml``."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from coverdiff.reporters.table import DEFAULT_PACKAGE_WIDTH
from coverdiff.utils.git import parse_repository

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".coverdiff.yml"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")

_MIN_PACKAGE_WIDTH = 10


def _resolve_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with environment variable values."""

    def _replace(match: re.Match[str]) -> str:
        var = match.group(1)
        resolved = os.environ.get(var)
        if resolved is None:
            logger.warning("Environment variable %s is not set (referenced in config)", var)
            return ""
        return resolved

    return _ENV_VAR_RE.sub(_replace, value)


def _resolve_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively resolve environment variables in a dictionary."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            result[key] = _resolve_env_vars(value)
        elif isinstance(value, dict):
            result[key] = _resolve_dict(value)
        elif isinstance(value, list):
            result[key] = [
                _resolve_env_vars(item) if isinstance(item, str) else item for item in value
            ]
        else:
            result[key] = value
    return result


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _as_int(value: Any, default: int, *, key: str) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{key} must be an integer (got: {value!r})") from e


def _as_str(value: Any, default: str) -> str:
    # An empty YAML key (`token:`) loads as None and counts as unset
    if value is None:
        return default
    return str(value)


@dataclass
class ReportConfig:
    """Table rendering configuration."""

    package_width: int = DEFAULT_PACKAGE_WIDTH
    """Width of the package column; longer names are truncated."""

    hide_unchanged: bool = True
    """Leave the delta column blank for packages whose coverage did not move."""

    module_roots: list[str] = field(default_factory=list)
    """Module paths stripped from package names (empty = read go.mod/go.work)."""

    list_packages: bool = False
    """Add rows for every package reported by ``go list ./...``."""


@dataclass
class GitHubConfig:
    """Pull request comment configuration."""

    enabled: bool = True
    """Publish the report as a pull request comment when possible."""

    token: str = ""
    """Access token (supports ${ENV_VAR} expansion, defaults to GITHUB_TOKEN)."""

    repository: str = ""
    """Repository in ``owner/repo`` form (defaults to GITHUB_REPOSITORY)."""

    pull_request: str = ""
    """Pull request number (defaults to GITHUB_PULL_REQUEST_ID)."""

    api_url: str = "https://api.github.com"
    """GitHub API root."""

    @property
    def is_configured(self) -> bool:
        """Return True when enough info is present to post a comment."""
        return bool(self.enabled and self.token and self.repository)


@dataclass
class CoverdiffConfig:
    """Top-level coverdiff configuration."""

    root: str
    """Project root directory."""

    report: ReportConfig = field(default_factory=ReportConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)

    raw: dict[str, Any] = field(default_factory=dict)
    """The resolved YAML content, as loaded."""


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    value = raw.get(name, {})
    if not isinstance(value, dict):
        logger.warning("Ignoring %s section in %s: expected a mapping", name, CONFIG_FILE_NAME)
        return {}
    return value


def _parse_report_config(raw: dict[str, Any]) -> ReportConfig:
    roots_raw = raw.get("module_roots", [])
    if isinstance(roots_raw, str):
        roots_raw = [roots_raw]
    return ReportConfig(
        package_width=_as_int(
            raw.get("package_width"), DEFAULT_PACKAGE_WIDTH, key="report.package_width"
        ),
        hide_unchanged=_as_bool(raw.get("hide_unchanged"), default=True),
        module_roots=[str(r) for r in roots_raw if str(r).strip()]
        if isinstance(roots_raw, list)
        else [],
        list_packages=_as_bool(raw.get("list_packages"), default=False),
    )


def _parse_github_config(raw: dict[str, Any]) -> GitHubConfig:
    return GitHubConfig(
        enabled=_as_bool(raw.get("enabled"), default=True),
        token=_as_str(raw.get("token"), os.environ.get("GITHUB_TOKEN", "")),
        repository=_as_str(raw.get("repository"), os.environ.get("GITHUB_REPOSITORY", "")),
        pull_request=_as_str(
            raw.get("pull_request"), os.environ.get("GITHUB_PULL_REQUEST_ID", "")
        ),
        api_url=_as_str(raw.get("api_url"), "https://api.github.com"),
    )


def load_config(root: str | Path) -> CoverdiffConfig:
    """Load and parse ``.coverdiff.yml`` from ``root``.

    Falls back to defaults and environment variables when the file is
    missing or incomplete.
    """
    root_path = Path(root).resolve()
    config_file = root_path / CONFIG_FILE_NAME

    raw: dict[str, Any] = {}
    if config_file.is_file():
        parsed = yaml.safe_load(config_file.read_text(encoding="utf-8"))
        if isinstance(parsed, dict):
            raw = _resolve_dict(parsed)
        elif parsed is not None:
            logger.warning("Ignoring %s: top level must be a mapping", config_file)

    return CoverdiffConfig(
        root=str(root_path),
        report=_parse_report_config(_section(raw, "report")),
        github=_parse_github_config(_section(raw, "github")),
        raw=raw,
    )


def _validate_report_config(report: ReportConfig) -> list[str]:
    errors: list[str] = []
    if report.package_width < _MIN_PACKAGE_WIDTH:
        errors.append(
            f"report.package_width must be at least {_MIN_PACKAGE_WIDTH} "
            f"(got: {report.package_width})"
        )
    return errors


def _validate_github_config(github: GitHubConfig) -> list[str]:
    errors: list[str] = []
    if github.repository and parse_repository(github.repository) is None:
        errors.append(f"github.repository must be in owner/repo form (got: {github.repository})")
    if github.pull_request and not github.pull_request.isdigit():
        errors.append(f"github.pull_request must be a number (got: {github.pull_request})")
    return errors


def validate_config(config: CoverdiffConfig) -> list[str]:
    """Validate the configuration and return a list of error messages.

    Returns an empty list if the configuration is valid.
    """
    errors: list[str] = []
    errors.extend(_validate_report_config(config.report))
    errors.extend(_validate_github_config(config.github))
    return errors
