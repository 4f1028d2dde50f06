"""coverdiff CLI: top-level command group."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
import yaml
from rich.console import Console

from coverdiff import __version__
from coverdiff.adapters.coverage import FormatError, GoCoverAdapter
from coverdiff.analyzers.delta import diff_profiles
from coverdiff.config import load_config, validate_config
from coverdiff.reporters.github_comment import post_coverage_diff_from_env
from coverdiff.reporters.table import build_table, diff_to_dict, summarize
from coverdiff.reporters.terminal import reporter
from coverdiff.utils.gomod import find_module_roots, list_go_packages

if TYPE_CHECKING:
    from coverdiff.models.coverage import Profile

logger = logging.getLogger(__name__)
console = Console()

# Masking thresholds
_MIN_MASKED_VALUE_LENGTH = 8

_SENSITIVE_KEYS = {"token"}


def _mask_sensitive_values(config_dict: dict[str, Any]) -> dict[str, Any]:
    """Recursively mask sensitive values in a configuration dict."""
    result: dict[str, Any] = {}
    for key, value in config_dict.items():
        if key in _SENSITIVE_KEYS and isinstance(value, str) and value:
            if len(value) > _MIN_MASKED_VALUE_LENGTH:
                result[key] = f"{value[:4]}...{value[-4:]}"
            else:
                result[key] = "***"
        elif isinstance(value, dict):
            result[key] = _mask_sensitive_values(value)
        else:
            result[key] = value
    return result


def _config_to_dict(config: Any) -> dict[str, Any]:
    """Convert CoverdiffConfig to a dictionary for display."""
    result = asdict(config)
    # The raw YAML duplicates the parsed sections
    result.pop("raw", None)
    return result


def _load_profile(adapter: GoCoverAdapter, path: str) -> Profile:
    """Parse one profile, turning failures into a CLI abort."""
    try:
        return adapter.parse_coverage_file(Path(path))
    except FormatError as e:
        reporter.print_error(f"{path}: {e}")
        raise click.Abort from e
    except OSError as e:
        reporter.print_error(f"Failed to read {path}: {e}")
        raise click.Abort from e


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.version_option(version=__version__, prog_name="coverdiff")
def cli(*, verbose: bool) -> None:
    """Compare Go cover profiles package by package."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@cli.command("diff")
@click.argument("base", type=click.Path(exists=True, dir_okay=False))
@click.argument("head", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Project root (location of go.mod and .coverdiff.yml).",
)
@click.option(
    "--root",
    "roots",
    multiple=True,
    help="Module path to strip from package names (repeatable). Defaults to go.mod/go.work.",
)
@click.option(
    "--show-unchanged",
    is_flag=True,
    help="Print +0.00% instead of a blank delta for unchanged packages.",
)
@click.option(
    "--list-packages",
    is_flag=True,
    help="Include packages without coverage data (runs `go list ./...`).",
)
@click.option("--no-comment", is_flag=True, help="Do not post a pull request comment.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json", "rich"]),
    default="text",
    show_default=True,
    help="Output format.",
)
def diff_command(
    base: str,
    head: str,
    path: str,
    roots: tuple[str, ...],
    output_format: str,
    *,
    show_unchanged: bool,
    list_packages: bool,
    no_comment: bool,
) -> None:
    """Compare BASE and HEAD cover profiles.

    Example:
      coverdiff diff base.out head.out
      coverdiff diff base.out head.out --format json --no-comment
    """
    try:
        config = load_config(path)
    except (yaml.YAMLError, ValueError) as e:
        reporter.print_error(f"Failed to load configuration: {e}")
        raise click.Abort from e

    errors = validate_config(config)
    if errors:
        for error in errors:
            reporter.print_error(f"Invalid configuration: {error}")
        raise click.Abort

    # Both profiles must parse before anything is printed or published
    adapter = GoCoverAdapter()
    base_profile = _load_profile(adapter, base)
    head_profile = _load_profile(adapter, head)

    project_root = Path(path)
    module_roots = list(roots) or config.report.module_roots or find_module_roots(project_root)
    hide_unchanged = config.report.hide_unchanged and not show_unchanged

    extra_packages: list[str] = []
    if list_packages or config.report.list_packages:
        extra_packages = list_go_packages(project_root)

    diff = diff_profiles(base_profile, head_profile, extra_packages=extra_packages)
    summary = summarize(diff.total.base, diff.total.head)
    table = build_table(
        diff,
        roots=module_roots,
        hide_unchanged=hide_unchanged,
        width=config.report.package_width,
    )

    if output_format == "json":
        click.echo(json.dumps(diff_to_dict(diff, module_roots), indent=2))
    elif output_format == "rich":
        reporter.print_coverage_diff(diff, module_roots, hide_unchanged=hide_unchanged)
    else:
        click.echo(summary)
        click.echo()
        click.echo(table)

    if no_comment:
        return
    if post_coverage_diff_from_env(summary, table, config.github):
        reporter.print_success("Posted coverage comment")
    else:
        logger.debug("Coverage comment not posted")


@cli.command("show")
@click.argument("profile", type=click.Path(exists=True, dir_okay=False))
@click.option("--files", is_flag=True, help="Break packages down by file.")
def show_command(profile: str, *, files: bool) -> None:
    """Show per-package coverage of a single PROFILE."""
    parsed = _load_profile(GoCoverAdapter(), profile)
    reporter.print_profile_summary(parsed, files=files)


@cli.group("config")
def config_group() -> None:
    """Inspect `.coverdiff.yml` configuration."""


@config_group.command("show")
@click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Project root directory.",
)
@click.option("--json-output", "as_json", is_flag=True, help="Output as JSON instead of YAML.")
@click.option("--no-mask", is_flag=True, help="Show the GitHub token unmasked.")
def config_show(path: str, *, as_json: bool, no_mask: bool) -> None:
    """Display resolved configuration with the token masked."""
    try:
        config = load_config(path)
    except (yaml.YAMLError, ValueError) as e:
        reporter.print_error(f"Failed to load configuration: {e}")
        raise click.Abort from e

    config_dict = _config_to_dict(config)
    if not no_mask:
        config_dict = _mask_sensitive_values(config_dict)

    if as_json:
        click.echo(json.dumps(config_dict, indent=2))
    else:
        console.print("[bold cyan]Configuration:[/bold cyan]")
        click.echo(yaml.safe_dump(config_dict, sort_keys=False, default_flow_style=False))


@config_group.command("validate")
@click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Project root directory.",
)
def config_validate(path: str) -> None:
    """Validate `.coverdiff.yml` configuration."""
    try:
        config = load_config(path)
    except (yaml.YAMLError, ValueError) as e:
        reporter.print_error(f"Failed to load configuration: {e}")
        raise click.Abort from e

    errors = validate_config(config)
    if not errors:
        reporter.print_success("Configuration is valid!")
        return

    reporter.print_error(f"Found {len(errors)} configuration error(s):")
    for idx, error in enumerate(errors, start=1):
        console.print(f"  {idx}. [red]{error}[/red]")
    raise click.Abort
