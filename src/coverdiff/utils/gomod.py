"""Go module helpers: module paths from go.mod/go.work and package discovery."""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

_GO_MOD = "go.mod"
_GO_WORK = "go.work"
_DEFAULT_LIST_TIMEOUT = 120.0

_MODULE_RE = re.compile(r"^\s*module\s+\"?([^\s\"]+)\"?", re.MULTILINE)
_USE_LINE_RE = re.compile(r"^\s*use\s+(?!\()\"?([^\s\"]+)\"?", re.MULTILINE)
_USE_BLOCK_RE = re.compile(r"^\s*use\s*\((.*?)\)", re.MULTILINE | re.DOTALL)


def _go_executable() -> str:
    """Resolve the full path to the ``go`` executable."""
    return shutil.which("go") or "go"


def read_module_path(go_mod: Path) -> str | None:
    """Return the module path declared by a go.mod file, or None if unavailable."""
    try:
        text = go_mod.read_text(encoding="utf-8")
    except OSError:
        logger.debug("No readable go.mod at %s", go_mod)
        return None

    match = _MODULE_RE.search(text)
    if not match:
        logger.warning("No module directive found in %s", go_mod)
        return None
    return match.group(1)


def _workspace_dirs(go_work: Path) -> list[str]:
    """Return the directories listed by ``use`` directives in a go.work file."""
    try:
        text = go_work.read_text(encoding="utf-8")
    except OSError:
        return []

    dirs = [m.group(1) for m in _USE_LINE_RE.finditer(text)]
    for block in _USE_BLOCK_RE.finditer(text):
        for raw in block.group(1).splitlines():
            entry = raw.split("//", 1)[0].strip().strip('"')
            if entry:
                dirs.append(entry)
    return dirs


def find_module_roots(project_root: Path) -> list[str]:
    """Return the module paths under ``project_root``.

    Includes the root go.mod module and every module used by go.work.
    An empty list means package names are displayed unmodified.
    """
    roots: list[str] = []

    root_module = read_module_path(project_root / _GO_MOD)
    if root_module:
        roots.append(root_module)

    for use_dir in _workspace_dirs(project_root / _GO_WORK):
        module = read_module_path(project_root / use_dir / _GO_MOD)
        if module and module not in roots:
            roots.append(module)

    logger.debug("Module roots for %s: %s", project_root, roots)
    return roots


def list_go_packages(project_root: Path, timeout: float = _DEFAULT_LIST_TIMEOUT) -> list[str]:
    """Return the import paths of all packages in the module (``go list ./...``).

    Failures are logged and yield an empty list; package discovery only adds
    rows for packages without coverage data.
    """
    try:
        result = subprocess.run(
            [_go_executable(), "list", "./..."],
            cwd=project_root,
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout,
        )
    except FileNotFoundError:
        logger.warning("go not found, skipping package discovery")
        return []
    except subprocess.TimeoutExpired:
        logger.warning("go list timed out after %.1fs", timeout)
        return []

    if result.returncode != 0:
        logger.warning("go list failed: %s", result.stderr.strip())
        return []

    return [line.strip() for line in result.stdout.splitlines() if line.strip()]
