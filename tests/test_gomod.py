"""Tests for Go module helpers (utils/gomod.py)."""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest import mock

from coverdiff.utils.gomod import find_module_roots, list_go_packages, read_module_path


def _write_file(root: Path, rel: str, content: str) -> Path:
    f = root / rel
    f.parent.mkdir(parents=True, exist_ok=True)
    f.write_text(content, encoding="utf-8")
    return f


class TestReadModulePath:
    def test_reads_module_directive(self, tmp_path: Path) -> None:
        go_mod = _write_file(
            tmp_path,
            "go.mod",
            "module github.com/flipgroup/golang-cover-diff\n\ngo 1.16\n\nrequire (\n)\n",
        )
        assert read_module_path(go_mod) == "github.com/flipgroup/golang-cover-diff"

    def test_quoted_module(self, tmp_path: Path) -> None:
        go_mod = _write_file(tmp_path, "go.mod", 'module "example.com/quoted"\n')
        assert read_module_path(go_mod) == "example.com/quoted"

    def test_missing_file(self, tmp_path: Path) -> None:
        assert read_module_path(tmp_path / "go.mod") is None

    def test_no_module_directive(self, tmp_path: Path) -> None:
        go_mod = _write_file(tmp_path, "go.mod", "go 1.21\n")
        assert read_module_path(go_mod) is None


class TestFindModuleRoots:
    def test_single_module(self, tmp_path: Path) -> None:
        _write_file(tmp_path, "go.mod", "module example.com/app\n")
        assert find_module_roots(tmp_path) == ["example.com/app"]

    def test_no_go_mod(self, tmp_path: Path) -> None:
        assert find_module_roots(tmp_path) == []

    def test_workspace_modules(self, tmp_path: Path) -> None:
        _write_file(tmp_path, "go.work", "go 1.21\n\nuse (\n\t./api // service\n\t./tools\n)\n")
        _write_file(tmp_path, "api/go.mod", "module example.com/mono/api\n")
        _write_file(tmp_path, "tools/go.mod", "module example.com/mono/tools\n")
        assert find_module_roots(tmp_path) == ["example.com/mono/api", "example.com/mono/tools"]

    def test_workspace_single_use_and_root_module(self, tmp_path: Path) -> None:
        _write_file(tmp_path, "go.mod", "module example.com/mono\n")
        _write_file(tmp_path, "go.work", "go 1.21\nuse .\nuse ./lib\n")
        _write_file(tmp_path, "lib/go.mod", "module example.com/mono/lib\n")
        assert find_module_roots(tmp_path) == ["example.com/mono", "example.com/mono/lib"]

    def test_workspace_module_without_go_mod_is_skipped(self, tmp_path: Path) -> None:
        _write_file(tmp_path, "go.work", "use ./missing\n")
        assert find_module_roots(tmp_path) == []


class TestListGoPackages:
    @mock.patch("coverdiff.utils.gomod.subprocess.run")
    def test_returns_packages(self, mock_run: mock.Mock, tmp_path: Path) -> None:
        mock_run.return_value = subprocess.CompletedProcess(
            args=["go", "list", "./..."],
            returncode=0,
            stdout="example.com/app\nexample.com/app/internal/db\n",
            stderr="",
        )
        assert list_go_packages(tmp_path) == ["example.com/app", "example.com/app/internal/db"]
        assert mock_run.call_args.kwargs["cwd"] == tmp_path

    @mock.patch("coverdiff.utils.gomod.subprocess.run")
    def test_failure_returns_empty(self, mock_run: mock.Mock, tmp_path: Path) -> None:
        mock_run.return_value = subprocess.CompletedProcess(
            args=["go", "list", "./..."], returncode=1, stdout="", stderr="no Go files"
        )
        assert list_go_packages(tmp_path) == []

    @mock.patch("coverdiff.utils.gomod.subprocess.run", side_effect=FileNotFoundError)
    def test_missing_go(self, _mock_run: mock.Mock, tmp_path: Path) -> None:
        assert list_go_packages(tmp_path) == []

    @mock.patch(
        "coverdiff.utils.gomod.subprocess.run",
        side_effect=subprocess.TimeoutExpired(cmd="go list", timeout=1),
    )
    def test_timeout(self, _mock_run: mock.Mock, tmp_path: Path) -> None:
        assert list_go_packages(tmp_path, timeout=1) == []
