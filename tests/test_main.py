"""Unit tests for pydepth.__main__ (``python -m pydepth``).

Test Coverage:
- Commands dispatched through main() against a package on disk
- Exit codes for missing packages and usage errors
- Startup report when the CLI cannot be imported
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest

from pydepth.__main__ import _print_startup_error, main
from pydepth.__version__ import __version__
from pydepth.utils import disable_logging, reconfigure_console


@pytest.fixture(autouse=True)
def plain_output(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    monkeypatch.setenv("NO_COLOR", "1")
    reconfigure_console()
    yield
    disable_logging()
    reconfigure_console()


@pytest.fixture
def webapp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create ``webapp`` importing a local ``routes`` module and json."""
    pkg = tmp_path / "webapp"
    pkg.mkdir()
    (pkg / "__init__.py").write_text("import json\nimport routes\n")
    (tmp_path / "routes.py").write_text("import re\n")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _run(*args: str) -> int:
    """Run main() as ``python -m pydepth ARGS`` and return the exit code."""
    with patch.object(sys, "argv", ["pydepth", *args]):
        try:
            return main()
        except SystemExit as exc:
            return exc.code


@pytest.mark.unit
class TestModuleEntryPoint:
    """Tests for main() running the real CLI."""

    def test_tree_as_json(self, webapp: Path, capsys: pytest.CaptureFixture) -> None:
        """Test ``python -m pydepth tree --json`` prints the resolved tree."""
        code = _run("tree", "webapp", "--json")

        out = capsys.readouterr().out
        assert code == 0
        assert '"name": "webapp"' in out
        assert '"name": "routes"' in out
        assert '"name": "json"' in out

    def test_explain_chain(self, webapp: Path, capsys: pytest.CaptureFixture) -> None:
        """Test ``python -m pydepth explain`` prints the import chain."""
        code = _run("explain", "webapp", "re")

        assert code == 0
        assert "webapp -> routes -> re" in capsys.readouterr().out

    def test_missing_root_exits_one(self, webapp: Path) -> None:
        """Test an unknown root package gives exit code 1."""
        assert _run("tree", "webapp_does_not_exist") == 1

    def test_unknown_option_exits_two(self, webapp: Path) -> None:
        """Test a usage error gives click's exit code."""
        assert _run("tree", "webapp", "--no-such-flag") == 2

    def test_version(self, capsys: pytest.CaptureFixture) -> None:
        """Test --version goes through main() and succeeds."""
        code = _run("--version")

        assert code == 0
        assert f"pydepth {__version__}" in capsys.readouterr().out


@pytest.mark.unit
class TestStartupError:
    """Tests for the report printed when pydepth.cli cannot be imported."""

    def test_main_reports_broken_install(self, capsys: pytest.CaptureFixture) -> None:
        """Test a failed CLI import returns 1 and explains why on stderr."""
        with patch.dict(sys.modules, {"pydepth.cli": None}):
            code = main()

        err = capsys.readouterr().err
        assert code == 1
        assert "pydepth CLI could not be started." in err
        assert "ImportError:" in err

    def test_report_layout(self, capsys: pytest.CaptureFixture) -> None:
        """Test the report names both versions before the error."""
        _print_startup_error(ImportError("No module named 'rich'"))

        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err.startswith(
            "pydepth CLI could not be started.\nPython version : "
        )
        assert captured.err.endswith(
            f"pydepth version: {__version__}\n\nImportError: No module named 'rich'\n"
        )
