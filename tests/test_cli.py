"""Unit tests for pydepth.cli and the tree/explain commands.

Each test runs the CLI against a small project created under ``tmp_path``
and made the working directory, so the default importer finds it first.

Test Coverage:
- Global options (--version, --help, --config)
- tree command: rendering, JSON output, display options, errors
- explain command: chains and missing targets
- Configuration file precedence below command-line flags
- main() exit codes
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Generator
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from pydepth.cli import cli, main
from pydepth.__version__ import __version__
from pydepth.exceptions import PyDepthError
from pydepth.utils import disable_logging, reconfigure_console


@pytest.fixture(autouse=True)
def isolated_output(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Restore colour settings and logging changed by the CLI group."""
    monkeypatch.setenv("NO_COLOR", "1")
    reconfigure_console()
    yield
    disable_logging()
    reconfigure_console()


@pytest.fixture
def project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create ``app`` importing json, a local module and a missing package."""
    app = tmp_path / "app"
    app.mkdir()
    (app / "__init__.py").write_text(
        "import json\nimport helperlib\nimport ghostlib_missing\n"
    )
    (tmp_path / "helperlib.py").write_text("import os\n")
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _dep_names(node: dict) -> list:
    return [dep["name"] for dep in node["deps"]]


@pytest.mark.unit
class TestGlobalOptions:
    """Tests for options handled by the CLI group."""

    def test_version(self, runner: CliRunner) -> None:
        """Test --version prints the program version."""
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert f"pydepth {__version__}" in result.output

    def test_help_lists_commands(self, runner: CliRunner) -> None:
        """Test --help mentions both commands."""
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "tree" in result.output
        assert "explain" in result.output

    def test_invalid_config_exits(self, runner: CliRunner, project: Path) -> None:
        """Test an invalid configuration file stops the CLI."""
        (project / "pydepth.toml").write_text("[pydepth]\nmax_depth = 'x'\n")

        result = runner.invoke(cli, ["tree", "app"])

        assert result.exit_code == 1
        assert "max_depth must be an integer" in result.output


@pytest.mark.unit
class TestTreeCommand:
    """Tests for the tree command."""

    def test_renders_tree(self, runner: CliRunner, project: Path) -> None:
        """Test the tree and summary are printed."""
        result = runner.invoke(cli, ["tree", "app"])

        assert result.exit_code == 0, result.output
        for name in ("app", "json", "helperlib", "os", "ghostlib_missing"):
            assert name in result.output
        assert (
            "app has 4 dependencies (2 internal, 1 external, 1 unresolved)."
            in result.output
        )

    def test_json_output(self, runner: CliRunner, project: Path) -> None:
        """Test --json prints the tree as JSON."""
        result = runner.invoke(cli, ["tree", "app", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["name"] == "app"
        assert _dep_names(data) == ["json", "helperlib", "ghostlib_missing"]
        assert data["deps"][0]["internal"] is True
        assert data["deps"][2]["resolved"] is False
        assert _dep_names(data["deps"][1]) == ["os"]

    def test_max_depth(self, runner: CliRunner, project: Path) -> None:
        """Test --max stops expansion below the root."""
        result = runner.invoke(cli, ["tree", "app", "--json", "--max", "1"])

        data = json.loads(result.stdout)
        assert _dep_names(data["deps"][1]) == []

    def test_internal(self, runner: CliRunner, project: Path) -> None:
        """Test --internal expands standard library packages."""
        result = runner.invoke(cli, ["tree", "app", "--json", "--internal"])

        data = json.loads(result.stdout)
        assert data["deps"][0]["name"] == "json"
        assert data["deps"][0]["deps"] != []

    def test_show(self, runner: CliRunner, project: Path) -> None:
        """Test --show re-roots the output."""
        result = runner.invoke(cli, ["tree", "app", "--json", "--show", "helperlib"])

        data = json.loads(result.stdout)
        assert data["name"] == "helperlib"
        assert _dep_names(data) == ["os"]

    def test_show_missing(self, runner: CliRunner, project: Path) -> None:
        """Test --show with an absent package fails."""
        result = runner.invoke(cli, ["tree", "app", "--show", "nothere"])

        assert result.exit_code == 1
        assert "nothere is not a dependency of app" in result.output

    def test_match(self, runner: CliRunner, project: Path) -> None:
        """Test --match keeps matching packages and their ancestors."""
        result = runner.invoke(cli, ["tree", "app", "--json", "--match", "^os$"])

        data = json.loads(result.stdout)
        assert _dep_names(data) == ["helperlib"]
        assert _dep_names(data["deps"][0]) == ["os"]

    def test_invalid_match(self, runner: CliRunner, project: Path) -> None:
        """Test an invalid pattern is a usage error."""
        result = runner.invoke(cli, ["tree", "app", "--match", "["])

        assert result.exit_code == 2
        assert "invalid regular expression" in result.output

    def test_map_level(self, runner: CliRunner, project: Path) -> None:
        """Test --map-level flattens below the given depth."""
        result = runner.invoke(cli, ["tree", "app", "--json", "--map-level", "1"])

        data = json.loads(result.stdout)
        assert _dep_names(data["deps"][1]) == ["os"]

    def test_missing_root(self, runner: CliRunner, project: Path) -> None:
        """Test an unknown root package fails with exit code 1."""
        result = runner.invoke(cli, ["tree", "nosuchpackage_xyz"])

        assert result.exit_code == 1
        assert "unable to resolve root package" in result.output

    def test_negative_max_rejected(self, runner: CliRunner, project: Path) -> None:
        """Test negative limits are rejected by option validation."""
        result = runner.invoke(cli, ["tree", "app", "--max", "-1"])

        assert result.exit_code == 2

    def test_config_file_applies(self, runner: CliRunner, project: Path) -> None:
        """Test settings from pydepth.toml are used."""
        (project / "pydepth.toml").write_text("[pydepth]\nmax_depth = 1\n")

        result = runner.invoke(cli, ["tree", "app", "--json"])

        data = json.loads(result.stdout)
        assert _dep_names(data["deps"][1]) == []

    def test_flags_override_config(self, runner: CliRunner, project: Path) -> None:
        """Test command-line flags take precedence over the config file."""
        (project / "pydepth.toml").write_text("[pydepth]\nmax_depth = 1\n")

        result = runner.invoke(cli, ["tree", "app", "--json", "--max", "0"])

        data = json.loads(result.stdout)
        assert _dep_names(data["deps"][1]) == ["os"]

    def test_explicit_config_option(self, runner: CliRunner, project: Path) -> None:
        """Test --config loads a file outside the discovery locations."""
        config = project / "custom.toml"
        config.write_text("[pydepth]\nshow_pkg = 'helperlib'\n")

        result = runner.invoke(cli, ["--config", str(config), "tree", "app", "--json"])

        assert json.loads(result.stdout)["name"] == "helperlib"


@pytest.mark.unit
class TestExplainCommand:
    """Tests for the explain command."""

    def test_prints_chain(self, runner: CliRunner, project: Path) -> None:
        """Test the import chain is printed."""
        result = runner.invoke(cli, ["explain", "app", "os"])

        assert result.exit_code == 0, result.output
        assert "app -> helperlib -> os" in result.output

    def test_missing_target(self, runner: CliRunner, project: Path) -> None:
        """Test an absent target exits with 1."""
        result = runner.invoke(cli, ["explain", "app", "requests"])

        assert result.exit_code == 1
        assert "requests is not a dependency of app" in result.output

    def test_respects_max_depth(self, runner: CliRunner, project: Path) -> None:
        """Test packages beyond --max are not explained."""
        result = runner.invoke(cli, ["explain", "app", "os", "--max", "1"])

        assert result.exit_code == 1


@pytest.mark.unit
class TestMain:
    """Tests for main() exit codes."""

    def test_success(self) -> None:
        """Test a successful run returns 0."""
        with patch.object(sys, "argv", ["pydepth", "--version"]):
            assert main() == 0

    def test_usage_error(self) -> None:
        """Test a usage error returns Click's exit code."""
        with patch.object(sys, "argv", ["pydepth", "tree"]):
            assert main() == 2

    @pytest.mark.parametrize(
        "error,code",
        [
            (PyDepthError("boom"), 1),
            (KeyboardInterrupt(), 130),
            (RuntimeError("unexpected"), 1),
        ],
        ids=["pydepth-error", "interrupted", "unexpected"],
    )
    def test_error_codes(self, error: BaseException, code: int) -> None:
        """Test errors escaping the CLI are mapped to exit codes."""
        with patch("pydepth.cli.cli", side_effect=error):
            assert main() == code
