"""
Tests for minidt.cli
====================

This module contains tests for the command-line interface.
Tests use Typer's CliRunner for testing CLI commands.

Test Organization
-----------------
- TestVersionCommand: Tests for --version flag
- TestHelpOutput: Tests for help text
- TestInitCommand: Tests for the init command
- TestCompileCommand: Tests for the compile command
"""

import pytest
from pathlib import Path
from typer.testing import CliRunner

from minidt import __version__
from minidt.cli import app
from minidt.models import CONFIG_FILE_NAME, Config
from minidt.config import load_config


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


class FakeQuestion:
    """Stand-in for a questionary prompt with a canned answer."""

    def __init__(self, answer: str | None) -> None:
        self.answer = answer

    def ask(self) -> str | None:
        return self.answer


# =============================================================================
# Version Command Tests
# =============================================================================

class TestVersionCommand:
    """Tests for the --version flag."""

    def test_version_flag(self, runner: CliRunner) -> None:
        """Test that --version shows version."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_version_short_flag(self, runner: CliRunner) -> None:
        """Test that -V shows version."""
        result = runner.invoke(app, ["-V"])

        assert result.exit_code == 0
        assert __version__ in result.output


# =============================================================================
# Help Output Tests
# =============================================================================

class TestHelpOutput:
    """Tests for help text."""

    def test_main_help(self, runner: CliRunner) -> None:
        """Both commands are listed."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "init" in result.output
        assert "compile" in result.output

    def test_compile_help(self, runner: CliRunner) -> None:
        """Compile help documents the output type option."""
        result = runner.invoke(app, ["compile", "--help"])

        assert result.exit_code == 0
        assert "--output-type" in result.output
        assert "temporary" in result.output


# =============================================================================
# Init Command Tests
# =============================================================================

class TestInitCommand:
    """Tests for the init command."""

    def test_init_defaults(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Init creates the config and folders in the current directory."""
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert "Initialized a new project" in result.output
        assert load_config(tmp_path / CONFIG_FILE_NAME) == Config()
        for name in ("macros", "models", "compiled"):
            assert (tmp_path / name).is_dir()

    def test_init_twice_fails(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A second init exits non-zero with a warning."""
        monkeypatch.chdir(tmp_path)
        runner.invoke(app, ["init"])

        result = runner.invoke(app, ["init"])

        assert result.exit_code == 1
        assert "already initialized" in result.output

    def test_init_with_config_file(
        self,
        runner: CliRunner,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
        sample_config: str,
    ) -> None:
        """An existing config file argument is loaded."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "warehouse.toml").write_text(sample_config, encoding="utf-8")

        result = runner.invoke(app, ["init", "warehouse.toml"])

        assert result.exit_code == 0
        assert (tmp_path / "sql").is_dir()
        assert not (tmp_path / CONFIG_FILE_NAME).exists()

    def test_init_with_broken_config_file(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A malformed config file argument is reported."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "broken.toml").write_text("templates_folder = [", encoding="utf-8")

        result = runner.invoke(app, ["init", "broken.toml"])

        assert result.exit_code == 1
        assert "Error" in result.output

    def test_init_interactive(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Interactive init writes the prompted values."""
        monkeypatch.chdir(tmp_path)
        answers = iter(["lib", "sql", "build", "index.sql.jinja"])
        monkeypatch.setattr(
            "minidt.cli.questionary.text",
            lambda message, default: FakeQuestion(next(answers)),
        )

        result = runner.invoke(app, ["init", "--interactive"])

        assert result.exit_code == 0
        assert load_config(tmp_path / CONFIG_FILE_NAME) == Config(
            macros_folder="lib",
            templates_folder="sql",
            outputs_folder="build",
            root_template="index.sql.jinja",
        )

    def test_init_interactive_inside_project_skips_prompts(
        self,
        runner: CliRunner,
        project_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """An existing project is detected before any question is asked."""
        monkeypatch.chdir(project_dir / "models")
        asked: list[str] = []

        def fake_text(message: str, default: str) -> FakeQuestion:
            asked.append(message)
            return FakeQuestion(default)

        monkeypatch.setattr("minidt.cli.questionary.text", fake_text)

        result = runner.invoke(app, ["init", "--interactive"])

        assert result.exit_code == 1
        assert "already initialized" in result.output
        assert asked == []

    def test_init_interactive_cancelled(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Cancelling a prompt aborts without writing anything."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr(
            "minidt.cli.questionary.text",
            lambda message, default: FakeQuestion(None),
        )

        result = runner.invoke(app, ["init", "-i"])

        assert result.exit_code != 0
        assert not (tmp_path / CONFIG_FILE_NAME).exists()


# =============================================================================
# Compile Command Tests
# =============================================================================

class TestCompileCommand:
    """Tests for the compile command."""

    def test_compile(
        self,
        runner: CliRunner,
        project_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """A template is compiled into the outputs folder."""
        monkeypatch.chdir(project_dir)
        template = project_dir / "models" / "a" / "b.sql.jinja"
        template.parent.mkdir()
        template.write_text("select {{ 2 * 3 }}", encoding="utf-8")

        result = runner.invoke(app, ["compile", "models/a/b.sql.jinja"])

        assert result.exit_code == 0
        assert "Compiled SQL saved to" in result.output
        output = project_dir / "compiled" / "a" / "b.sql"
        assert output.read_text(encoding="utf-8") == "select 6"

    def test_compile_with_output_and_type(
        self,
        runner: CliRunner,
        project_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Explicit output and output type are honored."""
        monkeypatch.chdir(project_dir)
        (project_dir / "models" / "t.sql.jinja").write_text(
            "-- {{ output_type }}", encoding="utf-8"
        )

        result = runner.invoke(
            app, ["compile", "models/t.sql.jinja", "t.sql", "-t", "temp-table"]
        )

        assert result.exit_code == 0
        assert (project_dir / "t.sql").read_text(encoding="utf-8") == "-- temp-table"

    def test_compile_invalid_output_type(
        self,
        runner: CliRunner,
        project_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Unknown output types are a usage error."""
        monkeypatch.chdir(project_dir)
        (project_dir / "models" / "t.sql.jinja").write_text("select 1", encoding="utf-8")

        result = runner.invoke(
            app, ["compile", "models/t.sql.jinja", "--output-type", "index"]
        )

        assert result.exit_code == 2

    def test_compile_outside_templates(
        self,
        runner: CliRunner,
        project_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Errors are printed and exit with status 1."""
        monkeypatch.chdir(project_dir)
        (project_dir / "macros" / "m.sql").write_text("select 1", encoding="utf-8")

        result = runner.invoke(app, ["compile", "macros/m.sql"])

        assert result.exit_code == 1
        assert "Error" in result.output
        assert list((project_dir / "compiled").iterdir()) == []

    def test_compile_evaluation_error(
        self,
        runner: CliRunner,
        project_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Runtime template errors are printed, not raised."""
        monkeypatch.chdir(project_dir)
        (project_dir / "models" / "z.sql.jinja").write_text(
            "select {{ 'a' + 1 }}", encoding="utf-8"
        )

        result = runner.invoke(app, ["compile", "models/z.sql.jinja"])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert isinstance(result.exception, SystemExit)

    def test_compile_outputs_folder_is_a_file(
        self,
        runner: CliRunner,
        project_dir: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Write failures are printed, not raised."""
        monkeypatch.chdir(project_dir)
        (project_dir / "models" / "b.sql.jinja").write_text("select 1", encoding="utf-8")
        (project_dir / "compiled").rmdir()
        (project_dir / "compiled").write_text("", encoding="utf-8")

        result = runner.invoke(app, ["compile", "models/b.sql.jinja"])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert isinstance(result.exception, SystemExit)

    def test_compile_without_project(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Compiling outside a project fails."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / "a.sql.jinja").write_text("select 1", encoding="utf-8")

        result = runner.invoke(app, ["compile", "a.sql.jinja"])

        assert result.exit_code == 1
        assert "No configuration file" in result.output
