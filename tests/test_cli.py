"""
Tests for CLI module.

Tests command-line interface commands and output. Extraction runs on
saved HTML files with --immediate so nothing waits on the rate limiter.
"""

import json
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from platform_extract import __version__
from platform_extract.cli import app

from tests.conftest import GOOGLE_SEARCH_URL, XHS_SEARCH_URL


class TestCLI:
    """Tests for CLI commands."""

    @pytest.fixture
    def runner(self) -> CliRunner:
        """Provide a CLI test runner."""
        return CliRunner()

    @pytest.fixture
    def xhs_file(self, temp_dir: Path, xhs_search_html: str) -> Path:
        path = temp_dir / "xhs.html"
        path.write_text(xhs_search_html, encoding="utf-8")
        return path

    @pytest.fixture
    def google_file(self, temp_dir: Path, google_search_html: str) -> Path:
        path = temp_dir / "google.html"
        path.write_text(google_search_html, encoding="utf-8")
        return path

    def test_cli_help(self, runner: CliRunner):
        """CLI should show help."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "Usage" in result.output
        assert "extract" in result.output

    def test_version(self, runner: CliRunner):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_extract_help(self, runner: CliRunner):
        result = runner.invoke(app, ["extract", "--help"])

        assert result.exit_code == 0
        assert "--max-items" in result.output

    def test_platforms(self, runner: CliRunner):
        result = runner.invoke(app, ["platforms"])

        assert result.exit_code == 0
        assert "xiaohongshu" in result.output
        assert "google" in result.output

    def test_config_show(self, runner: CliRunner):
        """Config show command should display settings."""
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "xiaohongshu" in result.output
        assert "rate_limit_delay_seconds" in result.output

    def test_config_init(self, runner: CliRunner, temp_dir: Path):
        output = temp_dir / "config.yaml"

        result = runner.invoke(app, ["config", "init", "--output", str(output)])

        assert result.exit_code == 0
        data = yaml.safe_load(output.read_text(encoding="utf-8"))
        assert data["xiaohongshu"]["rate_limited"] is True
        assert data["google"]["max_items_per_batch"] == 10

    def test_config_init_keeps_existing_without_confirm(
        self, runner: CliRunner, temp_dir: Path
    ):
        output = temp_dir / "config.yaml"
        output.write_text("keep: me\n")

        result = runner.invoke(app, ["config", "init", "--output", str(output)], input="n\n")

        assert result.exit_code == 0
        assert output.read_text() == "keep: me\n"

    def test_extract_json(self, runner: CliRunner, xhs_file: Path):
        result = runner.invoke(
            app,
            [
                "extract", str(xhs_file),
                "--url", XHS_SEARCH_URL,
                "--preview", "--immediate", "--json",
            ],
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["success"] is True
        assert data["platform"] == "xiaohongshu"
        assert data["totalFound"] == 3
        assert [item["index"] for item in data["items"]] == [1, 3]
        assert data["items"][0]["metadata"]["author"] == "Chef Lin"

    def test_extract_table(self, runner: CliRunner, google_file: Path):
        result = runner.invoke(
            app,
            ["extract", str(google_file), "--url", GOOGLE_SEARCH_URL, "--immediate"],
        )

        assert result.exit_code == 0
        assert "google" in result.output
        assert "2 of 2 found" in result.output

    def test_extract_forced_platform(self, runner: CliRunner, google_file: Path):
        """Without --url the file URI matches nothing, so the platform is forced."""
        result = runner.invoke(
            app,
            ["extract", str(google_file), "--platform", "google", "--immediate", "--json"],
        )

        assert result.exit_code == 0
        assert json.loads(result.stdout)["totalFound"] == 2

    def test_extract_unsupported_page(self, runner: CliRunner, google_file: Path):
        result = runner.invoke(
            app,
            ["extract", str(google_file), "--url", "https://example.com/", "--json"],
        )

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["success"] is False
        assert data["platform"] == "unknown"

    def test_extract_unknown_platform(self, runner: CliRunner, google_file: Path):
        result = runner.invoke(
            app, ["extract", str(google_file), "--platform", "weibo"]
        )

        assert result.exit_code == 1
        assert "Unsupported platform: weibo" in result.output

    def test_extract_missing_file(self, runner: CliRunner, temp_dir: Path):
        result = runner.invoke(app, ["extract", str(temp_dir / "missing.html")])

        assert result.exit_code == 1
        assert "File not found" in result.output

    def test_extract_max_items_bounds(self, runner: CliRunner, xhs_file: Path):
        result = runner.invoke(app, ["extract", str(xhs_file), "--max-items", "500"])

        assert result.exit_code != 0
