"""Tests for the command line interface."""

import json

import pytest
import yaml
from click.testing import CliRunner

from casepilot import __version__
from casepilot.cli.main import cli
from casepilot.core.management.output_manager import OutputManager
from casepilot.utils.exceptions import FileOperationError


class TestCLI:
    """Test CLI commands end to end."""

    def setup_method(self):
        """Set up test fixtures."""
        self.runner = CliRunner()

    @pytest.fixture
    def descriptor_file(self, tmp_path, create_user_data):
        path = tmp_path / "endpoints.yaml"
        health = {"method": "GET", "path": "/health", "operation_id": "getHealth", "responses": {"200": {"description": "OK"}}}
        path.write_text(yaml.safe_dump({"endpoints": [create_user_data, health]}), encoding="utf-8")
        return path

    @pytest.fixture
    def config_file(self, tmp_path):
        return tmp_path / "config.yaml"

    def test_version(self):
        """Test version option."""
        result = self.runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_generate_writes_files(self, tmp_path, descriptor_file, config_file):
        """Test generate writes one file per endpoint."""
        output_dir = tmp_path / "out"

        result = self.runner.invoke(cli, [
            "--config", str(config_file),
            "generate", str(descriptor_file),
            "--output", str(output_dir),
            "--workers", "2",
        ])

        assert result.exit_code == 0, result.output
        assert "Generated 2 test suites with 9 test cases" in result.output

        files = sorted(p.name for p in output_dir.iterdir())
        assert files == ["get_health.json", "post_users.json"]

        data = json.loads((output_dir / "post_users.json").read_text(encoding="utf-8"))
        assert data["recommendation"]["primary_strategy"] == "security_basic"
        assert len(data["test_cases"]) == 8

    def test_generate_dry_run(self, tmp_path, descriptor_file, config_file):
        """Test dry run writes nothing."""
        output_dir = tmp_path / "out"

        result = self.runner.invoke(cli, [
            "--config", str(config_file),
            "generate", str(descriptor_file),
            "--output", str(output_dir),
            "--dry-run",
        ])

        assert result.exit_code == 0, result.output
        assert "Dry run" in result.output
        assert "Generated 2 test suites" in result.output
        assert not output_dir.exists()

    def test_generate_reports_failed_endpoint(self, tmp_path, config_file):
        """Test exit code when an endpoint cannot be generated."""
        path = tmp_path / "endpoints.yaml"
        path.write_text(
            yaml.safe_dump([
                {"method": "GET", "path": "/health"},
                {"method": "GET", "path": ""},
            ]),
            encoding="utf-8",
        )

        result = self.runner.invoke(cli, [
            "--config", str(config_file),
            "generate", str(path),
            "--dry-run",
        ])

        assert result.exit_code == 1
        assert "Generated 1 test suites" in result.output

    def test_generate_reports_unwritten_suite(self, tmp_path, descriptor_file, config_file, monkeypatch):
        """Test exit code when a suite cannot be written."""
        original_save = OutputManager.save_suite

        async def save_suite(self, suite, custom_filename=None):
            if suite.endpoint.path == "/users":
                raise FileOperationError("disk full")
            return await original_save(self, suite, custom_filename)

        monkeypatch.setattr(OutputManager, "save_suite", save_suite)
        output_dir = tmp_path / "out"

        result = self.runner.invoke(cli, [
            "--config", str(config_file),
            "generate", str(descriptor_file),
            "--output", str(output_dir),
        ])

        assert result.exit_code == 1
        assert "Failed to write 1 of 2 test suites" in result.output
        assert sorted(p.name for p in output_dir.iterdir()) == ["get_health.json"]

    def test_recommend(self, descriptor_file, config_file):
        """Test recommend prints a summary."""
        result = self.runner.invoke(cli, ["--config", str(config_file), "recommend", str(descriptor_file)])

        assert result.exit_code == 0, result.output
        assert "Recommended strategies for 2 endpoints" in result.output

    def test_missing_descriptor(self, tmp_path, config_file):
        """Test missing descriptor file exits with an error."""
        result = self.runner.invoke(cli, [
            "--config", str(config_file),
            "recommend", str(tmp_path / "missing.yaml"),
        ])

        assert result.exit_code == 1

    def test_invalid_config(self, tmp_path, descriptor_file):
        """Test invalid configuration exits with an error."""
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("processing:\n  workers: 0\n", encoding="utf-8")

        result = self.runner.invoke(cli, ["--config", str(config_file), "recommend", str(descriptor_file)])

        assert result.exit_code == 1

    def test_config_file_applied(self, tmp_path, descriptor_file):
        """Test output settings read from the configuration file."""
        output_dir = tmp_path / "configured"
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            yaml.safe_dump({"output": {
                "directory": str(output_dir),
                "filename_template": "{operation_id}.json",
            }}),
            encoding="utf-8",
        )

        result = self.runner.invoke(cli, ["--config", str(config_file), "generate", str(descriptor_file)])

        assert result.exit_code == 0, result.output
        assert sorted(p.name for p in output_dir.iterdir()) == ["createUser.json", "getHealth.json"]
