"""
Tests for the openapi_to_code command line.
"""

from __future__ import annotations

import json
import logging

import pytest
from click.testing import CliRunner

from conftest import PETSTORE_PATH

from openapi_to_code.openapi_to_code import openapi_to_code


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop the handler the CLI installs so each run logs to its own streams."""
    yield
    logger = logging.getLogger("openapi_to_code")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """An empty working directory, so no FastAPI project is detected."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def run(*args):
    return CliRunner().invoke(openapi_to_code, [str(PETSTORE_PATH), *args])


class TestCli:
    """Tests for the click command"""

    def test_default_plugin(self, workdir):
        result = run("-q")
        assert result.exit_code == 0, result.output
        assert (workdir / "outputs" / "models" / "api_models.py").is_file()
        assert (workdir / "outputs" / "http_client" / "api_client.py").is_file()

    def test_repeated_plugins(self, workdir):
        result = run("-p", "httpx", "-p", "mcp", "-o", "gen", "-q")
        assert result.exit_code == 0, result.output
        assert (workdir / "gen" / "http_client" / "api_client.py").is_file()
        assert (workdir / "gen" / "mcp_server" / "server.py").is_file()
        assert (workdir / "gen" / "mcp_server" / "README.md").is_file()

    def test_comma_separated_plugins(self, workdir):
        result = run("--plugin", "requests,mcp", "-o", "gen", "-q")
        assert result.exit_code == 0, result.output
        assert (workdir / "gen" / "http_client" / "api_client_requests.py").is_file()
        assert (workdir / "gen" / "mcp_server" / "server.py").is_file()

    def test_generation_comment(self, workdir):
        run("-p", "httpx", "-o", "gen", "-q")
        models = (workdir / "gen" / "models" / "api_models.py").read_text()
        assert models.splitlines()[0].startswith("# Generated by openapi_to_code v")
        assert ": openapi_to_code petstore.yaml --plugin httpx --output gen" in models.splitlines()[0]

    def test_unknown_plugin(self, workdir):
        result = run("-p", "graphql", "-q")
        assert result.exit_code == 1
        assert 'Unknown plugin "graphql".' in result.output

    def test_fastapi_falls_back(self, workdir):
        result = run("-p", "fastapi")
        assert result.exit_code == 0, result.output
        assert "warning: FastAPI plugin requested but FastAPI project not detected" in result.output
        assert (workdir / "outputs" / "http_client" / "api_client.py").is_file()
        assert not (workdir / "outputs" / "fastapi_service").exists()

    def test_fastapi_project(self, workdir):
        (workdir / "pyproject.toml").write_text('[project]\nname = "svc"\ndependencies = ["fastapi"]\n')
        result = run("-p", "fa", "-q")
        assert result.exit_code == 0, result.output
        assert (workdir / "outputs" / "fastapi_service" / "api_service.py").is_file()

    def test_config_file(self, workdir):
        (workdir / "config.json").write_text(json.dumps({"plugins": ["mcp"], "output_dir": "from-config"}))
        result = run("-c", "config.json", "-q")
        assert result.exit_code == 0, result.output
        assert (workdir / "from-config" / "mcp_server" / "server.py").is_file()
        assert not (workdir / "from-config" / "http_client").exists()

    def test_cli_overrides_config_file(self, workdir):
        (workdir / "config.json").write_text(json.dumps({"plugins": ["mcp"], "output_dir": "from-config"}))
        result = run("-c", "config.json", "-p", "httpx", "-o", "from-cli", "-q")
        assert result.exit_code == 0, result.output
        assert (workdir / "from-cli" / "http_client" / "api_client.py").is_file()
        assert not (workdir / "from-config").exists()

    def test_invalid_config_file(self, workdir):
        (workdir / "config.json").write_text("{broken")
        result = run("-c", "config.json")
        assert result.exit_code == 1
        assert "Invalid configuration file" in result.output

    def test_unsupported_formatter(self, workdir):
        (workdir / "config.json").write_text(json.dumps({"formatter": {"tool": "yapf"}}))
        result = run("-c", "config.json")
        assert result.exit_code == 1
        assert "Unsupported formatter 'yapf'" in result.output

    def test_invalid_document(self, workdir):
        (workdir / "api.json").write_text(json.dumps({"paths": {}}))
        result = CliRunner().invoke(openapi_to_code, [str(workdir / "api.json")])
        assert result.exit_code == 1
        assert '"info"' in result.output

    def test_missing_input(self, workdir):
        result = CliRunner().invoke(openapi_to_code, ["missing.yaml"])
        assert result.exit_code == 2


if __name__ == "__main__":
    pytest.main([__file__])
