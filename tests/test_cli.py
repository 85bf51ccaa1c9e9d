"""Tests for the service-loader CLI."""

import json
import logging

import pytest
from click.testing import CliRunner
from rich.console import Console

from service_loader.logging_setup import JsonlHandler
from service_loader.main import cli
from service_loader.settings import SEARCH_PATH_ENV


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep user/project settings and terminal width out of the tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv(SEARCH_PATH_ENV, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("service_loader.commands.providers.console", Console(width=200))


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


def test_no_command_shows_help(runner):
    result = runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "files" in result.output
    assert "list" in result.output


def test_files_lists_declarations(runner, tmp_path, declare):
    root = tmp_path / "plugins"
    declare(root, "acme.Codec", "acme.Gzip\n")

    result = runner.invoke(cli, ["files", "acme:Codec", "--root", str(root)])

    assert result.exit_code == 0
    assert "META-INF/services/acme.Codec" in result.output


def test_files_reports_none_found(runner, tmp_path):
    result = runner.invoke(cli, ["files", "acme.Codec", "--root", str(tmp_path)])

    assert result.exit_code == 0
    assert "No declaration files found for acme.Codec" in result.output


def test_names_in_declaration_order(runner, tmp_path, declare):
    declare(tmp_path / "a", "acme.Codec", "# comment\nacme.Zeta\n\nacme.Alpha\n")
    declare(tmp_path / "b", "acme.Codec", "acme.Middle\n")

    result = runner.invoke(cli, ["names", "acme.Codec", "-r", str(tmp_path / "a"), "-r", str(tmp_path / "b")])

    assert result.exit_code == 0
    output = result.output
    assert output.index("acme.Zeta") < output.index("acme.Alpha") < output.index("acme.Middle")
    assert "comment" not in output


def test_list_providers(runner, provider_package, declare):
    declare(provider_package, "sample_providers.Codec", "sample_providers.IdentityCodec\nsample_providers.UpperCodec\n")

    result = runner.invoke(cli, ["list", "sample_providers:Codec"])

    assert result.exit_code == 0
    assert "sample_providers.IdentityCodec" in result.output
    assert "Returns input unchanged." in result.output
    assert "sample_providers.UpperCodec" in result.output


def test_list_instantiate_skips_broken(runner, provider_package, declare):
    declare(provider_package, "sample_providers.Codec", "sample_providers.BrokenCodec\nsample_providers.UpperCodec\n")

    result = runner.invoke(cli, ["list", "sample_providers.Codec", "--instantiate"])

    assert result.exit_code == 0
    assert "Instance" in result.output
    rows = [line for line in result.output.splitlines() if "object at" in line]
    assert len(rows) == 1
    assert "sample_providers.UpperCodec" in rows[0]


def test_list_unknown_capability(runner):
    result = runner.invoke(cli, ["list", "no_such_package_xyz.Codec"])

    assert result.exit_code == 1
    assert "Error" in result.output


def test_list_capability_must_be_a_class(runner):
    result = runner.invoke(cli, ["list", "os.path.join"])

    assert result.exit_code == 1
    assert "is not a class" in result.output


def test_list_empty(runner, provider_package):
    result = runner.invoke(cli, ["list", "sample_providers.Codec"])

    assert result.exit_code == 0
    assert "No providers found for sample_providers.Codec" in result.output


def test_log_file_receives_provider_faults(runner, provider_package, declare, tmp_path, restore_root_logger):
    declare(provider_package, "sample_providers.Codec", "sample_providers.MissingCodec\n")
    log_path = tmp_path / "diag.jsonl"

    result = runner.invoke(cli, ["--log-file", str(log_path), "list", "sample_providers.Codec"])

    assert result.exit_code == 0
    assert any(isinstance(h, JsonlHandler) for h in logging.getLogger().handlers)
    records = [json.loads(line) for line in log_path.read_text().splitlines()]
    assert any("Failed to load sample_providers.MissingCodec" in r["message"] for r in records)
