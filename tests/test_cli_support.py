"""Tests for CLI support utilities."""
import pytest
import typer
from rich.console import Console

from fleetbox.cli_support import (
    find_config,
    handle_cli_error,
    is_mock,
    load_cluster,
    print_info,
    print_success,
)


class TestFindConfig:
    """Test config file discovery."""

    def test_explicit_path(self, monkeypatch):
        monkeypatch.setenv("FLEETBOX_CONFIG", "/env/config.yaml")
        assert find_config("/custom/path.yaml") == "/custom/path.yaml"

    def test_env_variable(self, monkeypatch):
        monkeypatch.setenv("FLEETBOX_CONFIG", "/env/config.yaml")
        assert find_config() == "/env/config.yaml"

    def test_fallback_to_default(self, monkeypatch):
        monkeypatch.delenv("FLEETBOX_CONFIG", raising=False)
        assert find_config() == "fleetbox.yaml"


class TestIsMock:
    """Test mock mode detection."""

    def test_mock_enabled(self, monkeypatch):
        monkeypatch.setenv("FLEETBOX_MOCK", "1")
        assert is_mock() is True

    def test_mock_disabled(self, monkeypatch):
        monkeypatch.delenv("FLEETBOX_MOCK", raising=False)
        assert is_mock() is False

    def test_mock_other_value(self, monkeypatch):
        monkeypatch.setenv("FLEETBOX_MOCK", "0")
        assert is_mock() is False


def test_load_cluster_uses_mock(monkeypatch, config_file):
    monkeypatch.setenv("FLEETBOX_MOCK", "1")

    cluster = load_cluster(str(config_file))

    assert cluster.mock is True
    assert cluster.backend.mock is True


def test_handle_cli_error_exits():
    console = Console(record=True)

    with pytest.raises(typer.Exit) as exc_info:
        handle_cli_error(ValueError("boom"), console, exit_code=3)

    assert exc_info.value.exit_code == 3
    assert "Error: boom" in console.export_text()


class TestPrintHelpers:
    """Test message helpers."""

    def test_prefixes(self):
        console = Console(record=True)

        print_success(console, "done")
        print_info(console, "note")

        text = console.export_text()
        assert "✓ done" in text
        assert "ℹ note" in text
