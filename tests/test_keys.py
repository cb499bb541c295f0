"""Tests for SSH key management."""
import subprocess

import pytest

from fleetbox.core.errors import BackendError, ConfigError
from fleetbox.services.keys import KeyManager, expand_path


def test_expand_path(monkeypatch):
    monkeypatch.setenv("HOME", "/home/user")
    assert str(expand_path("~/.ssh/id")) == "/home/user/.ssh/id"
    assert str(expand_path("/abs/key")) == "/abs/key"


class TestKeyManager:
    """Test key generation and loading."""

    def test_existing_key_is_kept(self, tmp_path, monkeypatch):
        key = tmp_path / "cluster-key"
        key.write_text("PRIVATE")

        def fail(*args, **kwargs):
            raise AssertionError("ssh-keygen should not run")

        monkeypatch.setattr("fleetbox.services.keys.subprocess.run", fail)

        assert KeyManager(str(key), "cluster").ensure_key() is False

    def test_generates_key(self, tmp_path, monkeypatch):
        captured = {}

        def fake_run(cmd, capture_output, text, check):
            captured['cmd'] = cmd
            return subprocess.CompletedProcess(cmd, 0, "", "")

        monkeypatch.setattr("fleetbox.services.keys.subprocess.run", fake_run)
        key = tmp_path / "cluster-key"

        assert KeyManager(str(key), "lab").ensure_key() is True
        cmd = captured['cmd']
        assert cmd[0] == "ssh-keygen"
        assert cmd[cmd.index("-t") + 1] == "rsa"
        assert cmd[cmd.index("-b") + 1] == "4096"
        assert cmd[cmd.index("-C") + 1] == "lab@fleetbox.mail"
        assert cmd[cmd.index("-f") + 1] == str(key)
        assert cmd[cmd.index("-N") + 1] == ""

    def test_keygen_failure(self, tmp_path, monkeypatch):
        def fake_run(cmd, capture_output, text, check):
            raise subprocess.CalledProcessError(1, cmd, output="", stderr="bad path")

        monkeypatch.setattr("fleetbox.services.keys.subprocess.run", fake_run)

        with pytest.raises(BackendError, match="bad path"):
            KeyManager(str(tmp_path / "k"), "c").ensure_key()

    def test_public_key(self, tmp_path):
        (tmp_path / "cluster-key.pub").write_bytes(b"ssh-rsa AAAA c@fleetbox.mail\n")

        assert KeyManager(str(tmp_path / "cluster-key"), "c").public_key() == b"ssh-rsa AAAA c@fleetbox.mail\n"

    def test_missing_public_key(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read public key"):
            KeyManager(str(tmp_path / "cluster-key"), "c").public_key()
