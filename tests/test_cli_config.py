"""Tests for configuration CLI commands."""
import yaml
from typer.testing import CliRunner

from fleetbox.cli import app

runner = CliRunner()


def test_config_create_defaults(tmp_path):
    path = tmp_path / "fleetbox.yaml"

    result = runner.invoke(app, ["config", "create", "--config", str(path)])

    assert result.exit_code == 0, result.output
    data = yaml.safe_load(path.read_text())
    assert data["cluster"] == {"name": "cluster", "privateKey": "cluster-key"}
    assert data["machines"][0]["count"] == 1
    assert data["machines"][0]["spec"]["name"] == "node%d"
    assert data["machines"][0]["spec"]["portMappings"] == [{"containerPort": 22}]


def test_config_create_options(tmp_path):
    path = tmp_path / "lab.yaml"

    result = runner.invoke(app, [
        "config", "create", "--config", str(path),
        "--name", "lab", "--key", "~/.ssh/lab", "--image", "quay.io/footloose/ubuntu18.04",
        "--replicas", "3", "--fixed-ports",
    ])

    assert result.exit_code == 0, result.output
    data = yaml.safe_load(path.read_text())
    assert data["cluster"] == {"name": "lab", "privateKey": "~/.ssh/lab"}
    assert data["machines"][0]["count"] == 3
    assert data["machines"][0]["spec"]["portMappings"] == [{"containerPort": 22, "hostPort": 2222}]


def test_config_create_refuses_overwrite(tmp_path):
    path = tmp_path / "fleetbox.yaml"
    path.write_text("keep me")

    result = runner.invoke(app, ["config", "create", "--config", str(path)])

    assert result.exit_code == 1
    assert "already exists" in result.stdout
    assert path.read_text() == "keep me"


def test_config_create_override(tmp_path):
    path = tmp_path / "fleetbox.yaml"
    path.write_text("replace me")

    result = runner.invoke(app, ["config", "create", "--config", str(path), "--override"])

    assert result.exit_code == 0
    assert yaml.safe_load(path.read_text())["cluster"]["name"] == "cluster"


def test_config_show(config_file):
    result = runner.invoke(app, ["config", "show", "--config", str(config_file)])

    assert result.exit_code == 0, result.output
    assert "4 machine(s)" in result.stdout
    assert "node%d" in result.stdout


def test_config_show_invalid(tmp_path):
    path = tmp_path / "fleetbox.yaml"
    path.write_text("cluster: {}\n")

    result = runner.invoke(app, ["config", "show", "--config", str(path)])

    assert result.exit_code == 1
    assert "Invalid configuration" in result.stdout
