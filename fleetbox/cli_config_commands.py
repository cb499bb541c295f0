"""Configuration CLI commands."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from fleetbox.cli_support import find_config, handle_cli_error, print_info, print_success
from fleetbox.config.defaults import DEFAULT_CLUSTER_NAME, DEFAULT_IMAGE, DEFAULT_PRIVATE_KEY, default_cluster
from fleetbox.config.loader import ConfigLoader
from fleetbox.core.errors import FleetError

ConfigTyper = typer.Typer(help="Manage the cluster configuration file")


def register_config_commands(root: typer.Typer, console: Console) -> None:
    """Attach configuration commands to the main CLI."""

    @ConfigTyper.command("create")
    def create_command(
        config: Optional[str] = typer.Option(None, "--config", "-c", help="File to write (default: ./fleetbox.yaml)."),
        override: bool = typer.Option(False, "--override", help="Overwrite an existing file."),
        name: str = typer.Option(DEFAULT_CLUSTER_NAME, "--name", "-n", help="Cluster name."),
        key: str = typer.Option(DEFAULT_PRIVATE_KEY, "--key", "-k", help="SSH private key path."),
        image: str = typer.Option(DEFAULT_IMAGE, "--image", "-i", help="Machine image."),
        replicas: int = typer.Option(1, "--replicas", "-r", min=0, help="Number of machines."),
        fixed_ports: bool = typer.Option(False, "--fixed-ports", help="Publish SSH on 2222 + machine index."),
        privileged: bool = typer.Option(False, "--privileged", help="Run machines as privileged containers."),
    ) -> None:
        """Write a default cluster configuration."""
        path = Path(find_config(config))
        if path.exists() and not override:
            console.print(f"[red]Error:[/red] {path} already exists (use --override to replace it)")
            raise typer.Exit(1)

        try:
            spec = default_cluster(
                name=name,
                private_key=key,
                image=image,
                replicas=replicas,
                fixed_ports=fixed_ports,
                privileged=privileged,
            )
            ConfigLoader(str(path)).save(spec)
        except (FleetError, ValueError) as exc:
            handle_cli_error(exc, console)

        print_success(console, f"Configuration written to: {path}")

    @ConfigTyper.command("show")
    def show_command(
        config: Optional[str] = typer.Option(None, "--config", "-c", help="Configuration file."),
    ) -> None:
        """Validate the configuration and print it."""
        path = find_config(config)
        try:
            spec = ConfigLoader(path).load()
        except FleetError as exc:
            handle_cli_error(exc, console)

        print_info(console, f"{sum(t.count for t in spec.machines)} machine(s) in {path}")
        typer.echo(ConfigLoader.dump(spec), nl=False)

    root.add_typer(ConfigTyper, name="config")
