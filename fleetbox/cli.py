#!/usr/bin/env python3
"""fleetbox CLI - containers that look like machines."""

import typer
from rich.console import Console

from fleetbox.cli_cluster_commands import register_cluster_commands
from fleetbox.cli_config_commands import register_config_commands
from fleetbox.core.logger import get_logger

app = typer.Typer(
    name="fleetbox",
    help="""fleetbox - containers that look like machines

Describe a cluster in one YAML file and manage it like a set of hosts.

Quick start:
  fleetbox config create --replicas 3   # Write fleetbox.yaml
  fleetbox create                       # Create the machines
  fleetbox show                         # List them
  fleetbox ssh root@node0               # Log in
""",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)

# Attach modular subcommands
register_cluster_commands(app, console)
register_config_commands(app, console)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
