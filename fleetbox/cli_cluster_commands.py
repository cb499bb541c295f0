"""Cluster lifecycle CLI commands (create, delete, start, stop, show, inspect, ssh)."""
from __future__ import annotations

from typing import List, Optional

import typer
from rich.console import Console

from fleetbox.cli_show_helpers import get_renderer, render_json_single
from fleetbox.cli_support import handle_cli_error, load_cluster, print_success, setup_file_logging
from fleetbox.core.errors import FleetError, RemoteSessionError, TransientConnectionError
from fleetbox.services.cluster.ssh import DEFAULT_USER

CONFIG_HELP = "Cluster configuration file (default: $FLEETBOX_CONFIG or ./fleetbox.yaml)."


def split_target(target: str) -> tuple[str, str]:
    """Split ``[user@]hostname`` into (user, hostname)."""
    user, sep, hostname = target.rpartition("@")
    if not sep:
        return DEFAULT_USER, target
    if not user or not hostname:
        raise typer.BadParameter(f"Invalid target '{target}', expected [USER@]HOSTNAME", param_hint="target")
    return user, hostname


def register_cluster_commands(root: typer.Typer, console: Console) -> None:
    """Attach cluster commands to the main CLI."""

    def _run(action: str, config: Optional[str], verbose: bool, log_file: Optional[str]) -> None:
        setup_file_logging(log_file=log_file, verbose=verbose)
        try:
            cluster = load_cluster(config)
            getattr(cluster, action)()
        except FleetError as exc:
            handle_cli_error(exc, console, verbose=verbose)

    @root.command("create")
    def create_command(
        config: Optional[str] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
        verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
        log_file: Optional[str] = typer.Option(None, "--log-file", help="Path to log file"),
    ) -> None:
        """Create the cluster's machines."""
        _run("create", config, verbose, log_file)
        print_success(console, "Cluster created")

    @root.command("delete")
    def delete_command(
        config: Optional[str] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
        verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
        log_file: Optional[str] = typer.Option(None, "--log-file", help="Path to log file"),
    ) -> None:
        """Delete the cluster's machines."""
        _run("delete", config, verbose, log_file)
        print_success(console, "Cluster deleted")

    @root.command("start")
    def start_command(
        config: Optional[str] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
        verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
        log_file: Optional[str] = typer.Option(None, "--log-file", help="Path to log file"),
    ) -> None:
        """Start stopped machines. Machines that don't exist are not created."""
        _run("start", config, verbose, log_file)
        print_success(console, "Cluster started")

    @root.command("stop")
    def stop_command(
        config: Optional[str] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
        verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
        log_file: Optional[str] = typer.Option(None, "--log-file", help="Path to log file"),
    ) -> None:
        """Stop started machines."""
        _run("stop", config, verbose, log_file)
        print_success(console, "Cluster stopped")

    @root.command("show")
    def show_command(
        output: str = typer.Option("table", "--output", "-o", help="Output format: table, json"),
        config: Optional[str] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
        verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
        log_file: Optional[str] = typer.Option(None, "--log-file", help="Path to log file"),
    ) -> None:
        """Show all machines with their live state."""
        setup_file_logging(log_file=log_file, verbose=verbose)
        try:
            render = get_renderer(output)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="output") from exc

        try:
            machines = load_cluster(config).machines()
        except FleetError as exc:
            handle_cli_error(exc, console, verbose=verbose)

        render(console, machines)

    @root.command("inspect")
    def inspect_command(
        name: str = typer.Argument(..., help="Container name of the machine, e.g. cluster-node0."),
        config: Optional[str] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
        verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
        log_file: Optional[str] = typer.Option(None, "--log-file", help="Path to log file"),
    ) -> None:
        """Show a single machine as JSON."""
        setup_file_logging(log_file=log_file, verbose=verbose)
        try:
            machine = load_cluster(config).inspect(name)
        except FleetError as exc:
            handle_cli_error(exc, console, verbose=verbose)

        render_json_single(console, machine)

    @root.command("ssh")
    def ssh_command(
        target: str = typer.Argument(..., help="Machine to log into: [USER@]HOSTNAME."),
        remote: Optional[List[str]] = typer.Argument(None, help="Command to run on the machine.", metavar="COMMAND..."),
        config: Optional[str] = typer.Option(None, "--config", "-c", help=CONFIG_HELP),
        verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
        log_file: Optional[str] = typer.Option(None, "--log-file", help="Path to log file"),
    ) -> None:
        """Open an SSH session on a machine."""
        setup_file_logging(log_file=log_file, verbose=verbose)
        user, hostname = split_target(target)
        try:
            load_cluster(config).ssh(hostname, user, remote or [])
        except TransientConnectionError as exc:
            handle_cli_error(exc, console, verbose=verbose, exit_code=exc.returncode)
        except RemoteSessionError as exc:
            # ssh already reported its own failure on stderr
            raise typer.Exit(exc.returncode) from exc
        except FleetError as exc:
            handle_cli_error(exc, console, verbose=verbose)
