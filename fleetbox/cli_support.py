"""Shared utilities for fleetbox CLI modules."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from fleetbox.config.loader import DEFAULT_CONFIG_FILE

CONFIG_ENV = "FLEETBOX_CONFIG"
MOCK_ENV = "FLEETBOX_MOCK"


def find_config(config_path: Optional[str] = None) -> str:
    """Locate the active fleetbox configuration file."""
    if config_path:
        return config_path

    if env_config := os.environ.get(CONFIG_ENV):
        return env_config

    return str(Path(DEFAULT_CONFIG_FILE))


def is_mock() -> bool:
    """Return True when CLI runs in mock mode."""
    return os.environ.get(MOCK_ENV) == "1"


def setup_file_logging(log_file: Optional[str] = None, verbose: bool = False) -> None:
    """Set up file logging for CLI commands.

    Args:
        log_file: Path to log file (optional)
        verbose: Enable verbose logging
    """
    from fleetbox.core.logger import setup_file_logging as _setup_file_logging
    _setup_file_logging(log_file=log_file, verbose=verbose)


def load_cluster(config_path: Optional[str] = None):
    """Load the cluster described by the active configuration file."""
    from fleetbox.services.cluster import Cluster

    return Cluster.from_file(find_config(config_path), mock=is_mock())


def handle_cli_error(
    e: Exception,
    console: Console,
    verbose: bool = False,
    exit_code: int = 1
) -> None:
    """Handle CLI errors with consistent formatting.

    Args:
        e: Exception to handle
        console: Rich console for output
        verbose: Show exception traceback if True
        exit_code: Exit code to use
    """
    console.print(f"[red]Error:[/red] {e}")
    if verbose:
        console.print_exception()
    raise typer.Exit(exit_code) from e


def print_success(console: Console, message: str, prefix: str = "✓") -> None:
    """Print success message with consistent formatting."""
    console.print(f"[green]{prefix}[/green] {message}")


def print_info(console: Console, message: str, prefix: str = "ℹ") -> None:
    """Print info message with consistent formatting."""
    console.print(f"[cyan]{prefix}[/cyan] {message}")
