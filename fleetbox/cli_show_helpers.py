"""Rendering helpers for machine listings."""
import json
from typing import Any, Callable, Dict, List

import typer
from rich.console import Console
from rich.table import Table

from fleetbox.models.machine import MachineInstance, PortMapping

OUTPUT_FORMATS = ("table", "json")


def format_port(mapping: PortMapping) -> str:
    """Render a port mapping the way ``docker ps`` does, e.g. 0.0.0.0:2222->22/tcp."""
    container = f"{mapping.container_port}/{mapping.protocol or 'tcp'}"
    if not mapping.host_port:
        return container
    host = f"{mapping.address}:{mapping.host_port}" if mapping.address else str(mapping.host_port)
    return f"{host}->{container}"


def machine_to_dict(machine: MachineInstance) -> Dict[str, Any]:
    """JSON-ready view of a machine."""
    return {
        "name": machine.name,
        "hostname": machine.hostname,
        "image": machine.spec.image,
        "command": machine.spec.cmd or "",
        "privileged": machine.spec.privileged,
        "ip": machine.ip or "",
        "state": machine.state or "",
        "ports": [
            mapping.model_dump(by_alias=True, exclude_none=True)
            for mapping in machine.spec.port_mappings
        ],
        "volumes": [
            volume.model_dump(by_alias=True, exclude_none=True)
            for volume in machine.spec.volumes
        ],
    }


def render_json(console: Console, machines: List[MachineInstance]) -> None:
    # Plain echo keeps the output parseable (no wrapping or markup)
    payload = {"machines": [machine_to_dict(m) for m in machines]}
    typer.echo(json.dumps(payload, indent=2))


def render_json_single(console: Console, machine: MachineInstance) -> None:
    typer.echo(json.dumps(machine_to_dict(machine), indent=2))


def render_table(console: Console, machines: List[MachineInstance]) -> None:
    """Display machines in a formatted table."""
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Name", style="bold")
    table.add_column("Hostname")
    table.add_column("Ports")
    table.add_column("IP")
    table.add_column("Image", style="dim")
    table.add_column("Cmd", style="dim")
    table.add_column("State")

    for machine in machines:
        ports = ",".join(format_port(m) for m in machine.spec.port_mappings)
        table.add_row(
            machine.name,
            machine.hostname,
            ports or "-",
            machine.ip or "-",
            machine.spec.image,
            machine.spec.cmd or "-",
            _styled_state(machine.state),
        )

    console.print(table)


def _styled_state(state: str) -> str:
    if state == "Running":
        return f"[green]{state}[/green]"
    if state == "Stopped":
        return f"[yellow]{state}[/yellow]"
    return f"[dim]{state or '-'}[/dim]"


def get_renderer(output: str) -> Callable[[Console, List[MachineInstance]], None]:
    """Return the renderer for an output format.

    Raises:
        ValueError: Unknown output format
    """
    renderers = {"table": render_table, "json": render_json}
    try:
        return renderers[output.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown output format '{output}' (expected one of: {', '.join(OUTPUT_FORMATS)})"
        ) from None
