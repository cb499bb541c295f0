"""Reconciliation of the declared fleet with live docker state."""
from typing import List

from fleetbox.core.logger import get_logger
from fleetbox.models.machine import MachineInstance, PortMapping, Volume
from fleetbox.services.docker.backend import ContainerRecord, DockerBackend
from .fleet import Fleet

logger = get_logger(__name__)

STATE_RUNNING = "Running"
STATE_STOPPED = "Stopped"
STATE_NOT_CREATED = "Not created"

VOLUME_TYPES = {"bind", "volume", "tmpfs"}


def overlay(machine: MachineInstance, record: ContainerRecord) -> None:
    """Replace declared ports, mounts and command with what docker reports.

    Only the machine's own copy of the spec is modified.
    """
    machine.spec.port_mappings = [
        PortMapping(
            container_port=port.container_port,
            host_port=port.host_port,
            address=port.host_ip,
            protocol=port.protocol if port.protocol in ("tcp", "udp", "sctp") else None,
        )
        for port in record.ports
    ]
    machine.spec.volumes = [
        Volume(
            type=mount.type if mount.type in VOLUME_TYPES else "volume",
            source=mount.source or None,
            destination=mount.destination,
            read_only=not mount.rw,
        )
        for mount in record.mounts
        if mount.destination.startswith('/')
    ]
    machine.spec.cmd = ",".join(record.command)
    machine.ip = record.ip_address or None
    machine.state = STATE_RUNNING if record.running else STATE_STOPPED


def gather_live(fleet: Fleet, backend: DockerBackend) -> List[MachineInstance]:
    """Return every declared replica, with live data for those that exist."""
    machines = fleet.gather_all()
    for machine in machines:
        if not backend.exists(machine.name):
            machine.state = STATE_NOT_CREATED
            continue
        logger.debug(f"Inspecting machine {machine.name}")
        overlay(machine, backend.inspect(machine.name))
    return machines
