"""Machine lifecycle management (create, start, stop, delete).

State is never cached: every operation asks the backend whether the
container exists and whether it is started, then acts accordingly. An
operation whose precondition already holds is logged and skipped, which
makes every cluster-wide operation safe to re-run after a failure.
"""
from fleetbox.core.logger import get_logger
from fleetbox.models.machine import MachineInstance
from fleetbox.services.docker.backend import DockerBackend
from .provisioning import MachineProvisioner

logger = get_logger(__name__)


class MachineLifecycle:
    """Drives one machine at a time towards the requested state."""

    def __init__(self, backend: DockerBackend, provisioner: MachineProvisioner):
        self.backend = backend
        self.provisioner = provisioner

    def is_running(self, machine: MachineInstance) -> bool:
        """Whether the container exists (started or not)."""
        return self.backend.exists(machine.name)

    def is_started(self, machine: MachineInstance) -> bool:
        """Whether the container's init process is executing."""
        return self.backend.is_started(machine.name)

    def create(self, machine: MachineInstance, index: int) -> None:
        name = machine.name
        logger.info(f"Creating machine: {name} ...")

        running = self.is_running(machine)
        started = self.is_started(machine)
        if running:
            state = "started" if started else "stopped"
            logger.info(f"Machine with name {name} is already running ({state})...")
            return

        self.provisioner.provision(machine, index)

    def start(self, machine: MachineInstance, index: int) -> None:
        # Starting never creates a missing machine
        name = machine.name
        running = self.is_running(machine)
        started = self.is_started(machine)
        if not running:
            logger.info(f"Machine with name {name} isn't running...")
            return
        if started:
            logger.info(f"Machine with name {name} is already started...")
            return

        logger.info(f"Starting machine: {name} ...")
        self.backend.start(name)

    def stop(self, machine: MachineInstance, index: int) -> None:
        name = machine.name
        running = self.is_running(machine)
        started = self.is_started(machine)
        if not running:
            logger.info(f"Machine with name {name} isn't running...")
            return
        if not started:
            logger.info(f"Machine with name {name} is already stopped...")
            return

        logger.info(f"Stopping machine: {name} ...")
        self.backend.stop(name)

    def delete(self, machine: MachineInstance, index: int) -> None:
        name = machine.name
        running = self.is_running(machine)
        started = self.is_started(machine)
        if not running:
            logger.info(f"Machine with name {name} isn't running...")
            return

        if started:
            logger.info(f"Machine with name {name} is started, stopping and deleting machine...")
            self.backend.kill('KILL', name)
        else:
            logger.info(f"Deleting machine: {name} ...")
        self.backend.remove(name)
