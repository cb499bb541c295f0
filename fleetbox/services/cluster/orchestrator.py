"""High-level cluster operations (facade over the cluster components)."""
from pathlib import Path
from typing import List, Optional, Sequence

from fleetbox.config.loader import ConfigLoader
from fleetbox.core.errors import MachineNotFoundError
from fleetbox.core.logger import get_logger
from fleetbox.models.machine import ClusterSpec, MachineInstance
from fleetbox.services.docker.backend import DockerBackend
from fleetbox.services.keys import KeyManager
from .fleet import Fleet
from .inspection import gather_live
from .lifecycle import MachineLifecycle
from .provisioning import MachineProvisioner
from .ssh import DEFAULT_USER, RemoteSession

logger = get_logger(__name__)


class Cluster:
    """A set of machines described by one cluster configuration.

    Every operation walks the machines in declaration order and stops at
    the first failure. Nothing is rolled back; re-running an operation
    skips the machines that are already in the requested state.
    """

    def __init__(
        self,
        spec: ClusterSpec,
        backend: Optional[DockerBackend] = None,
        keys: Optional[KeyManager] = None,
        mock: bool = False,
    ):
        self.spec = spec
        self.mock = mock
        self.backend = backend or DockerBackend(mock=mock)
        self.keys = keys or KeyManager(spec.cluster.private_key, spec.cluster.name, mock=mock)
        self.fleet = Fleet(spec)
        self.provisioner = MachineProvisioner(self.backend, spec.cluster.name, self.keys.public_key)
        self.lifecycle = MachineLifecycle(self.backend, self.provisioner)

    @classmethod
    def from_file(cls, path: str, **kwargs) -> 'Cluster':
        """Create a Cluster from a YAML configuration file."""
        return cls(ConfigLoader(path).load(), **kwargs)

    @property
    def name(self) -> str:
        return self.spec.cluster.name

    def save(self, path: str) -> Path:
        """Write the cluster configuration to ``path``."""
        return ConfigLoader(path).save(self.spec)

    def create(self) -> None:
        """Create every machine that doesn't exist yet."""
        self.keys.ensure_key()
        for template in self.spec.machines:
            self.backend.pull_if_absent(template.spec.image)
        self.fleet.for_each(self.lifecycle.create)

    def delete(self) -> None:
        self.fleet.for_each(self.lifecycle.delete)

    def start(self) -> None:
        self.fleet.for_each(self.lifecycle.start)

    def stop(self) -> None:
        self.fleet.for_each(self.lifecycle.stop)

    def machines(self) -> List[MachineInstance]:
        """All declared machines, overlaid with live docker data."""
        return gather_live(self.fleet, self.backend)

    def inspect(self, name: str) -> MachineInstance:
        """Return one machine by container name.

        Raises:
            MachineNotFoundError: If no declared machine has that name
        """
        for machine in self.machines():
            if machine.name == name.lstrip('/'):
                return machine
        raise MachineNotFoundError(name)

    def ssh(self, hostname: str, username: str = DEFAULT_USER, remote_args: Sequence[str] = ()) -> None:
        """Open an SSH session on the machine with the given hostname."""
        session = RemoteSession(self.fleet, self.backend, self.spec.cluster.private_key, mock=self.mock)
        session.connect(hostname, username, remote_args)
