"""First-boot provisioning of machine containers."""
import shlex
from typing import Callable, List

from fleetbox.core.logger import get_logger
from fleetbox.models.machine import MachineInstance, PortMapping, Volume
from fleetbox.services.docker.backend import DockerBackend

logger = get_logger(__name__)

OWNER_LABEL = 'works.weave.owner=fleetbox'
CLUSTER_LABEL = 'works.weave.cluster'

DEFAULT_COMMAND = '/sbin/init'
AUTHORIZED_KEYS = '/root/.ssh/authorized_keys'

INIT_SCRIPT = """
set -e
rm -f /run/nologin
sshdir=/root/.ssh
mkdir $sshdir; chmod 700 $sshdir
touch $sshdir/authorized_keys; chmod 600 $sshdir/authorized_keys
"""


def mount_arg(volume: Volume) -> str:
    """Format a volume as a ``docker run --mount`` value."""
    mount = f"type={volume.type}"
    if volume.source:
        mount += f",src={volume.source}"
    mount += f",dst={volume.destination}"
    if volume.read_only:
        mount += ",readonly"
    return mount


def publish_arg(mapping: PortMapping, index: int) -> str:
    """Format a port mapping as a ``docker run -p`` value for replica ``index``.

    Replicas share the template's host port as a base: replica ``i`` binds
    ``host_port + i``. Without a host port docker picks a free one.
    """
    publish = ""
    if mapping.address:
        publish += f"{mapping.address}:"
    if mapping.host_port:
        publish += f"{mapping.host_port + index}:"
    elif mapping.address:
        # Empty host port, i.e. "address::containerPort"
        publish += ":"
    publish += str(mapping.container_port)
    if mapping.protocol:
        publish += f"/{mapping.protocol}"
    return publish


class MachineProvisioner:
    """Launches a machine container and prepares it for SSH logins."""

    def __init__(self, backend: DockerBackend, cluster_name: str, public_key: Callable[[], bytes]):
        self.backend = backend
        self.cluster_name = cluster_name
        self.public_key = public_key

    def run_args(self, machine: MachineInstance, index: int) -> List[str]:
        """Compute the ``docker run`` arguments for one replica."""
        args = [
            '-it', '-d',
            '--label', OWNER_LABEL,
            '--label', f'{CLUSTER_LABEL}={self.cluster_name}',
            '--name', machine.name,
            '--hostname', machine.hostname,
            '--tmpfs', '/run',
            '--tmpfs', '/run/lock',
            '--tmpfs', '/tmp',
            '-v', '/sys/fs/cgroup:/sys/fs/cgroup:ro',
        ]

        for volume in machine.spec.volumes:
            args.extend(['--mount', mount_arg(volume)])

        for mapping in machine.spec.port_mappings:
            args.extend(['-p', publish_arg(mapping, index)])

        if machine.spec.privileged:
            args.append('--privileged')

        return args

    def command(self, machine: MachineInstance) -> List[str]:
        if machine.spec.cmd:
            return shlex.split(machine.spec.cmd)
        return [DEFAULT_COMMAND]

    def provision(self, machine: MachineInstance, index: int) -> str:
        """Run the container, then install the cluster's public key.

        A failure leaves whatever was created in place; deleting the
        cluster cleans it up.

        Returns:
            The new container ID
        """
        args = self.run_args(machine, index)
        container_id = self.backend.run(machine.spec.image, args, self.command(machine))
        logger.debug(f"Machine {machine.name} runs as container {container_id}")

        self.backend.exec_shell(machine.name, INIT_SCRIPT)
        self.backend.copy_into(machine.name, self.public_key(), AUTHORIZED_KEYS)
        return container_id
