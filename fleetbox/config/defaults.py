"""Default cluster configuration written by ``fleetbox config create``."""
from fleetbox.models.machine import ClusterInfo, ClusterSpec, MachineSpec, MachineTemplate, PortMapping, Volume

DEFAULT_CLUSTER_NAME = "cluster"
DEFAULT_PRIVATE_KEY = "cluster-key"
DEFAULT_IMAGE = "quay.io/footloose/centos7"
DEFAULT_MACHINE_NAME = "node%d"
DEFAULT_SSH_HOST_PORT = 2222


def default_cluster(
    name: str = DEFAULT_CLUSTER_NAME,
    private_key: str = DEFAULT_PRIVATE_KEY,
    image: str = DEFAULT_IMAGE,
    replicas: int = 1,
    fixed_ports: bool = False,
    privileged: bool = False,
) -> ClusterSpec:
    """Build a single-template cluster publishing SSH on every machine.

    Args:
        name: Cluster name, used as container name prefix
        private_key: Path of the SSH private key
        image: Machine image
        replicas: Number of machines
        fixed_ports: Publish SSH on 2222 + index instead of a docker-chosen port
        privileged: Run machines as privileged containers
    """
    ssh_mapping = PortMapping(
        container_port=22,
        host_port=DEFAULT_SSH_HOST_PORT if fixed_ports else None,
    )
    volumes = [Volume(type="volume", destination="/var/lib/docker")] if privileged else []
    spec = MachineSpec(
        name=DEFAULT_MACHINE_NAME,
        image=image,
        privileged=privileged,
        volumes=volumes,
        port_mappings=[ssh_mapping],
    )
    return ClusterSpec(
        cluster=ClusterInfo(name=name, private_key=private_key),
        machines=[MachineTemplate(count=replicas, spec=spec)],
    )
