"""Deterministic naming of machine replicas.

A machine name is a template holding at most one ``%d`` slot. The hostname
of replica ``i`` is that template with ``i`` substituted into the slot, and
the container name prefixes the hostname with the cluster name::

    machine_hostname("node%d", 1)             -> "node1"
    machine_name("cluster", "node%d", 1)      -> "cluster-node1"

Both are pure functions of their arguments. ClusterSpec validation rejects
configurations where two replicas would share a hostname, so within one
cluster distinct (template, index) pairs never collide.
"""
from fleetbox.core.errors import InvalidHostnameError
from fleetbox.models.machine import ClusterSpec, MachineInstance, MachineSpec, machine_hostname


def machine_name(cluster_name: str, template_name: str, index: int) -> str:
    """Return the container name of replica ``index`` of a machine template."""
    return f"{cluster_name}-{machine_hostname(template_name, index)}"


def build_instance(cluster: ClusterSpec, spec: MachineSpec, index: int) -> MachineInstance:
    """Materialize replica ``index`` of ``spec``."""
    return MachineInstance.from_template(
        spec,
        index,
        name=machine_name(cluster.cluster.name, spec.name, index),
        hostname=machine_hostname(spec.name, index),
    )


def resolve_by_hostname(cluster: ClusterSpec, hostname: str) -> MachineInstance:
    """Find the replica whose hostname is ``hostname``.

    Raises:
        InvalidHostnameError: If no template/index combination matches
    """
    for template in cluster.machines:
        for i in range(template.count):
            if machine_hostname(template.spec.name, i) == hostname:
                return build_instance(cluster, template.spec, i)
    raise InvalidHostnameError(hostname)
