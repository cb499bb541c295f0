"""Expansion of machine templates into an ordered sequence of replicas."""
from typing import Callable, List

from fleetbox.models.machine import ClusterSpec, MachineInstance
from .identity import build_instance, resolve_by_hostname

MachineAction = Callable[[MachineInstance, int], None]


class Fleet:
    """Walks the replicas of a cluster in declaration order.

    Templates are visited in the order they are declared and, within a
    template, indices ascend from 0 to count - 1.
    """

    def __init__(self, spec: ClusterSpec):
        self.spec = spec

    def for_each(self, action: MachineAction) -> None:
        """Apply ``action`` to every replica.

        The first exception raised by ``action`` stops the walk and is
        propagated; replicas already processed are left as they are.
        """
        for template in self.spec.machines:
            for i in range(template.count):
                action(build_instance(self.spec, template.spec, i), i)

    def gather_all(self) -> List[MachineInstance]:
        """Return every replica, in walk order."""
        machines: List[MachineInstance] = []
        self.for_each(lambda machine, _: machines.append(machine))
        return machines

    def from_hostname(self, hostname: str) -> MachineInstance:
        return resolve_by_hostname(self.spec, hostname)
