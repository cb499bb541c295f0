"""Data models for fleetbox."""
from fleetbox.models.machine import (
    ClusterInfo,
    ClusterSpec,
    MachineInstance,
    MachineSpec,
    MachineTemplate,
    PortMapping,
    Volume,
)

__all__ = [
    'ClusterInfo',
    'ClusterSpec',
    'MachineInstance',
    'MachineSpec',
    'MachineTemplate',
    'PortMapping',
    'Volume',
]
