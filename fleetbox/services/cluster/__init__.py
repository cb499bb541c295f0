"""Cluster lifecycle orchestration.

This package splits cluster operations by concern:
- identity: Container names and hostnames of machine replicas
- Fleet: Ordered expansion of machine templates into replicas
- MachineLifecycle: Create, start, stop, delete one machine
- MachineProvisioner: docker run arguments and first-boot setup
- RemoteSession: SSH logins with retry while sshd comes up
- inspection: Live docker data overlaid on declared machines
- Cluster: High-level orchestration (facade)
"""
from .fleet import Fleet
from .lifecycle import MachineLifecycle
from .provisioning import MachineProvisioner
from .ssh import RemoteSession
from .orchestrator import Cluster

__all__ = [
    'Cluster',
    'Fleet',
    'MachineLifecycle',
    'MachineProvisioner',
    'RemoteSession',
]
