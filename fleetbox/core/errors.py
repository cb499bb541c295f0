"""Exception hierarchy shared by all fleetbox components."""
from typing import List, Optional


class FleetError(Exception):
    """Base class for errors surfaced to fleetbox users."""
    pass


class ConfigError(FleetError):
    """Raised when the cluster configuration cannot be read or is invalid."""
    pass


class BackendError(FleetError):
    """Raised when an external tool (docker, ssh-keygen) invocation fails."""

    def __init__(
        self,
        message: str,
        command: Optional[List[str]] = None,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
    ):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        if stderr:
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)


class InvalidHostnameError(FleetError):
    """Raised when no declared machine produces the requested hostname."""

    def __init__(self, hostname: str):
        self.hostname = hostname
        super().__init__(f"{hostname}: invalid machine hostname")


class UnknownPortError(FleetError):
    """Raised when a machine declares no mapping for a container port."""

    def __init__(self, container_port: int):
        self.container_port = container_port
        super().__init__(f"unknown containerPort {container_port}")


class MachineNotFoundError(FleetError):
    """Raised when no declared machine has the requested container name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"machine with name {name} not found")


class RemoteSessionError(FleetError):
    """Raised when the ssh client exits with a non-zero status."""

    def __init__(self, returncode: int, message: Optional[str] = None):
        self.returncode = returncode
        super().__init__(message or f"ssh exited with status {returncode}")


class TransientConnectionError(RemoteSessionError):
    """ssh failed while the remote daemon was still refusing connections."""
    pass
