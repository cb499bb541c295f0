"""SSH sessions into cluster machines.

The sshd inside a freshly created container is not accepting connections
the instant docker reports the container as running. Rather than sleeping
a fixed amount, the ssh client's stderr is watched for the identification
exchange being reset and only attempts failing that way are retried.
"""
import re
import shlex
import subprocess
import sys
from typing import List, Optional, Protocol, Sequence, Tuple

from fleetbox.core.errors import RemoteSessionError, TransientConnectionError, UnknownPortError
from fleetbox.core.logger import get_logger
from fleetbox.core.retry import retry
from fleetbox.models.machine import MachineInstance
from fleetbox.services.docker.backend import DockerBackend
from fleetbox.services.keys import expand_path
from .fleet import Fleet

logger = get_logger(__name__)

SSH_PORT = 22
DEFAULT_USER = 'root'

CONNECT_ATTEMPTS = 25
CONNECT_DELAY = 0.2

# Matches:
#   ssh_exchange_identification: read: Connection reset by peer
CONNECT_REFUSED = re.compile(r"^ssh_exchange_identification: ")

# Matches:
#   Warning: Permanently added '172.17.0.2' (ECDSA) to the list of known hosts.
KNOWN_HOSTS = re.compile(r"^Warning: Permanently added .* to the list of known hosts\.")


class LineSink(Protocol):
    def write(self, line: str) -> None:
        ...


class StderrSink:
    """Terminal sink writing lines to the process's stderr."""

    def write(self, line: str) -> None:
        sys.stderr.write(line)
        sys.stderr.flush()


class MatchFilter:
    """Line sink forwarding to another sink, remembering if a pattern was seen.

    Filters compose by using one filter as the ``writer`` of another.
    """

    def __init__(self, writer: LineSink, pattern: re.Pattern, forward_matched: bool = False):
        self.writer = writer
        self.pattern = pattern
        self.forward_matched = forward_matched
        self.matched = False

    def observe(self, line: str) -> Tuple[bool, bool]:
        """Return ``(forward, matched)`` for a line and record the match."""
        matched = bool(self.pattern.search(line))
        if matched:
            self.matched = True
        return (self.forward_matched or not matched), matched

    def write(self, line: str) -> None:
        forward, _ = self.observe(line)
        if forward:
            self.writer.write(line)


def ssh_args(
    private_key: str,
    port: int,
    username: str,
    address: str,
    remote_args: Sequence[str] = (),
) -> List[str]:
    """Build the ssh client arguments for an ephemeral machine.

    Host keys change every time a machine is recreated, so they are
    neither checked nor remembered.
    """
    return [
        '-o', 'UserKnownHostsFile=/dev/null',
        '-o', 'StrictHostKeyChecking=no',
        '-o', 'IdentitiesOnly=yes',
        '-i', str(expand_path(private_key)),
        '-p', str(port),
        '-l', username,
        address,
    ] + list(remote_args)


def run_ssh(args: List[str], sink: Optional[LineSink] = None) -> None:
    """Run one interactive ssh attempt.

    stdin and stdout are shared with fleetbox; stderr goes through the
    known-hosts filter, then the connection-refused filter.

    Raises:
        TransientConnectionError: ssh failed and the refusal signature was seen
        RemoteSessionError: ssh failed for any other reason
    """
    refused_filter = MatchFilter(sink or StderrSink(), CONNECT_REFUSED)
    err_filter = MatchFilter(refused_filter, KNOWN_HOSTS)

    cmd = ['ssh'] + args
    logger.debug(f"Command: {shlex.join(cmd)}")
    try:
        with subprocess.Popen(cmd, stderr=subprocess.PIPE, text=True, errors='replace') as process:
            for line in process.stderr:
                err_filter.write(line)
            returncode = process.wait()
    except FileNotFoundError as e:
        raise RemoteSessionError(127, "ssh client not found") from e

    if returncode == 0:
        return
    if refused_filter.matched:
        raise TransientConnectionError(returncode, "ssh connection refused, sshd not ready yet")
    raise RemoteSessionError(returncode)


class RemoteSession:
    """Opens SSH sessions on machines of a fleet."""

    def __init__(
        self,
        fleet: Fleet,
        backend: DockerBackend,
        private_key: str,
        attempts: int = CONNECT_ATTEMPTS,
        delay: float = CONNECT_DELAY,
        mock: bool = False,
    ):
        self.fleet = fleet
        self.mock = mock
        self.backend = backend
        self.private_key = private_key
        self.attempts = attempts
        self.delay = delay

    def host_port(self, machine: MachineInstance, container_port: int) -> int:
        """Host port under which a replica publishes ``container_port``.

        Raises:
            UnknownPortError: If the machine declares no mapping for the port
        """
        mapping = machine.spec.mapping_for_port(container_port)
        if mapping is None:
            raise UnknownPortError(container_port)
        if mapping.host_port:
            return mapping.host_port + machine.index
        return self.backend.host_port(machine.name, container_port, mapping.protocol or 'tcp')

    def args_for(self, hostname: str, username: str = DEFAULT_USER, remote_args: Sequence[str] = ()) -> List[str]:
        """Resolve a hostname to the ssh arguments reaching it."""
        machine = self.fleet.from_hostname(hostname)
        port = self.host_port(machine, SSH_PORT)
        mapping = machine.spec.mapping_for_port(SSH_PORT)
        remote = mapping.address or 'localhost'
        return ssh_args(self.private_key, port, username, remote, remote_args)

    def connect(self, hostname: str, username: str = DEFAULT_USER, remote_args: Sequence[str] = ()) -> None:
        """Log into a machine, retrying while its sshd is still coming up.

        Raises:
            InvalidHostnameError: Unknown hostname
            UnknownPortError: The machine does not publish port 22
            RemoteSessionError: ssh exited with a non-zero status
        """
        args = self.args_for(hostname, username, remote_args)
        if self.mock:
            logger.info(f"MOCK: Would run: {shlex.join(['ssh'] + args)}")
            return

        attempt = retry(
            max_attempts=self.attempts,
            delay=self.delay,
            backoff=1.0,
            exceptions=(TransientConnectionError,),
            quiet=True,
        )(run_ssh)
        attempt(args)
