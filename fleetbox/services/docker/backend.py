"""Docker CLI backend for fleetbox machines."""
import json
import shlex
import subprocess
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from fleetbox.core.errors import BackendError
from fleetbox.core.logger import get_logger
from fleetbox.core.retry import retry

logger = get_logger(__name__)


@dataclass
class PublishedPort:
    """One host binding of a container port as reported by docker inspect."""
    container_port: int
    protocol: str
    host_port: Optional[int] = None
    host_ip: Optional[str] = None


@dataclass
class ContainerMount:
    """A mount as reported by docker inspect."""
    type: str
    source: str
    destination: str
    rw: bool = True


@dataclass
class ContainerRecord:
    """The parts of ``docker inspect`` fleetbox displays."""
    ports: List[PublishedPort] = field(default_factory=list)
    mounts: List[ContainerMount] = field(default_factory=list)
    command: List[str] = field(default_factory=list)
    ip_address: str = ""
    running: bool = False

    @classmethod
    def from_inspect(cls, data: Dict[str, Any]) -> 'ContainerRecord':
        """Build a record from the JSON document of ``docker inspect``."""
        network = data.get('NetworkSettings') or {}

        ports = []
        for key, bindings in sorted((network.get('Ports') or {}).items()):
            # Unpublished exposed ports map to null
            if not bindings:
                continue
            port, _, protocol = key.partition('/')
            binding = bindings[0]
            host_port = binding.get('HostPort')
            ports.append(PublishedPort(
                container_port=int(port),
                protocol=protocol or 'tcp',
                host_port=int(host_port) if host_port and host_port != '0' else None,
                host_ip=binding.get('HostIp') or None,
            ))

        mounts = [
            ContainerMount(
                type=mount.get('Type', ''),
                source=mount.get('Source', ''),
                destination=mount.get('Destination', ''),
                rw=bool(mount.get('RW', True)),
            )
            for mount in data.get('Mounts') or []
        ]

        return cls(
            ports=ports,
            mounts=mounts,
            command=list((data.get('Config') or {}).get('Cmd') or []),
            ip_address=network.get('IPAddress', ''),
            running=bool((data.get('State') or {}).get('Running', False)),
        )


class DockerBackend:
    """Runs fleetbox machines as Docker containers through the docker CLI.

    Every primitive maps onto exactly one docker invocation. Failures raise
    BackendError carrying the command, exit status and stderr.
    """

    def __init__(self, mock: bool = False, binary: str = 'docker'):
        """Initialize backend.

        Args:
            mock: If True, log commands instead of running them
            binary: docker compatible CLI to invoke
        """
        self.mock = mock
        self.binary = binary

    def _run(
        self,
        args: List[str],
        input: Optional[bytes] = None,
        check: bool = True,
    ) -> subprocess.CompletedProcess:
        """Run a docker command and capture its output.

        Args:
            args: docker arguments (without the binary)
            input: Bytes fed to the command's stdin
            check: Raise BackendError on a non-zero exit status

        Returns:
            The completed process, stdout and stderr decoded as text
        """
        cmd = [self.binary] + args
        logger.debug(f"Command: {shlex.join(cmd)}")

        if self.mock:
            logger.info(f"MOCK: Would run: {shlex.join(cmd)}")
            return subprocess.CompletedProcess(cmd, 0, stdout='', stderr='')

        try:
            result = subprocess.run(cmd, input=input, capture_output=True, check=False)
        except FileNotFoundError as e:
            raise BackendError(f"{self.binary} not found", command=cmd) from e

        stdout = result.stdout.decode(errors='replace')
        stderr = result.stderr.decode(errors='replace')
        if check and result.returncode != 0:
            raise BackendError(
                f"{shlex.join(cmd[:2])} failed with exit status {result.returncode}",
                command=cmd,
                returncode=result.returncode,
                stderr=stderr,
            )
        return subprocess.CompletedProcess(cmd, result.returncode, stdout=stdout, stderr=stderr)

    # Images

    def image_present(self, image: str) -> bool:
        """Check whether an image is available locally."""
        if self.mock:
            return True
        result = self._run(['inspect', '--type=image', image], check=False)
        return result.returncode == 0

    def pull_if_absent(self, image: str, attempts: int = 3, delay: float = 1.0) -> bool:
        """Pull ``image`` unless it is already present.

        Returns:
            True if the image was pulled, False if it was already present
        """
        if self.image_present(image):
            logger.debug(f"Image {image} already present")
            return False

        logger.info(f"Pulling image: {image} ...")
        pull = retry(max_attempts=attempts, delay=delay, backoff=1.0, exceptions=(BackendError,))(
            self._pull
        )
        pull(image)
        return True

    def _pull(self, image: str) -> None:
        self._run(['pull', image])

    # Containers

    def run(self, image: str, args: List[str], command: List[str]) -> str:
        """Run a new container and return its ID."""
        result = self._run(['run'] + args + [image] + command)
        return result.stdout.strip()

    def exists(self, name: str) -> bool:
        """True when a container object with this name exists, started or not."""
        if self.mock:
            return False
        result = self._run(['inspect', '--type=container', '--format', '{{.Name}}', name], check=False)
        return result.returncode == 0 and bool(result.stdout.strip())

    def is_started(self, name: str) -> bool:
        """True when the container's main process is executing."""
        if self.mock:
            return False
        result = self._run(
            ['inspect', '--type=container', '--format', '{{.State.Running}}', name],
            check=False,
        )
        return result.returncode == 0 and result.stdout.strip().strip("'") == 'true'

    def inspect(self, name: str) -> ContainerRecord:
        """Return the inspection record of a container."""
        if self.mock:
            return ContainerRecord()
        result = self._run(['inspect', '--type=container', '--format', '{{json .}}', name])
        try:
            data = json.loads(result.stdout.strip().strip("'"))
        except json.JSONDecodeError as e:
            raise BackendError(f"Unparseable inspect output for {name}: {e}") from e
        return ContainerRecord.from_inspect(data)

    def host_port(self, name: str, container_port: int, protocol: str = 'tcp') -> int:
        """Return the host port docker published for ``container_port``."""
        if self.mock:
            return container_port
        result = self._run(['port', name, f'{container_port}/{protocol}'])
        # One "address:port" line per binding, e.g. "0.0.0.0:32768"
        for line in result.stdout.splitlines():
            _, _, port = line.strip().rpartition(':')
            if port.isdigit():
                return int(port)
        raise BackendError(f"Container {name} does not publish port {container_port}/{protocol}")

    def kill(self, signal: str, name: str) -> None:
        self._run(['kill', '-s', signal, name])

    def start(self, name: str) -> None:
        self._run(['start', name])

    def stop(self, name: str) -> None:
        self._run(['stop', name])

    def remove(self, name: str) -> None:
        self._run(['rm', name])

    def exec_shell(self, name: str, script: str) -> None:
        """Run a shell script inside a running container."""
        self._run(['exec', name, '/bin/bash', '-c', script])

    def copy_into(self, name: str, content: bytes, dest_path: str) -> None:
        """Write ``content`` to ``dest_path`` inside a running container."""
        self._run(
            ['exec', '-i', name, '/bin/sh', '-c', f'cat > {shlex.quote(dest_path)}'],
            input=content,
        )
