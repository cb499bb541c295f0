"""SSH key pair management for cluster machines."""
import os
import shlex
import subprocess
from pathlib import Path

from fleetbox.core.errors import BackendError, ConfigError
from fleetbox.core.logger import get_logger

logger = get_logger(__name__)


def expand_path(path: str) -> Path:
    """Expand a home-directory relative path such as ``~/.ssh/key``."""
    return Path(os.path.expanduser(path))


class KeyManager:
    """Creates and reads the key pair used to log into cluster machines."""

    def __init__(self, private_key: str, cluster_name: str, mock: bool = False):
        self.private_key = expand_path(private_key)
        self.cluster_name = cluster_name
        self.mock = mock

    @property
    def public_key_path(self) -> Path:
        return self.private_key.with_name(self.private_key.name + '.pub')

    def ensure_key(self) -> bool:
        """Generate an RSA key pair unless the private key already exists.

        Returns:
            True if a key pair was generated
        """
        if self.private_key.exists():
            return False

        cmd = [
            'ssh-keygen', '-q',
            '-t', 'rsa',
            '-b', '4096',
            '-C', f'{self.cluster_name}@fleetbox.mail',
            '-f', str(self.private_key),
            '-N', '',
        ]

        if self.mock:
            logger.info(f"MOCK: Would run: {shlex.join(cmd)}")
            return True

        logger.info(f"Creating SSH key: {self.private_key} ...")
        try:
            subprocess.run(cmd, capture_output=True, text=True, check=True)
        except FileNotFoundError as e:
            raise BackendError("ssh-keygen not found", command=cmd) from e
        except subprocess.CalledProcessError as e:
            raise BackendError(
                "ssh-keygen failed", command=cmd, returncode=e.returncode, stderr=e.stderr
            ) from e
        return True

    def public_key(self) -> bytes:
        """Read the public half of the key pair."""
        if self.mock and not self.public_key_path.exists():
            return b''
        try:
            return self.public_key_path.read_bytes()
        except OSError as e:
            raise ConfigError(f"Cannot read public key {self.public_key_path}: {e}") from e
