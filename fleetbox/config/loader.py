"""YAML configuration loader for fleetbox clusters."""
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from fleetbox.core.errors import ConfigError
from fleetbox.models.machine import ClusterSpec

DEFAULT_CONFIG_FILE = "fleetbox.yaml"


def _format_validation_error(error: ValidationError) -> str:
    lines = []
    for item in error.errors():
        location = ".".join(str(part) for part in item['loc']) or "<root>"
        lines.append(f"  {location}: {item['msg']}")
    return "\n".join(lines)


class ConfigLoader:
    """Loads and saves fleetbox cluster configuration files."""

    def __init__(self, config_path: str = DEFAULT_CONFIG_FILE):
        self.config_path = Path(config_path)
        self.raw_config: Optional[Dict[str, Any]] = None

    def load(self) -> ClusterSpec:
        """Load and validate the configuration file."""
        if not self.config_path.exists():
            raise ConfigError(
                f"Config file not found: {self.config_path}. "
                "Run 'fleetbox config create' to create one."
            )

        try:
            with open(self.config_path) as f:
                self.raw_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read {self.config_path}: {e}") from e

        if not self.raw_config:
            raise ConfigError(f"Config file is empty: {self.config_path}")

        return self.parse(self.raw_config, source=str(self.config_path))

    @staticmethod
    def parse(data: Dict[str, Any], source: str = "<config>") -> ClusterSpec:
        """Validate an already deserialized configuration."""
        if not isinstance(data, dict):
            raise ConfigError(f"{source}: expected a mapping at the top level")
        try:
            return ClusterSpec.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {source}:\n{_format_validation_error(e)}") from e

    @staticmethod
    def dump(spec: ClusterSpec) -> str:
        """Serialize a cluster spec to YAML using the file's key names.

        Only fields that were set when the spec was loaded or built are
        written, so a loaded file is saved back as it was read.
        """
        data = spec.model_dump(by_alias=True, exclude_none=True, exclude_unset=True)
        return yaml.safe_dump(data, sort_keys=False, default_flow_style=False)

    def save(self, spec: ClusterSpec) -> Path:
        """Write ``spec`` to the configuration file."""
        try:
            self.config_path.write_text(self.dump(spec))
        except OSError as e:
            raise ConfigError(f"Cannot write {self.config_path}: {e}") from e
        return self.config_path
