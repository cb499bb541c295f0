"""Cluster and machine configuration models."""
from dataclasses import dataclass
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Single integer slot a machine name may carry, e.g. "node%d"
INDEX_SLOT = "%d"


def machine_hostname(template_name: str, index: int) -> str:
    """Return the hostname of replica ``index`` of a machine template."""
    return template_name.replace(INDEX_SLOT, str(index), 1)


class Volume(BaseModel):
    """A mount attached to every replica of a machine."""

    model_config = ConfigDict(extra='forbid', populate_by_name=True)

    type: Literal["bind", "volume", "tmpfs"] = "volume"
    source: Optional[str] = None
    destination: str
    read_only: bool = Field(False, alias="readOnly")

    @field_validator('destination')
    @classmethod
    def validate_destination(cls, v):
        """Validate destination path is absolute."""
        if not v.startswith('/'):
            raise ValueError(f"Volume destination must be absolute (start with /). Got: {v}")
        return v


class PortMapping(BaseModel):
    """A container port published on the host."""

    model_config = ConfigDict(extra='forbid', populate_by_name=True)

    container_port: int = Field(..., alias="containerPort", ge=1, le=65535)
    host_port: Optional[int] = Field(None, alias="hostPort", ge=1, le=65535)
    address: Optional[str] = None
    protocol: Optional[Literal["tcp", "udp", "sctp"]] = None


class MachineSpec(BaseModel):
    """Everything needed to run one replica of a machine."""

    model_config = ConfigDict(extra='forbid', populate_by_name=True)

    name: str = Field(..., min_length=1, description="Hostname template, e.g. node%d")
    image: str = Field(..., min_length=1)
    cmd: Optional[str] = None
    privileged: bool = False
    volumes: List[Volume] = Field(default_factory=list)
    port_mappings: List[PortMapping] = Field(default_factory=list, alias="portMappings")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        """Allow at most one index slot and no other format directives."""
        if v.count(INDEX_SLOT) > 1:
            raise ValueError(f"Machine name '{v}' must contain at most one {INDEX_SLOT} slot")
        if '%' in v.replace(INDEX_SLOT, ''):
            raise ValueError(f"Machine name '{v}' may only use {INDEX_SLOT} as a format directive")
        return v

    def mapping_for_port(self, container_port: int) -> Optional[PortMapping]:
        """Return the first mapping declared for a container port."""
        for mapping in self.port_mappings:
            if mapping.container_port == container_port:
                return mapping
        return None


class MachineTemplate(BaseModel):
    """A machine spec plus the number of replicas to run."""

    model_config = ConfigDict(extra='forbid', frozen=True)

    count: int = Field(1, ge=0)
    spec: MachineSpec

    @model_validator(mode='after')
    def validate_replicas(self) -> 'MachineTemplate':
        """Make sure every replica gets a distinct hostname and host port."""
        if self.count > 1 and INDEX_SLOT not in self.spec.name:
            raise ValueError(
                f"Machine '{self.spec.name}' has {self.count} replicas "
                f"but no {INDEX_SLOT} slot in its name"
            )
        for mapping in self.spec.port_mappings:
            if mapping.host_port and mapping.host_port + max(self.count - 1, 0) > 65535:
                raise ValueError(
                    f"Host port {mapping.host_port} of '{self.spec.name}' overflows "
                    f"65535 with {self.count} replicas"
                )
        return self


class ClusterInfo(BaseModel):
    """Cluster-wide settings."""

    model_config = ConfigDict(extra='forbid', populate_by_name=True)

    name: str = Field(..., min_length=1)
    private_key: str = Field("cluster-key", alias="privateKey")


class ClusterSpec(BaseModel):
    """Root of a fleetbox configuration file."""

    model_config = ConfigDict(extra='forbid')

    cluster: ClusterInfo
    machines: List[MachineTemplate] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_unique_hostnames(self) -> 'ClusterSpec':
        """Reject configurations where two replicas share a hostname."""
        seen = {}
        for template in self.machines:
            for i in range(template.count):
                hostname = machine_hostname(template.spec.name, i)
                if hostname in seen:
                    raise ValueError(
                        f"Hostname '{hostname}' is produced by both "
                        f"'{seen[hostname]}' and '{template.spec.name}'"
                    )
                seen[hostname] = template.spec.name
        return self


@dataclass
class MachineInstance:
    """One concrete replica of a machine template.

    ``spec`` is a private copy of the template spec: live inspection data
    is overlaid on it without touching the loaded configuration.
    """
    spec: MachineSpec
    index: int
    name: str
    hostname: str
    ip: Optional[str] = None
    state: Optional[str] = None

    @classmethod
    def from_template(cls, spec: MachineSpec, index: int, name: str, hostname: str) -> 'MachineInstance':
        return cls(spec=spec.model_copy(deep=True), index=index, name=name, hostname=hostname)
