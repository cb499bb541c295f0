"""Tests for machine naming and hostname resolution."""
import subprocess
import sys
from pathlib import Path

import pytest

from fleetbox.core.errors import InvalidHostnameError
from fleetbox.services.cluster.identity import (
    build_instance,
    machine_hostname,
    machine_name,
    resolve_by_hostname,
)


class TestNaming:
    """Container names and hostnames are pure functions of their inputs."""

    def test_hostname_substitutes_index(self):
        assert machine_hostname("node%d", 0) == "node0"
        assert machine_hostname("node%d", 12) == "node12"

    def test_hostname_slot_in_middle(self):
        assert machine_hostname("web%d-eu", 3) == "web3-eu"

    def test_hostname_without_slot_is_verbatim(self):
        assert machine_hostname("gateway", 0) == "gateway"

    def test_container_name_prefixes_cluster(self):
        assert machine_name("cluster", "node%d", 1) == "cluster-node1"

    def test_naming_is_deterministic(self):
        assert machine_name("c", "n%d", 4) == machine_name("c", "n%d", 4)

    def test_names_are_unique_across_cluster(self, cluster_spec):
        names = [
            machine_name(cluster_spec.cluster.name, t.spec.name, i)
            for t in cluster_spec.machines
            for i in range(t.count)
        ]
        assert len(names) == len(set(names)) == 4


class TestBuildInstance:
    """Test materializing replicas."""

    def test_fields(self, cluster_spec):
        template = cluster_spec.machines[1]
        machine = build_instance(cluster_spec, template.spec, 1)

        assert machine.name == "cluster-db1"
        assert machine.hostname == "db1"
        assert machine.index == 1
        assert machine.ip is None
        assert machine.spec.image == "quay.io/footloose/ubuntu18.04"

    def test_spec_is_a_private_copy(self, cluster_spec):
        template = cluster_spec.machines[0]
        machine = build_instance(cluster_spec, template.spec, 0)

        machine.spec.port_mappings = []

        assert len(template.spec.port_mappings) == 1


class TestResolveByHostname:
    """Test reverse lookup from hostname to replica."""

    @pytest.mark.parametrize("hostname,template,index", [
        ("node0", "node%d", 0),
        ("node1", "node%d", 1),
        ("db0", "db%d", 0),
        ("db1", "db%d", 1),
    ])
    def test_every_declared_hostname_resolves(self, cluster_spec, hostname, template, index):
        machine = resolve_by_hostname(cluster_spec, hostname)

        assert machine.spec.name == template
        assert machine.index == index
        assert machine.hostname == hostname

    @pytest.mark.parametrize("hostname", ["node2", "db", "cluster-node0", ""])
    def test_undeclared_hostname_fails(self, cluster_spec, hostname):
        with pytest.raises(InvalidHostnameError, match="invalid machine hostname"):
            resolve_by_hostname(cluster_spec, hostname)


def test_models_do_not_load_services():
    code = "import sys, fleetbox.models.machine; print('fleetbox.services' in sys.modules)"
    result = subprocess.run(
        [sys.executable, "-c", code],
        cwd=Path(__file__).resolve().parents[1],
        capture_output=True,
        text=True,
        check=True,
    )

    assert result.stdout.strip() == "False"
