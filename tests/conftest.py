"""Shared test fixtures for fleetbox tests."""
import pytest

from fleetbox.models.machine import ClusterSpec
from fleetbox.services.docker.backend import ContainerRecord


class FakeBackend:
    """In-memory stand-in for DockerBackend recording every mutating call.

    ``containers`` maps container names to whether they are started.
    """

    def __init__(self, containers=None, records=None):
        self.containers = dict(containers or {})
        self.records = dict(records or {})
        self.calls = []

    def exists(self, name):
        return name in self.containers

    def is_started(self, name):
        return self.containers.get(name, False)

    def pull_if_absent(self, image, attempts=3, delay=1.0):
        self.calls.append(('pull', image))
        return False

    def run(self, image, args, command):
        name = args[args.index('--name') + 1]
        self.calls.append(('run', image, name))
        self.containers[name] = True
        return f'id-{name}'

    def exec_shell(self, name, script):
        self.calls.append(('exec', name))

    def copy_into(self, name, content, dest_path):
        self.calls.append(('copy', name, content, dest_path))

    def start(self, name):
        self.calls.append(('start', name))
        self.containers[name] = True

    def stop(self, name):
        self.calls.append(('stop', name))
        self.containers[name] = False

    def kill(self, signal, name):
        self.calls.append(('kill', signal, name))
        self.containers[name] = False

    def remove(self, name):
        self.calls.append(('remove', name))
        del self.containers[name]

    def inspect(self, name):
        self.calls.append(('inspect', name))
        return self.records.get(name, ContainerRecord(running=self.containers.get(name, False)))

    def host_port(self, name, container_port, protocol='tcp'):
        self.calls.append(('port', name, container_port))
        return 32768

    def actions(self, kind):
        return [call for call in self.calls if call[0] == kind]


class FakeKeys:
    """Key manager stand-in that never touches the filesystem."""

    def __init__(self, public=b'ssh-rsa AAAA test@fleetbox'):
        self.public = public
        self.ensured = 0

    def ensure_key(self):
        self.ensured += 1
        return False

    def public_key(self):
        return self.public


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def fake_keys():
    return FakeKeys()


# Common test data
@pytest.fixture
def cluster_data():
    """Raw configuration with two templates of two replicas each."""
    return {
        'cluster': {'name': 'cluster', 'privateKey': 'cluster-key'},
        'machines': [
            {
                'count': 2,
                'spec': {
                    'name': 'node%d',
                    'image': 'quay.io/footloose/centos7',
                    'portMappings': [{'containerPort': 22, 'hostPort': 2222}],
                },
            },
            {
                'count': 2,
                'spec': {
                    'name': 'db%d',
                    'image': 'quay.io/footloose/ubuntu18.04',
                    'privileged': True,
                    'volumes': [{'type': 'volume', 'destination': '/var/lib/docker'}],
                    'portMappings': [{'containerPort': 22}],
                },
            },
        ],
    }


@pytest.fixture
def cluster_spec(cluster_data):
    return ClusterSpec.model_validate(cluster_data)


@pytest.fixture
def config_file(tmp_path, cluster_data):
    """Cluster configuration written to a temporary fleetbox.yaml."""
    import yaml

    path = tmp_path / 'fleetbox.yaml'
    path.write_text(yaml.safe_dump(cluster_data))
    return path
