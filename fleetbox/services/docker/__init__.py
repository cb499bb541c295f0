"""Docker container backend."""
from .backend import ContainerMount, ContainerRecord, DockerBackend, PublishedPort

__all__ = ['ContainerMount', 'ContainerRecord', 'DockerBackend', 'PublishedPort']
