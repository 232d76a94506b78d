from typing import Dict, List, Optional

import pytest

from cluster_capabilities.errors import GroupVersionNotFound, ObjectNotFound
from cluster_capabilities.mesh import ClusterObject
from cluster_capabilities.utils.discovery import APIResource, ServerVersion


class FakeDiscovery:
    """In-memory discovery API; counts the calls it serves."""

    def __init__(self, resources: Optional[Dict[str, List[str]]] = None, minor: str = "24", error: Optional[Exception] = None):
        self.resources = resources or {}
        self.minor = minor
        self.error = error
        self.calls: List[str] = []

    def resources_for(self, group_version: str) -> List[APIResource]:
        self.calls.append(group_version)
        if self.error is not None:
            raise self.error
        if group_version not in self.resources:
            raise GroupVersionNotFound(group_version)
        return [APIResource(name=n) for n in self.resources[group_version]]

    def server_version(self) -> ServerVersion:
        self.calls.append("version")
        if self.error is not None:
            raise self.error
        return ServerVersion(major="1", minor=self.minor)


class FakeReader:
    def __init__(self, namespaces: Optional[Dict[str, Dict[str, str]]] = None, pods: Optional[Dict[tuple, Dict[str, str]]] = None):
        self.namespaces = namespaces or {}
        self.pods = pods or {}

    def get_namespace(self, name: str) -> ClusterObject:
        if name not in self.namespaces:
            raise ObjectNotFound("Namespace", name)
        return ClusterObject(name=name, labels=self.namespaces[name])

    def get_pod(self, namespace: str, name: str) -> ClusterObject:
        if (namespace, name) not in self.pods:
            raise ObjectNotFound("Pod", name, namespace)
        return ClusterObject(name=name, namespace=namespace, labels=self.pods[(namespace, name)])


@pytest.fixture
def discovery():
    return FakeDiscovery()


@pytest.fixture
def reader():
    return FakeReader()
