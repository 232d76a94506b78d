"""Detect optional Kubernetes cluster capabilities once and cache them."""

from cluster_capabilities.errors import (
    CapabilityError,
    ClusterAPIError,
    DiscoveryFailure,
    GroupVersionNotFound,
    MalformedVersion,
    ObjectNotFound,
    ObjectReadFailure,
)
from cluster_capabilities.mesh import (
    LEGACY_POD_INJECTION_LABEL,
    ClusterObject,
    MeshInjection,
    MeshLabels,
    namespace_has_injection,
    pod_ignored_by_mesh,
)
from cluster_capabilities.registry import ClusterCapabilities
from cluster_capabilities.utils.discovery import (
    APIResource,
    ResourceRef,
    ServerVersion,
    pod_monitor_exists,
    resource_exists,
)
from cluster_capabilities.utils.version import parse_minor_version

__all__ = [
    "APIResource",
    "CapabilityError",
    "ClusterAPIError",
    "ClusterCapabilities",
    "ClusterObject",
    "MeshInjection",
    "DiscoveryFailure",
    "GroupVersionNotFound",
    "LEGACY_POD_INJECTION_LABEL",
    "MalformedVersion",
    "MeshLabels",
    "ObjectNotFound",
    "ObjectReadFailure",
    "ResourceRef",
    "ServerVersion",
    "namespace_has_injection",
    "parse_minor_version",
    "pod_ignored_by_mesh",
    "pod_monitor_exists",
    "resource_exists",
]
