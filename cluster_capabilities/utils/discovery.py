from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol

from cluster_capabilities.errors import GroupVersionNotFound


@dataclass(frozen=True)
class APIResource:
    name: str


@dataclass(frozen=True)
class ServerVersion:
    major: str
    minor: str
    git_version: Optional[str] = None


@dataclass(frozen=True)
class ResourceRef:
    """An API resource type, identified by group/version and plural name."""

    group_version: str
    kind: str

    def __str__(self) -> str:
        return f"{self.kind}.{self.group_version}"


class Discovery(Protocol):
    """What the detectors need from the cluster's discovery API.

    `resources_for` raises `GroupVersionNotFound` when the group/version is not
    served, and `DiscoveryFailure` for anything else.
    """

    def resources_for(self, group_version: str) -> List[APIResource]: ...

    def server_version(self) -> ServerVersion: ...


SECURITY_CONTEXT_CONSTRAINTS = ResourceRef("security.openshift.io/v1", "securitycontextconstraints")
POD_MONITORS = ResourceRef("monitoring.coreos.com/v1", "podmonitors")
ISTIO_SIDECARS = ResourceRef("networking.istio.io/v1beta1", "sidecar")


def resource_exists(discovery: Discovery, group_version: str, kind: str) -> bool:
    """Tell whether `kind` is registered under `group_version`.

    A group/version the cluster doesn't serve is reported as ``False``; every
    other discovery error is left to the caller.
    """

    try:
        resources = discovery.resources_for(group_version)
    except GroupVersionNotFound:
        return False

    return any(r.name == kind for r in resources)


def ref_exists(discovery: Discovery, ref: ResourceRef) -> bool:
    return resource_exists(discovery, ref.group_version, ref.kind)


def pod_monitor_exists(discovery: Discovery, ref: ResourceRef = POD_MONITORS) -> bool:
    """Look up the PodMonitor resource; the answer is not cached."""

    return ref_exists(discovery, ref)
