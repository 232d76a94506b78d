"""Per-workload Istio sidecar injection checks.

Even with Istio installed in the cluster, a workload only gets a sidecar if
its namespace opts in and the pod itself doesn't opt out. These helpers read
the labels that carry that decision; they never cache and never consult the
cluster-wide capability flags.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol

NAMESPACE_INJECTION_LABEL = "istio-injection"
NAMESPACE_INJECTION_ENABLED = "enabled"
POD_INJECTION_LABEL = "sidecar.istio.io/inject"
POD_INJECTION_DISABLED = "false"

# Key checked by earlier releases of the operator. It is one character short of
# the Istio convention; select it only where deployed pods were labelled with it.
LEGACY_POD_INJECTION_LABEL = "sidecar.istio.io/injec"


@dataclass(frozen=True)
class ClusterObject:
    name: str
    namespace: Optional[str] = None
    labels: Dict[str, str] = field(default_factory=dict)


class ObjectReader(Protocol):
    """Reads single objects; raises `ObjectNotFound` when they are absent."""

    def get_namespace(self, name: str) -> ClusterObject: ...

    def get_pod(self, namespace: str, name: str) -> ClusterObject: ...


@dataclass(frozen=True)
class MeshLabels:
    namespace_key: str = NAMESPACE_INJECTION_LABEL
    namespace_enabled: str = NAMESPACE_INJECTION_ENABLED
    pod_key: str = POD_INJECTION_LABEL
    pod_disabled: str = POD_INJECTION_DISABLED


DEFAULT_MESH_LABELS = MeshLabels()


def _label_equals(obj: ClusterObject, key: str, expected: str) -> bool:
    labels = obj.labels or {}
    return key in labels and labels[key] == expected


def namespace_has_injection(reader: ObjectReader, namespace: str, labels: MeshLabels = DEFAULT_MESH_LABELS) -> bool:
    """True when `namespace` is labelled ``istio-injection=enabled``."""

    ns = reader.get_namespace(namespace)
    return _label_equals(ns, labels.namespace_key, labels.namespace_enabled)


def pod_ignored_by_mesh(
    reader: ObjectReader,
    namespace: str,
    pod_name: str,
    labels: MeshLabels = DEFAULT_MESH_LABELS,
) -> bool:
    """True when the pod opts out of sidecar injection through its labels."""

    pod = reader.get_pod(namespace, pod_name)
    return _label_equals(pod, labels.pod_key, labels.pod_disabled)


@dataclass(frozen=True)
class MeshInjection:
    """An object reader bound to the label convention the deployment uses."""

    reader: ObjectReader
    labels: MeshLabels = DEFAULT_MESH_LABELS

    def namespace_has_injection(self, namespace: str) -> bool:
        return namespace_has_injection(self.reader, namespace, self.labels)

    def pod_ignored_by_mesh(self, namespace: str, pod_name: str) -> bool:
        return pod_ignored_by_mesh(self.reader, namespace, pod_name, self.labels)
