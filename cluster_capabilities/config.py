from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Dict, Optional

from cluster_capabilities.mesh import (
    NAMESPACE_INJECTION_ENABLED,
    NAMESPACE_INJECTION_LABEL,
    POD_INJECTION_DISABLED,
    POD_INJECTION_LABEL,
    MeshLabels,
)
from cluster_capabilities.registry import SECCOMP_MIN_MINOR

_TRUE = {"1", "true", "yes", "y", "on"}
_FALSE = {"0", "false", "no", "n", "off"}


def _env_str(name: str, default: str) -> str:
    value = os.environ.get(name)
    return default if value is None else value.strip()


def _env_optional_str(name: str) -> Optional[str]:
    value = (os.environ.get(name) or "").strip()
    return value or None


def _env_bool(name: str, default: bool) -> bool:
    raw = (os.environ.get(name) or "").strip().lower()
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


@dataclass(frozen=True)
class CapabilitiesConfig:
    """Runtime configuration for capability detection.

    Env vars:
    - K8S_KUBECONFIG: path to kubeconfig file
    - K8S_CONTEXT: kube context name
    - K8S_IN_CLUSTER: use the pod's service account instead of a kubeconfig

    If none is set, the Kubernetes client falls back to the default
    kubeconfig loading rules.

    Detection tuning:
    - CAPABILITIES_SECCOMP_MIN_MINOR: first minor version with seccomp support
    - CAPABILITIES_MESH_NAMESPACE_LABEL / CAPABILITIES_MESH_NAMESPACE_VALUE:
      namespace label that enables sidecar injection
    - CAPABILITIES_MESH_POD_LABEL / CAPABILITIES_MESH_POD_VALUE: pod label that
      disables it (set the label to "sidecar.istio.io/injec" for pods labelled
      by older operator releases)
    """

    kubeconfig: Optional[str]
    context: Optional[str]
    in_cluster: bool
    seccomp_min_minor: int
    mesh_labels: MeshLabels

    @classmethod
    def from_env(cls) -> "CapabilitiesConfig":
        return cls(
            kubeconfig=_env_optional_str("K8S_KUBECONFIG"),
            context=_env_optional_str("K8S_CONTEXT"),
            in_cluster=_env_bool("K8S_IN_CLUSTER", False),
            seccomp_min_minor=_env_int("CAPABILITIES_SECCOMP_MIN_MINOR", SECCOMP_MIN_MINOR),
            mesh_labels=MeshLabels(
                namespace_key=_env_str("CAPABILITIES_MESH_NAMESPACE_LABEL", NAMESPACE_INJECTION_LABEL),
                namespace_enabled=_env_str("CAPABILITIES_MESH_NAMESPACE_VALUE", NAMESPACE_INJECTION_ENABLED),
                pod_key=_env_str("CAPABILITIES_MESH_POD_LABEL", POD_INJECTION_LABEL),
                pod_disabled=_env_str("CAPABILITIES_MESH_POD_VALUE", POD_INJECTION_DISABLED),
            ),
        )

    def to_env_overrides(self) -> Dict[str, str]:
        env: Dict[str, str] = {}
        if self.kubeconfig:
            env["K8S_KUBECONFIG"] = self.kubeconfig
        if self.context:
            env["K8S_CONTEXT"] = self.context
        env["K8S_IN_CLUSTER"] = "true" if self.in_cluster else "false"
        env["CAPABILITIES_SECCOMP_MIN_MINOR"] = str(self.seccomp_min_minor)
        env["CAPABILITIES_MESH_NAMESPACE_LABEL"] = self.mesh_labels.namespace_key
        env["CAPABILITIES_MESH_NAMESPACE_VALUE"] = self.mesh_labels.namespace_enabled
        env["CAPABILITIES_MESH_POD_LABEL"] = self.mesh_labels.pod_key
        env["CAPABILITIES_MESH_POD_VALUE"] = self.mesh_labels.pod_disabled
        return env
