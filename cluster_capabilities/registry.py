from __future__ import annotations

from datetime import datetime, timezone
from threading import Lock
from typing import Any, Dict, Optional

from cluster_capabilities.utils.discovery import (
    ISTIO_SIDECARS,
    POD_MONITORS,
    SECURITY_CONTEXT_CONSTRAINTS,
    Discovery,
    ResourceRef,
    ref_exists,
)
from cluster_capabilities.utils.version import minor_version

SECURITY_CONTEXT_CONSTRAINTS_FLAG = "securityContextConstraints"
SECCOMP_FLAG = "seccomp"
ISTIO_FLAG = "istio"

FLAGS = (SECURITY_CONTEXT_CONSTRAINTS_FLAG, SECCOMP_FLAG, ISTIO_FLAG)

# Seccomp profiles on pods went GA in Kubernetes 1.24.
SECCOMP_MIN_MINOR = 24


class ClusterCapabilities:
    """Cached answers to "does this cluster support X?".

    Every flag starts out unknown. The `detect_*` methods query the cluster
    and overwrite the matching flag; the `have_*` accessors are cheap reads
    that report ``False`` for a flag that was never detected. Use `detected`
    or `snapshot` to tell the two apart.

    Reads and writes are serialized by a lock, never held while talking to
    the API server, so a host may re-run detection while other threads read.
    """

    def __init__(
        self,
        *,
        security_context_constraints: ResourceRef = SECURITY_CONTEXT_CONSTRAINTS,
        istio_sidecars: ResourceRef = ISTIO_SIDECARS,
        pod_monitors: ResourceRef = POD_MONITORS,
        seccomp_min_minor: int = SECCOMP_MIN_MINOR,
    ) -> None:
        self.security_context_constraints_ref = security_context_constraints
        self.istio_sidecars_ref = istio_sidecars
        self.pod_monitors_ref = pod_monitors
        self.seccomp_min_minor = seccomp_min_minor

        self._lock = Lock()
        self._flags: Dict[str, Optional[bool]] = {name: None for name in FLAGS}
        self._detected_at: Dict[str, Optional[str]] = {name: None for name in FLAGS}

    def _set(self, name: str, value: bool) -> None:
        with self._lock:
            self._flags[name] = value
            self._detected_at[name] = datetime.now(timezone.utc).isoformat()

    def _reset(self, name: str) -> None:
        # A failed detection reads as False and is reported as unknown.
        with self._lock:
            self._flags[name] = False
            self._detected_at[name] = None

    def _get(self, name: str) -> bool:
        with self._lock:
            return bool(self._flags[name])

    def detect_security_context_constraints(self, discovery: Discovery) -> bool:
        """Find out whether the cluster implements OpenShift SCCs.

        On a discovery error the previous value is kept and the error raised.
        """

        found = ref_exists(discovery, self.security_context_constraints_ref)
        self._set(SECURITY_CONTEXT_CONSTRAINTS_FLAG, found)
        return found

    def detect_seccomp_support(self, discovery: Discovery) -> bool:
        """Decide from the server version whether pods may set a SeccompProfile.

        Readers keep seeing the previous value while the query runs; a failed
        query leaves the flag False.
        """

        try:
            minor = minor_version(discovery.server_version())
        except Exception:
            self._reset(SECCOMP_FLAG)
            raise
        supported = minor >= self.seccomp_min_minor
        self._set(SECCOMP_FLAG, supported)
        return supported

    def detect_istio_support(self, discovery: Discovery) -> bool:
        try:
            found = ref_exists(discovery, self.istio_sidecars_ref)
        except Exception:
            self._reset(ISTIO_FLAG)
            raise
        self._set(ISTIO_FLAG, found)
        return found

    def pod_monitor_exists(self, discovery: Discovery) -> bool:
        # Asked once when a PodMonitor is about to be created, so not cached.
        return ref_exists(discovery, self.pod_monitors_ref)

    def have_security_context_constraints(self) -> bool:
        return self._get(SECURITY_CONTEXT_CONSTRAINTS_FLAG)

    def have_seccomp_support(self) -> bool:
        return self._get(SECCOMP_FLAG)

    def have_istio(self) -> bool:
        """Istio is deployed in the cluster.

        That alone doesn't mean a given workload gets a sidecar; see
        `cluster_capabilities.mesh` for the per-namespace and per-pod checks.
        """

        return self._get(ISTIO_FLAG)

    def detected(self, name: str) -> bool:
        if name not in self._flags:
            raise KeyError(name)
        with self._lock:
            return self._detected_at[name] is not None

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "flags": {
                    name: (self._flags[name] if self._detected_at[name] is not None else None) for name in FLAGS
                },
                "detectedAt": dict(self._detected_at),
            }
