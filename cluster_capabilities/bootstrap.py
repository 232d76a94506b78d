"""Startup wiring: build the Kubernetes adapters and run every detector once."""

from __future__ import annotations

import logging
from typing import Optional

from cluster_capabilities.config import CapabilitiesConfig
from cluster_capabilities.errors import CapabilityError
from cluster_capabilities.mesh import MeshInjection
from cluster_capabilities.registry import ClusterCapabilities
from cluster_capabilities.utils.clients import (
    KubernetesClientSet,
    KubernetesDiscovery,
    KubernetesObjectReader,
    load_clients,
)
from cluster_capabilities.utils.discovery import Discovery

logger = logging.getLogger(__name__)


def clients_from_config(cfg: CapabilitiesConfig) -> KubernetesClientSet:
    return load_clients(kubeconfig=cfg.kubeconfig, context=cfg.context, in_cluster=cfg.in_cluster)


def detect_capabilities(
    discovery: Discovery,
    capabilities: Optional[ClusterCapabilities] = None,
) -> ClusterCapabilities:
    """Run the SCC, seccomp and Istio detectors in order.

    The first failure is logged and re-raised; bootstrap is expected to abort.
    """

    caps = capabilities if capabilities is not None else ClusterCapabilities()

    steps = (
        ("security context constraints", caps.detect_security_context_constraints),
        ("seccomp", caps.detect_seccomp_support),
        ("istio", caps.detect_istio_support),
    )
    for label, detect in steps:
        try:
            found = detect(discovery)
        except CapabilityError:
            logger.exception("capability detection failed: %s", label)
            raise
        logger.info("capability detected: %s=%s", label, found)

    return caps


def bootstrap(cfg: Optional[CapabilitiesConfig] = None) -> ClusterCapabilities:
    """Load config from the environment, connect, detect.

    Returns the populated `ClusterCapabilities`; the host owns it from then on
    and hands it to whatever needs feature gates.
    """

    cfg = cfg or CapabilitiesConfig.from_env()
    clients = clients_from_config(cfg)
    logger.debug("kubernetes clients loaded (context=%s, in_cluster=%s)", cfg.context, cfg.in_cluster)
    caps = ClusterCapabilities(seccomp_min_minor=cfg.seccomp_min_minor)
    return detect_capabilities(KubernetesDiscovery(clients), caps)


def object_reader_from_config(cfg: CapabilitiesConfig) -> KubernetesObjectReader:
    return KubernetesObjectReader(clients_from_config(cfg))


def mesh_injection_from_config(cfg: CapabilitiesConfig) -> MeshInjection:
    """Object reader plus the configured injection labels (legacy pod key included)."""

    return MeshInjection(reader=object_reader_from_config(cfg), labels=cfg.mesh_labels)
