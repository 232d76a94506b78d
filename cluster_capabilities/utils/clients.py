from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

from kubernetes import client, config
from kubernetes.client import ApiException
from urllib3.exceptions import HTTPError

from cluster_capabilities.errors import (
    DiscoveryFailure,
    GroupVersionNotFound,
    ObjectNotFound,
    ObjectReadFailure,
)
from cluster_capabilities.mesh import ClusterObject
from cluster_capabilities.utils.discovery import APIResource, ServerVersion

CLIENT_ERRORS = (ApiException, HTTPError, OSError)


@dataclass(frozen=True)
class KubernetesClientSet:
    core: client.CoreV1Api
    custom_objects: client.CustomObjectsApi
    version: client.VersionApi


def load_clients(
    *,
    kubeconfig: Optional[str] = None,
    context: Optional[str] = None,
    in_cluster: bool = False,
) -> KubernetesClientSet:
    """Create Kubernetes API clients using kubeconfig/context.

    This is the single place where we load cluster credentials so the
    detectors only ever see the discovery/object-read adapters.
    """

    if in_cluster:
        config.load_incluster_config()
    elif kubeconfig:
        if context:
            config.load_kube_config(config_file=kubeconfig, context=context)
        else:
            config.load_kube_config(config_file=kubeconfig)
    else:
        if context:
            config.load_kube_config(context=context)
        else:
            config.load_kube_config()

    return KubernetesClientSet(
        core=client.CoreV1Api(),
        custom_objects=client.CustomObjectsApi(),
        version=client.VersionApi(),
    )


class KubernetesDiscovery:
    """Discovery contract backed by the official Kubernetes client."""

    def __init__(self, clients: KubernetesClientSet) -> None:
        self._clients = clients

    def resources_for(self, group_version: str) -> List[APIResource]:
        group, _, version = group_version.rpartition("/")
        try:
            if group:
                listing = self._clients.custom_objects.get_api_resources(group=group, version=version)
            elif version == "v1":
                listing = self._clients.core.get_api_resources()
            else:
                raise GroupVersionNotFound(group_version)
        except CLIENT_ERRORS as exc:
            status, reason = _status_reason(exc)
            if status == 404:
                raise GroupVersionNotFound(group_version, reason=reason) from exc
            raise DiscoveryFailure(
                f"discovery of {group_version} failed: {reason}", status=status, reason=reason
            ) from exc

        # The API answers 200 with an empty body on some proxies.
        if listing is None:
            return []
        return [APIResource(name=r.name) for r in (listing.resources or [])]

    def server_version(self) -> ServerVersion:
        try:
            v = self._clients.version.get_code()
        except CLIENT_ERRORS as exc:
            status, reason = _status_reason(exc)
            raise DiscoveryFailure(f"reading server version failed: {reason}", status=status, reason=reason) from exc

        return ServerVersion(
            major=getattr(v, "major", None) or "",
            minor=getattr(v, "minor", None) or "",
            git_version=getattr(v, "git_version", None),
        )


def _to_cluster_object(obj: Any) -> ClusterObject:
    meta = obj.metadata
    return ClusterObject(
        name=meta.name,
        namespace=getattr(meta, "namespace", None),
        labels=dict(meta.labels or {}),
    )


class KubernetesObjectReader:
    """Object-read contract backed by `CoreV1Api`."""

    def __init__(self, clients: KubernetesClientSet) -> None:
        self._clients = clients

    def get_namespace(self, name: str) -> ClusterObject:
        try:
            ns = self._clients.core.read_namespace(name=name)
        except CLIENT_ERRORS as exc:
            raise _read_error(exc, "Namespace", name) from exc
        return _to_cluster_object(ns)

    def get_pod(self, namespace: str, name: str) -> ClusterObject:
        try:
            pod = self._clients.core.read_namespaced_pod(name=name, namespace=namespace)
        except CLIENT_ERRORS as exc:
            raise _read_error(exc, "Pod", name, namespace) from exc
        return _to_cluster_object(pod)


def _status_reason(exc: Exception) -> Tuple[Optional[int], str]:
    # Transport errors (connection refused, TLS, retries exhausted) carry no HTTP status.
    if isinstance(exc, ApiException):
        return exc.status, exc.reason
    return None, str(exc) or type(exc).__name__


def _read_error(exc: Exception, kind: str, name: str, namespace: Optional[str] = None) -> Exception:
    status, reason = _status_reason(exc)
    if status == 404:
        return ObjectNotFound(kind, name, namespace, reason=reason)
    where = f"{namespace}/{name}" if namespace else name
    return ObjectReadFailure(f"reading {kind} {where} failed: {reason}", status=status, reason=reason)
