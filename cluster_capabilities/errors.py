from __future__ import annotations

from typing import Optional


class CapabilityError(Exception):
    """Base class for every error raised by this package."""


class MalformedVersion(CapabilityError, ValueError):
    def __init__(self, value: str) -> None:
        super().__init__(f"invalid Kubernetes minor version: {value!r}")
        self.value = value


class ClusterAPIError(CapabilityError):
    """An error reported by the Kubernetes API server.

    `status` and `reason` mirror the HTTP status/reason of the failed call when
    they are known; the original client exception is kept as `__cause__`.
    """

    def __init__(self, message: str, *, status: Optional[int] = None, reason: Optional[str] = None) -> None:
        super().__init__(message)
        self.status = status
        self.reason = reason


class DiscoveryFailure(ClusterAPIError):
    pass


class GroupVersionNotFound(DiscoveryFailure):
    """The requested API group/version is not served by the cluster."""

    def __init__(self, group_version: str, *, reason: Optional[str] = None) -> None:
        super().__init__(f"API group/version not found: {group_version}", status=404, reason=reason)
        self.group_version = group_version


class ObjectNotFound(ClusterAPIError):
    def __init__(self, kind: str, name: str, namespace: Optional[str] = None, *, reason: Optional[str] = None) -> None:
        where = f"{namespace}/{name}" if namespace else name
        super().__init__(f"{kind} not found: {where}", status=404, reason=reason)
        self.kind = kind
        self.name = name
        self.namespace = namespace


class ObjectReadFailure(ClusterAPIError):
    pass
