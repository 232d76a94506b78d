from __future__ import annotations

import re
from typing import Any

from cluster_capabilities.errors import MalformedVersion

# Some providers (EKS for one) append a "+" to the minor version when patches
# were back-ported past the upstream end-of-life of the release.
MINOR_VERSION_RE = re.compile(r"([0-9]+)\+?")


def parse_minor_version(minor: str) -> int:
    """Parse a Kubernetes minor version such as ``"24"`` or ``"24+"``."""

    match = MINOR_VERSION_RE.fullmatch(minor or "")
    if match is None:
        raise MalformedVersion(minor)
    return int(match.group(1))


def minor_version(info: Any) -> int:
    """Extract the minor version from a ``ServerVersion``-like object."""

    return parse_minor_version(getattr(info, "minor", None) or "")
