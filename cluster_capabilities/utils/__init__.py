"""Cluster capability helpers.

Grouped by area:
- `clients`: kubeconfig loading + Kubernetes-backed discovery/object readers
- `discovery`: resource types and the resource existence check
- `version`: server version parsing
"""

__all__ = [
	"clients",
	"discovery",
	"version",
]
