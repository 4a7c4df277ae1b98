"""Cluster access: read-only adapter over the Kubernetes dynamic client."""

from cluster_backup.cluster.client import ClusterAPIError, ClusterClient, KubeClusterClient

__all__ = [
    "ClusterAPIError",
    "ClusterClient",
    "KubeClusterClient",
]
