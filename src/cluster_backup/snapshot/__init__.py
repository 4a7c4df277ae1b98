"""Snapshot layer: traverse the cluster, sanitize objects and write YAML files."""

from cluster_backup.snapshot.catalog import DEFAULT_CATALOG, NAMESPACE_DESCRIPTOR, ResourceDescriptor
from cluster_backup.snapshot.models import StepResult, WalkReport
from cluster_backup.snapshot.sanitizer import clean, sanitized
from cluster_backup.snapshot.walker import ClusterWalker
from cluster_backup.snapshot.writer import SnapshotWriteError, SnapshotWriter

__all__ = [
    "DEFAULT_CATALOG",
    "NAMESPACE_DESCRIPTOR",
    "ClusterWalker",
    "ResourceDescriptor",
    "SnapshotWriteError",
    "SnapshotWriter",
    "StepResult",
    "WalkReport",
    "clean",
    "sanitized",
]
