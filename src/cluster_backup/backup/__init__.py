"""Backup: run capture -> archive -> upload and report on it."""

from cluster_backup.backup.orchestrator import BackupResult, print_result, resolve_namespaces, run_backup

__all__ = [
    "BackupResult",
    "print_result",
    "resolve_namespaces",
    "run_backup",
]
