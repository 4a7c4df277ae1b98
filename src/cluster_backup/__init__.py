"""Snapshot Kubernetes cluster objects to YAML, zip them and upload the archive."""

__version__ = "0.1.0"
