"""Persist captured objects as YAML files in the snapshot tree."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

ORIGINAL = "original"
MODIFIED = "modified"
VARIANTS: tuple[str, ...] = (ORIGINAL, MODIFIED)

# Directory holding cluster-scoped kinds; "_" can never start a namespace name.
CLUSTER_SCOPE_DIR = "_cluster"


class SnapshotWriteError(OSError):
    """Raised when an object cannot be encoded or written."""


def namespace_path(root: Path, variant: str, namespace: str) -> Path:
    """Path of the Namespace object file: {variant}/{ns}/{ns}.yaml."""
    return Path(root) / variant / namespace / f"{namespace}.yaml"


def object_path(root: Path, variant: str, namespace: str, resource: str, name: str) -> Path:
    """Path of a captured object file: {variant}/{ns}/{resource}/{name}.yaml."""
    return Path(root) / variant / namespace / resource / f"{name}.yaml"


def ensure_dir(path: Path) -> Path:
    """Create ``path`` and its parents if missing."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


class SnapshotWriter:
    """Serializes one object per file, overwriting any previous content."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def dump(self, obj: dict[str, Any]) -> str:
        """Encode an object as a YAML document, keeping key order."""
        try:
            return yaml.safe_dump(
                obj,
                default_flow_style=False,
                sort_keys=False,
                allow_unicode=True,
            )
        except yaml.YAMLError as e:
            raise SnapshotWriteError(f"failed to encode object as YAML: {e}") from e

    def write(self, obj: dict[str, Any], path: Path) -> Path:
        """Write ``obj`` as the full content of ``path``."""
        path = Path(path)
        data = self.dump(obj)
        try:
            with path.open("w", encoding=self.encoding) as fh:
                fh.write(data)
        except OSError as e:
            raise SnapshotWriteError(f"failed to write {path}: {e}") from e
        logger.debug("Wrote %s", path)
        return path
