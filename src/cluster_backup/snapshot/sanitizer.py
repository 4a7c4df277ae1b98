"""Strip server-managed and volatile fields so a captured object can be re-applied."""

from __future__ import annotations

import copy
from typing import Any

# Dotted paths removed from every object, whatever its kind.
BLOCKED_FIELDS: tuple[str, ...] = (
    "metadata.resourceVersion",
    "metadata.uid",
    "metadata.selfLink",
    "metadata.creationTimestamp",
    "metadata.generation",
    "metadata.managedFields",
    "status",
)

# Bookkeeping written by controllers (Rancher objectset apply).
BLOCKED_ANNOTATIONS: tuple[str, ...] = (
    "objectset.rio.cattle.io/applied",
    "objectset.rio.cattle.io/id",
    "objectset.rio.cattle.io/hash",
    "cattle.io.timestamp",
)

BLOCKED_LABELS: tuple[str, ...] = ("objectset.rio.cattle.io/hash",)

# Only these mappings are dropped when left empty; other empty fields are kept.
PRUNE_IF_EMPTY: tuple[str, ...] = (
    "metadata.annotations",
    "metadata.labels",
)


def _split(path: str) -> list[str]:
    return path.split(".")


def _get_nested(obj: dict[str, Any], keys: list[str]) -> Any:
    node: Any = obj
    for key in keys:
        if not isinstance(node, dict) or key not in node:
            return None
        node = node[key]
    return node


def remove_nested_field(obj: dict[str, Any], path: str) -> None:
    """Delete the field at a dotted path; missing intermediate keys are a no-op."""
    *parents, leaf = _split(path)
    parent = _get_nested(obj, parents) if parents else obj
    if isinstance(parent, dict):
        parent.pop(leaf, None)


def _remove_keys(obj: dict[str, Any], path: str, keys: tuple[str, ...]) -> None:
    mapping = _get_nested(obj, _split(path))
    if not isinstance(mapping, dict):
        return
    for key in keys:
        mapping.pop(key, None)


def clean(obj: dict[str, Any]) -> dict[str, Any]:
    """Apply the removal policy to ``obj`` in place and return it.

    Callers that need the original intact should pass a copy, or use
    :func:`sanitized`.
    """
    for path in BLOCKED_FIELDS:
        remove_nested_field(obj, path)
    _remove_keys(obj, "metadata.annotations", BLOCKED_ANNOTATIONS)
    _remove_keys(obj, "metadata.labels", BLOCKED_LABELS)
    for path in PRUNE_IF_EMPTY:
        value = _get_nested(obj, _split(path))
        if isinstance(value, dict) and not value:
            remove_nested_field(obj, path)
    return obj


def sanitized(obj: dict[str, Any]) -> dict[str, Any]:
    """Return a cleaned deep copy, leaving ``obj`` untouched."""
    return clean(copy.deepcopy(obj))
