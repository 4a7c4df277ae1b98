from __future__ import annotations

import copy
from typing import Any

import pytest

from cluster_backup.cluster import ClusterAPIError
from cluster_backup.snapshot.catalog import ResourceDescriptor

DEPLOYMENTS = ResourceDescriptor("apps", "v1", "deployments")
CONFIGMAPS = ResourceDescriptor("", "v1", "configmaps")
CLUSTERROLES = ResourceDescriptor("rbac.authorization.k8s.io", "v1", "clusterroles", namespaced=False)


def make_object(kind: str, name: str, namespace: str | None = None, **extra: Any) -> dict[str, Any]:
    metadata: dict[str, Any] = {
        "name": name,
        "resourceVersion": "12345",
        "uid": f"uid-{name}",
        "creationTimestamp": "2025-01-01T00:00:00Z",
        "generation": 3,
        "managedFields": [{"manager": "kubectl", "operation": "Apply"}],
    }
    if namespace:
        metadata["namespace"] = namespace
    obj: dict[str, Any] = {"apiVersion": "v1", "kind": kind, "metadata": metadata}
    obj.update(extra)
    obj.setdefault("status", {"phase": "Active"})
    return obj


class FakeClusterClient:
    """In-memory ClusterClient.

    ``objects`` maps (resource, namespace or None) to a list of objects;
    ``list_errors`` / ``get_errors`` hold resources (or namespace names) that fail.
    """

    def __init__(
        self,
        namespaces: list[str] | None = None,
        objects: dict[tuple[str, str | None], list[dict[str, Any]]] | None = None,
        list_errors: set[str] | None = None,
        get_errors: set[str] | None = None,
    ) -> None:
        self.namespaces = namespaces or []
        self.objects = objects or {}
        self.list_errors = list_errors or set()
        self.get_errors = get_errors or set()
        self.calls: list[tuple[str, ...]] = []

    def list_namespaces(self) -> list[str]:
        self.calls.append(("list_namespaces",))
        return list(self.namespaces)

    def list_objects(self, descriptor: ResourceDescriptor, namespace: str | None = None) -> list[dict[str, Any]]:
        self.calls.append(("list", descriptor.resource, namespace or ""))
        if descriptor.resource in self.list_errors:
            raise ClusterAPIError(f"list {descriptor.resource}: Forbidden", reason="Forbidden", status=403)
        key = (descriptor.resource, namespace if descriptor.namespaced else None)
        return copy.deepcopy(self.objects.get(key, []))

    def get_object(self, descriptor: ResourceDescriptor, name: str, namespace: str | None = None) -> dict[str, Any]:
        self.calls.append(("get", descriptor.resource, name))
        if name in self.get_errors:
            raise ClusterAPIError(f"get {descriptor.resource}/{name}: Not Found", reason="Not Found", status=404)
        return make_object("Namespace", name)


@pytest.fixture
def fake_client() -> FakeClusterClient:
    return FakeClusterClient(
        namespaces=["ns-a", "ns-b"],
        objects={
            ("deployments", "ns-a"): [
                make_object("Deployment", "web", "ns-a", spec={"replicas": 2}),
            ],
        },
    )
