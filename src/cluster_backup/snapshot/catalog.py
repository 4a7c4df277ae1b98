"""Resource kinds captured in a snapshot."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class ResourceDescriptor:
    """One Kubernetes API resource type (group, version, plural name)."""

    group: str
    version: str
    resource: str
    namespaced: bool = True

    @property
    def api_version(self) -> str:
        """apiVersion string as used by the API server (core group has no prefix)."""
        if not self.group:
            return self.version
        return f"{self.group}/{self.version}"

    def __str__(self) -> str:
        return f"{self.resource}.{self.api_version}"


NAMESPACE_DESCRIPTOR = ResourceDescriptor("", "v1", "namespaces", namespaced=False)

DEFAULT_CATALOG: tuple[ResourceDescriptor, ...] = (
    ResourceDescriptor("apps", "v1", "deployments"),
    ResourceDescriptor("apps", "v1", "daemonsets"),
    ResourceDescriptor("apps", "v1", "statefulsets"),
    ResourceDescriptor("batch", "v1", "jobs"),
    ResourceDescriptor("batch", "v1", "cronjobs"),
    ResourceDescriptor("", "v1", "pods"),
    ResourceDescriptor("", "v1", "services"),
    ResourceDescriptor("", "v1", "configmaps"),
    ResourceDescriptor("", "v1", "secrets"),
    ResourceDescriptor("", "v1", "persistentvolumeclaims"),
    # Istio
    ResourceDescriptor("networking.istio.io", "v1", "virtualservices"),
    ResourceDescriptor("networking.istio.io", "v1", "gateways"),
    ResourceDescriptor("networking.istio.io", "v1", "destinationrules"),
    ResourceDescriptor("networking.istio.io", "v1alpha3", "envoyfilters"),
    ResourceDescriptor("networking.k8s.io", "v1", "ingresses"),
    ResourceDescriptor("", "v1", "serviceaccounts"),
    ResourceDescriptor("rbac.authorization.k8s.io", "v1", "roles"),
    ResourceDescriptor("rbac.authorization.k8s.io", "v1", "rolebindings"),
    ResourceDescriptor("rbac.authorization.k8s.io", "v1", "clusterroles", namespaced=False),
    ResourceDescriptor("rbac.authorization.k8s.io", "v1", "clusterrolebindings", namespaced=False),
    ResourceDescriptor("apiextensions.k8s.io", "v1", "customresourcedefinitions", namespaced=False),
    ResourceDescriptor("", "v1", "persistentvolumes", namespaced=False),
    ResourceDescriptor("apiregistration.k8s.io", "v1", "apiservices", namespaced=False),
    ResourceDescriptor("networking.k8s.io", "v1", "ingressclasses", namespaced=False),
    ResourceDescriptor("storage.k8s.io", "v1", "storageclasses", namespaced=False),
    ResourceDescriptor("networking.k8s.io", "v1", "networkpolicies"),
)


def namespaced_kinds(catalog: Iterable[ResourceDescriptor]) -> list[ResourceDescriptor]:
    """Descriptors listed once per namespace, in catalog order."""
    return [d for d in catalog if d.namespaced]


def cluster_kinds(catalog: Iterable[ResourceDescriptor]) -> list[ResourceDescriptor]:
    """Descriptors listed once per run, in catalog order."""
    return [d for d in catalog if not d.namespaced]
