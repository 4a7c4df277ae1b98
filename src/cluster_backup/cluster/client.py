"""Read-only access to arbitrary resource kinds through the dynamic client."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

from kubernetes import client, config, dynamic
from kubernetes.client.rest import ApiException
from kubernetes.dynamic.exceptions import ResourceNotFoundError
from urllib3.exceptions import HTTPError

if TYPE_CHECKING:
    from cluster_backup.snapshot.catalog import ResourceDescriptor

logger = logging.getLogger(__name__)


class ClusterAPIError(Exception):
    """A list/get call against the API server failed."""

    def __init__(self, message: str, reason: str | None = None, status: int | None = None) -> None:
        super().__init__(message)
        self.reason = reason
        self.status = status


class ClusterClient(Protocol):
    """What the walker needs from the cluster."""

    def list_namespaces(self) -> list[str]: ...

    def list_objects(
        self, descriptor: ResourceDescriptor, namespace: str | None = None
    ) -> list[dict[str, Any]]: ...

    def get_object(
        self, descriptor: ResourceDescriptor, name: str, namespace: str | None = None
    ) -> dict[str, Any]: ...


def _load_kube_config(kubeconfig_path: str | None, context: str | None) -> client.Configuration:
    """Load in-cluster or kubeconfig-based configuration."""
    try:
        config.load_incluster_config()
        return client.Configuration.get_default_copy()
    except config.ConfigException:
        pass
    kwargs: dict[str, Any] = {}
    if kubeconfig_path:
        kwargs["config_file"] = str(kubeconfig_path)
    if context:
        kwargs["context"] = context
    config.load_kube_config(**kwargs)
    return client.Configuration.get_default_copy()


def _api_error(action: str, e: Exception) -> ClusterAPIError:
    if isinstance(e, ApiException):
        return ClusterAPIError(f"{action}: {e.reason}", reason=e.reason, status=e.status)
    return ClusterAPIError(f"{action}: {e}", reason=str(e))


def _items_from_list(payload: dict[str, Any]) -> list[dict[str, Any]]:
    """Return list items with apiVersion/kind filled in from the list itself.

    The API server omits both on items of a list response, and a manifest
    without them cannot be re-applied.
    """
    api_version = payload.get("apiVersion")
    list_kind = payload.get("kind") or ""
    kind = list_kind[: -len("List")] if list_kind.endswith("List") else list_kind
    items: list[dict[str, Any]] = []
    for item in payload.get("items") or []:
        head: dict[str, Any] = {}
        if "apiVersion" not in item and api_version:
            head["apiVersion"] = api_version
        if "kind" not in item and kind:
            head["kind"] = kind
        items.append({**head, **item})
    return items


class KubeClusterClient:
    """ClusterClient backed by ``kubernetes.dynamic.DynamicClient``."""

    def __init__(
        self,
        kubeconfig: str | None = None,
        context: str | None = None,
        dynamic_client: Any | None = None,
        core_api: Any | None = None,
    ) -> None:
        if dynamic_client is None or core_api is None:
            cfg = _load_kube_config(kubeconfig, context)
            api_client = client.ApiClient(cfg)
            dynamic_client = dynamic_client or dynamic.DynamicClient(api_client)
            core_api = core_api or client.CoreV1Api(api_client)
        self._dynamic = dynamic_client
        self._core = core_api

    def _resource(self, descriptor: ResourceDescriptor) -> Any:
        try:
            return self._dynamic.resources.get(
                api_version=descriptor.api_version,
                name=descriptor.resource,
            )
        except ResourceNotFoundError as e:
            raise _api_error(f"resource {descriptor} not served", e) from e
        except (ApiException, HTTPError) as e:
            raise _api_error(f"discover {descriptor}", e) from e

    def list_namespaces(self) -> list[str]:
        """Names of all namespaces in the cluster, in API order."""
        try:
            ns_list = self._core.list_namespace()
        except (ApiException, HTTPError) as e:
            raise _api_error("list namespaces", e) from e
        return [ns.metadata.name for ns in ns_list.items]

    def list_objects(
        self, descriptor: ResourceDescriptor, namespace: str | None = None
    ) -> list[dict[str, Any]]:
        """List objects of a kind; ``namespace`` is ignored for cluster-scoped kinds."""
        logger.debug("Listing %s in %s", descriptor, namespace or "cluster scope")
        resource = self._resource(descriptor)
        kwargs: dict[str, Any] = {}
        if descriptor.namespaced and namespace:
            kwargs["namespace"] = namespace
        try:
            result = resource.get(**kwargs)
        except (ApiException, HTTPError) as e:
            raise _api_error(f"list {descriptor.resource}", e) from e
        return _items_from_list(result.to_dict())

    def get_object(
        self, descriptor: ResourceDescriptor, name: str, namespace: str | None = None
    ) -> dict[str, Any]:
        """Fetch a single object by name."""
        resource = self._resource(descriptor)
        kwargs: dict[str, Any] = {"name": name}
        if descriptor.namespaced and namespace:
            kwargs["namespace"] = namespace
        try:
            result = resource.get(**kwargs)
        except (ApiException, HTTPError) as e:
            raise _api_error(f"get {descriptor.resource}/{name}", e) from e
        return result.to_dict()
