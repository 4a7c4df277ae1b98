from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import Mock

import pytest
from kubernetes.client.rest import ApiException
from kubernetes.dynamic.exceptions import ResourceNotFoundError
from urllib3.exceptions import MaxRetryError

from conftest import CLUSTERROLES, DEPLOYMENTS

from cluster_backup.cluster.client import ClusterAPIError, KubeClusterClient, _items_from_list
from cluster_backup.snapshot.catalog import NAMESPACE_DESCRIPTOR


def _client(resource: Mock | None = None) -> tuple[KubeClusterClient, Mock, Mock]:
    dynamic_client = Mock()
    if resource is not None:
        dynamic_client.resources.get.return_value = resource
    core_api = Mock()
    return KubeClusterClient(dynamic_client=dynamic_client, core_api=core_api), dynamic_client, core_api


def _list_payload() -> dict:
    return {
        "apiVersion": "apps/v1",
        "kind": "DeploymentList",
        "metadata": {"resourceVersion": "99"},
        "items": [
            {"metadata": {"name": "web", "namespace": "ns-a"}, "spec": {}},
            {"apiVersion": "apps/v1", "kind": "Deployment", "metadata": {"name": "api"}},
        ],
    }


def test_items_from_list_fills_api_version_and_kind_first() -> None:
    items = _items_from_list(_list_payload())
    assert items[0] == {"apiVersion": "apps/v1", "kind": "Deployment", "metadata": {"name": "web", "namespace": "ns-a"}, "spec": {}}
    assert list(items[0])[:2] == ["apiVersion", "kind"]
    assert items[1]["metadata"] == {"name": "api"}


def test_items_from_list_handles_missing_items() -> None:
    assert _items_from_list({"kind": "PodList", "items": None}) == []


def test_list_objects_in_namespace() -> None:
    resource = Mock()
    resource.get.return_value = Mock(to_dict=Mock(return_value=_list_payload()))
    cluster, dynamic_client, _ = _client(resource)

    items = cluster.list_objects(DEPLOYMENTS, "ns-a")

    dynamic_client.resources.get.assert_called_once_with(api_version="apps/v1", name="deployments")
    resource.get.assert_called_once_with(namespace="ns-a")
    assert [i["metadata"]["name"] for i in items] == ["web", "api"]


def test_list_cluster_scoped_ignores_namespace() -> None:
    resource = Mock()
    resource.get.return_value = Mock(to_dict=Mock(return_value={"kind": "ClusterRoleList", "items": []}))
    cluster, _, _ = _client(resource)

    assert cluster.list_objects(CLUSTERROLES, "ns-a") == []
    resource.get.assert_called_once_with()


def test_get_namespace_object() -> None:
    resource = Mock()
    resource.get.return_value = Mock(to_dict=Mock(return_value={"kind": "Namespace", "metadata": {"name": "ns-a"}}))
    cluster, dynamic_client, _ = _client(resource)

    obj = cluster.get_object(NAMESPACE_DESCRIPTOR, "ns-a")

    dynamic_client.resources.get.assert_called_once_with(api_version="v1", name="namespaces")
    resource.get.assert_called_once_with(name="ns-a")
    assert obj["metadata"]["name"] == "ns-a"


def test_api_exception_becomes_cluster_api_error() -> None:
    resource = Mock()
    resource.get.side_effect = ApiException(status=403, reason="Forbidden")
    cluster, _, _ = _client(resource)

    with pytest.raises(ClusterAPIError) as exc_info:
        cluster.list_objects(DEPLOYMENTS, "ns-a")
    assert exc_info.value.status == 403
    assert exc_info.value.reason == "Forbidden"


def test_unserved_kind_becomes_cluster_api_error() -> None:
    cluster, dynamic_client, _ = _client()
    dynamic_client.resources.get.side_effect = ResourceNotFoundError("No matches found")

    with pytest.raises(ClusterAPIError, match="not served"):
        cluster.list_objects(DEPLOYMENTS, "ns-a")


def test_list_namespaces() -> None:
    cluster, _, core_api = _client()
    core_api.list_namespace.return_value = SimpleNamespace(
        items=[SimpleNamespace(metadata=SimpleNamespace(name=n)) for n in ("default", "kube-system")]
    )
    assert cluster.list_namespaces() == ["default", "kube-system"]


def test_list_namespaces_error() -> None:
    cluster, _, core_api = _client()
    core_api.list_namespace.side_effect = ApiException(status=401, reason="Unauthorized")
    with pytest.raises(ClusterAPIError, match="Unauthorized"):
        cluster.list_namespaces()


def test_transport_error_becomes_cluster_api_error() -> None:
    resource = Mock()
    resource.get.side_effect = MaxRetryError(None, "/apis/apps/v1/namespaces/ns-a/deployments")
    cluster, _, _ = _client(resource)

    with pytest.raises(ClusterAPIError, match="Max retries exceeded"):
        cluster.list_objects(DEPLOYMENTS, "ns-a")
    with pytest.raises(ClusterAPIError):
        cluster.get_object(NAMESPACE_DESCRIPTOR, "ns-a")


def test_list_namespaces_transport_error() -> None:
    cluster, _, core_api = _client()
    core_api.list_namespace.side_effect = MaxRetryError(None, "/api/v1/namespaces")
    with pytest.raises(ClusterAPIError):
        cluster.list_namespaces()
