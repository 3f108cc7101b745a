"""Shared fixtures for e2e tests against a disposable k3s cluster."""

from __future__ import annotations

import contextlib
import logging
import time
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest
from kubernetes import client as k8s_client
from kubernetes import config as k8s_config
from kubernetes.client import ApiException
from ruamel.yaml import YAML
from testcontainers.k3s import K3SContainer

from podinfo_operator.config.schema import Config, ProviderConfig, ReconcileSettings
from podinfo_operator.resources.app import MyAppResource

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

logger = logging.getLogger(__name__)

_CRD_PATH = Path(__file__).parents[2] / "examples" / "crd.yaml"
NAMESPACE = "default"


def _wait_for(predicate: Callable[[], bool], *, timeout: float, what: str) -> None:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return
        time.sleep(1)
    raise TimeoutError(f"Timed out waiting for {what}")


# ---------------------------------------------------------------------------
# Session-scoped fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def k3s() -> Generator[K3SContainer]:
    """Start a k3s container for the test session, or skip without Docker."""
    container = K3SContainer()
    try:
        container.start()
    except Exception as exc:
        pytest.skip(f"k3s container unavailable: {exc}")
    try:
        yield container
    finally:
        container.stop()


@pytest.fixture(scope="session")
def kubeconfig(k3s: K3SContainer, tmp_path_factory: pytest.TempPathFactory) -> Path:
    path = tmp_path_factory.mktemp("k3s") / "kubeconfig.yaml"
    path.write_text(k3s.config_yaml())
    return path


@pytest.fixture(scope="session")
def api_client(kubeconfig: Path) -> k8s_client.ApiClient:
    return k8s_config.new_client_from_config(config_file=str(kubeconfig))


@pytest.fixture(scope="session")
def crd(api_client: k8s_client.ApiClient) -> dict[str, Any]:
    """Install the MyAppResource CRD and wait until it is established."""
    body = YAML(typ="safe").load(_CRD_PATH)
    ext = k8s_client.ApiextensionsV1Api(api_client)
    try:
        ext.create_custom_resource_definition(body)
    except ApiException as exc:
        if exc.status != 409:
            raise

    def established() -> bool:
        crd_obj = ext.read_custom_resource_definition(body["metadata"]["name"])
        conditions = (crd_obj.status and crd_obj.status.conditions) or []
        return any(c.type == "Established" and c.status == "True" for c in conditions)

    _wait_for(established, timeout=60, what="CRD to be established")
    return body


# ---------------------------------------------------------------------------
# Function-scoped fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def custom_objects(
    api_client: k8s_client.ApiClient, crd: dict[str, Any]
) -> k8s_client.CustomObjectsApi:
    return k8s_client.CustomObjectsApi(api_client)


@pytest.fixture()
def apps(api_client: k8s_client.ApiClient) -> k8s_client.AppsV1Api:
    return k8s_client.AppsV1Api(api_client)


@pytest.fixture()
def create_app(
    custom_objects: k8s_client.CustomObjectsApi,
) -> Generator[Callable[..., dict[str, Any]]]:
    """Create MyAppResource objects and delete them (children cascade) afterwards."""
    group, _, version = MyAppResource.api_version.partition("/")
    created: list[str] = []

    def _create(name: str, spec: dict[str, Any]) -> dict[str, Any]:
        body = {
            "apiVersion": MyAppResource.api_version,
            "kind": MyAppResource.kind,
            "metadata": {"name": name, "namespace": NAMESPACE},
            "spec": spec,
        }
        obj = custom_objects.create_namespaced_custom_object(
            group, version, NAMESPACE, MyAppResource.plural, body
        )
        created.append(name)
        return obj

    yield _create
    for name in reversed(created):
        with contextlib.suppress(Exception):
            custom_objects.delete_namespaced_custom_object(
                group, version, NAMESPACE, MyAppResource.plural, name
            )


@pytest.fixture()
def make_config(kubeconfig: Path) -> Callable[..., Config]:
    def _make(**reconcile: Any) -> Config:
        return Config(
            provider=ProviderConfig(kubeconfig=kubeconfig, namespace=NAMESPACE),
            reconcile=ReconcileSettings(**reconcile),
        )

    return _make
