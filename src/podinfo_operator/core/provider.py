"""Kube provider - connection configuration for a cluster API server."""

from functools import cached_property
from pathlib import Path
from typing import Self

from kubernetes import client as k8s_client
from kubernetes import config as k8s_config
from pydantic import BaseModel, ConfigDict


class KubeProvider(BaseModel):
    """Connection configuration for a cluster.

    Outside a cluster, a kubeconfig file (and optional context) is used;
    inside a pod, set ``in_cluster`` to use the mounted service account.
    Tests and embedding callers can inject a ready client with
    :meth:`from_client`.

    Examples:
        # Local kubeconfig, explicit context
        provider = KubeProvider(kubeconfig=Path("~/.kube/config"), context="kind-dev")

        # Running as a pod
        provider = KubeProvider(in_cluster=True)
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    kubeconfig: Path | None = None
    context: str | None = None
    in_cluster: bool = False

    # Injected client (for embedding / testing)
    _injected_client: k8s_client.ApiClient | None = None

    @classmethod
    def from_client(cls, client: k8s_client.ApiClient) -> Self:
        """Create a provider with an injected client."""
        provider = cls()
        provider._injected_client = client
        return provider

    @cached_property
    def client(self) -> k8s_client.ApiClient:
        """Get the API client."""
        if self._injected_client is not None:
            return self._injected_client

        if self.in_cluster:
            configuration = k8s_client.Configuration()
            k8s_config.load_incluster_config(client_configuration=configuration)
            return k8s_client.ApiClient(configuration)

        config_file = str(self.kubeconfig.expanduser()) if self.kubeconfig is not None else None
        return k8s_config.new_client_from_config(config_file=config_file, context=self.context)

    @cached_property
    def apps(self) -> k8s_client.AppsV1Api:
        return k8s_client.AppsV1Api(self.client)

    @cached_property
    def core(self) -> k8s_client.CoreV1Api:
        return k8s_client.CoreV1Api(self.client)

    @cached_property
    def custom(self) -> k8s_client.CustomObjectsApi:
        return k8s_client.CustomObjectsApi(self.client)
