"""Tests for the config convenience API and engine wiring."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from podinfo_operator.config import build_engine, converge, identity_for, render
from podinfo_operator.config.schema import Config, ProviderConfig, ReconcileSettings
from podinfo_operator.engine.errors import ValidationError
from podinfo_operator.engine.types import ReconcileResult
from podinfo_operator.resources.base import NamespacedName


class TestBuildEngine:
    def test_wires_provider_settings(self) -> None:
        config = Config(
            provider=ProviderConfig(kubeconfig=Path("/tmp/kc"), context="ctx", in_cluster=False),
        )
        engine = build_engine(config)
        provider = engine.gateway._provider

        assert provider.kubeconfig == Path("/tmp/kc")
        assert provider.context == "ctx"
        assert provider.in_cluster is False

    def test_wires_reconcile_settings(self) -> None:
        config = Config(
            reconcile=ReconcileSettings(request_timeout=3, retry_after=4, reconcile_timeout=5)
        )
        engine = build_engine(config)

        assert engine.gateway._request_timeout == 3
        assert engine._retry_after == 4
        assert engine._reconcile_timeout == 5

    def test_does_not_connect(self) -> None:
        with patch("kubernetes.config.new_client_from_config") as mock_new_client:
            build_engine(Config())
        mock_new_client.assert_not_called()


class TestIdentityFor:
    def test_uses_configured_namespace(self) -> None:
        config = Config(provider=ProviderConfig(namespace="apps"))
        assert identity_for(config, "web") == NamespacedName("apps", "web")

    def test_qualified_name(self) -> None:
        assert identity_for(Config(), "prod/web") == NamespacedName("prod", "web")

    def test_explicit_namespace_wins(self) -> None:
        config = Config(provider=ProviderConfig(namespace="apps"))
        assert identity_for(config, "web", "other") == NamespacedName("other", "web")


class TestConverge:
    @patch("podinfo_operator.config.drive")
    @patch("podinfo_operator.config.build_engine")
    def test_passes_backoff_settings(self, mock_build: MagicMock, mock_drive: MagicMock) -> None:
        mock_drive.return_value = ReconcileResult()
        config = Config(reconcile=ReconcileSettings(retry_after=2, max_retry_after=8))
        identity = NamespacedName("default", "web")

        result = converge(config, identity, max_passes=4)

        assert result.done
        mock_drive.assert_called_once_with(
            mock_build.return_value,
            identity,
            max_passes=4,
            retry_after=2,
            max_retry_after=8,
            on_pass=None,
        )


class TestRender:
    def test_renders_all_children(self, make_app) -> None:
        docs = render(make_app(replicaCount=2, redis={"enabled": True}))

        assert [d["metadata"]["name"] for d in docs] == [
            "example-app-podinfo",
            "example-app-redis",
        ]
        assert all(d["kind"] == "Deployment" for d in docs)
        assert all(d["spec"]["replicas"] == 2 for d in docs)

    def test_rejects_value_from_env(self, make_app) -> None:
        app = make_app(env=[{"name": "TOKEN", "valueFrom": {"secretKeyRef": {"name": "s"}}}])

        with pytest.raises(ValidationError, match="TOKEN"):
            render(app)
