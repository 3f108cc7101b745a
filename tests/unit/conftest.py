"""Shared fixtures for unit tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest

from podinfo_operator.config import load
from podinfo_operator.resources.app import MyAppResource

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from podinfo_operator.config.schema import Config

_KUBE_ENV_VARS = (
    "KUBECONFIG",
    "KUBE_CONTEXT",
    "KUBE_IN_CLUSTER",
    "KUBE_NAMESPACE",
    "PODINFO_OPERATOR_LOG",
)


@pytest.fixture(autouse=True)
def _clean_kube_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove KUBE_* env vars so unit tests don't leak host config."""
    for var in _KUBE_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., Config]:
    """Factory fixture: write YAML + optional .env, return loaded Config."""

    def _make(yaml_str: str, *, dotenv: str | None = None) -> Config:
        (tmp_path / "config.yaml").write_text(yaml_str)
        if dotenv is not None:
            (tmp_path / ".env").write_text(dotenv)
        return load(tmp_path / "config.yaml")

    return _make


@pytest.fixture
def make_app() -> Callable[..., MyAppResource]:
    """Factory fixture: build a MyAppResource from wire-form spec fields."""

    def _make(
        name: str = "example-app",
        namespace: str = "default",
        *,
        uid: str | None = "uid-1",
        **spec: Any,
    ) -> MyAppResource:
        metadata: dict[str, Any] = {"name": name, "namespace": namespace}
        if uid is not None:
            metadata["uid"] = uid
        return MyAppResource.from_object(
            {
                "apiVersion": MyAppResource.api_version,
                "kind": MyAppResource.kind,
                "metadata": metadata,
                "spec": spec,
            }
        )

    return _make
