"""YAML configuration loading and convenience reconcile API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from podinfo_operator.config.loader import ConfigError, load_config, load_manifest
from podinfo_operator.config.registry import default_scheme
from podinfo_operator.config.schema import Config, ProviderConfig, ReconcileSettings
from podinfo_operator.core.gateway import ControlPlaneGateway
from podinfo_operator.core.provider import KubeProvider
from podinfo_operator.driver import drive
from podinfo_operator.engine.engine import ReconcileEngine, validate_desired
from podinfo_operator.engine.errors import ValidationError
from podinfo_operator.resources.base import NamespacedName
from podinfo_operator.resources.derive import derive_children

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from podinfo_operator.engine.types import ReconcileResult, ResourceChange
    from podinfo_operator.resources.app import MyAppResource

__all__ = [
    "Config",
    "ConfigError",
    "ProviderConfig",
    "ReconcileSettings",
    "build_engine",
    "converge",
    "identity_for",
    "load",
    "load_config",
    "load_manifest",
    "plan",
    "reconcile",
    "render",
]


def load(path: Path | str | None = None) -> Config:
    """Load a YAML configuration file (or the environment alone when ``None``)."""
    return load_config(path)


def build_engine(config: Config) -> ReconcileEngine:
    """Build a ``ReconcileEngine`` from a ``Config`` instance."""
    provider = KubeProvider(
        kubeconfig=config.provider.kubeconfig,
        context=config.provider.context,
        in_cluster=config.provider.in_cluster,
    )
    gateway = ControlPlaneGateway(
        provider=provider,
        scheme=default_scheme(),
        request_timeout=config.reconcile.request_timeout,
    )
    return ReconcileEngine(
        gateway=gateway,
        retry_after=config.reconcile.retry_after,
        reconcile_timeout=config.reconcile.reconcile_timeout,
    )


def identity_for(config: Config, name: str, namespace: str | None = None) -> NamespacedName:
    """Resolve ``name`` (or ``namespace/name``) against the configured namespace."""
    if namespace is not None:
        return NamespacedName(namespace=namespace, name=name)
    return NamespacedName.parse(name, default_namespace=config.provider.namespace)


def reconcile(config: Config, identity: NamespacedName) -> ReconcileResult:
    """Run a single reconcile pass."""
    return build_engine(config).reconcile(identity)


def plan(config: Config, identity: NamespacedName) -> list[ResourceChange]:
    """Show what a reconcile would change, without changing anything."""
    return build_engine(config).plan(identity)


def converge(
    config: Config,
    identity: NamespacedName,
    *,
    max_passes: int = 10,
    on_pass: Callable[[int, ReconcileResult], None] | None = None,
) -> ReconcileResult:
    """Reconcile repeatedly, honoring requeues, until converged or out of passes."""
    return drive(
        build_engine(config),
        identity,
        max_passes=max_passes,
        retry_after=config.reconcile.retry_after,
        max_retry_after=config.reconcile.max_retry_after,
        on_pass=on_pass,
    )


def render(desired: MyAppResource) -> list[dict[str, Any]]:
    """Expected child manifests for *desired* (offline, no cluster access).

    Raises:
        ValidationError: If *desired* fails the checks a reconcile would apply.
    """
    errors = validate_desired(desired)
    if errors:
        raise ValidationError(errors)
    return [child.to_manifest() for child in derive_children(desired)]
