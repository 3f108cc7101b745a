"""Configuration models for the operator."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProviderConfig(BaseSettings):
    """Cluster connection settings.

    Fields can be set via YAML (constructor kwargs) or environment variables
    with the ``KUBE_`` prefix.  Constructor kwargs take precedence.
    """

    model_config = SettingsConfigDict(env_prefix="KUBE_")

    kubeconfig: Path | None = None
    context: str | None = None
    in_cluster: bool = False
    namespace: str = Field(default="default", min_length=1)


class ReconcileSettings(BaseModel):
    """Timing knobs for reconcile passes (seconds)."""

    request_timeout: float = Field(default=10.0, gt=0)
    reconcile_timeout: float | None = Field(default=30.0, gt=0)
    retry_after: float = Field(default=1.0, gt=0)
    max_retry_after: float = Field(default=60.0, gt=0)


class Config(BaseModel):
    """Operator configuration, validated directly from the YAML structure."""

    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    reconcile: ReconcileSettings = Field(default_factory=ReconcileSettings)
