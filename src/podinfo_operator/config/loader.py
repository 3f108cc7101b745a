"""YAML configuration and manifest loaders."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.constructor import SafeConstructor

from podinfo_operator.config.schema import Config
from podinfo_operator.resources.app import MyAppResource

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised for configuration loading / validation errors."""


# Field name → environment variable.
_PROVIDER_ENV_MAP: dict[str, str] = {
    "kubeconfig": "KUBECONFIG",
    "context": "KUBE_CONTEXT",
    "in_cluster": "KUBE_IN_CLUSTER",
    "namespace": "KUBE_NAMESPACE",
}

_PROVIDER_BOOL_FIELDS: frozenset[str] = frozenset({"in_cluster"})


def _resolve_provider(raw_provider: dict[str, Any], config_dir: Path) -> dict[str, Any]:
    """Resolve provider fields from YAML, env vars, and ``.env`` file.

    Priority (highest wins): YAML value > env var > ``.env`` file.
    """
    env_file = config_dir / ".env"
    dotenv_vals = dotenv_values(env_file, encoding="utf-8-sig") if env_file.is_file() else {}

    resolved: dict[str, Any] = {}
    for field, env_key in _PROVIDER_ENV_MAP.items():
        val = raw_provider.get(field)
        if val is None:
            val = os.environ.get(env_key)
        if val is None:
            val = dotenv_vals.get(env_key)
        if val is not None:
            if field in _PROVIDER_BOOL_FIELDS and isinstance(val, str):
                if val.lower() not in SafeConstructor.bool_values:
                    raise ConfigError(f"Invalid boolean for {env_key}: {val!r}")
                val = SafeConstructor.bool_values[val.lower()]
            resolved[field] = val

    return resolved


def _read_yaml(path: Path) -> Any:
    try:
        return YAML(typ="safe").load(path)
    except Exception as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc


def load_config(path: Path | str | None = None) -> Config:
    """Load a YAML configuration file and return a ``Config`` object.

    With ``path=None`` the configuration comes from the environment (and a
    ``.env`` file in the working directory) alone.

    Raises:
        ConfigError: On YAML parse errors or validation failures.
    """
    if path is None:
        raw: Any = {}
        config_dir = Path()
    else:
        path = Path(path)
        raw = _read_yaml(path) or {}
        config_dir = path.parent

    if not isinstance(raw, dict):
        raise ConfigError(f"Expected a mapping at the top of {path}")

    try:
        raw["provider"] = _resolve_provider(raw.get("provider") or {}, config_dir)
        config = Config.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc

    logger.info("Loaded config from %s", path if path is not None else "environment")
    return config


def load_manifest(path: Path | str) -> MyAppResource:
    """Load a MyAppResource manifest (as applied with kubectl) from YAML."""
    path = Path(path)
    raw = _read_yaml(path)
    if not isinstance(raw, dict):
        raise ConfigError(f"Expected a mapping at the top of {path}")

    kind = raw.get("kind", MyAppResource.kind)
    if kind != MyAppResource.kind:
        raise ConfigError(f"{path}: expected kind {MyAppResource.kind}, got {kind}")

    try:
        return MyAppResource.from_object(raw)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
