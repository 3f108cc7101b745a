"""Environment overlay merging for the primary workload.

The expected container environment is built from the user's ``spec.env``
list followed by the variables the operator synthesizes from the rest of the
spec. Folding that sequence into a mapping gives:

- synthesized variables win over same-named user entries (appended last)
- among duplicate user entries, the last one declared wins

The result is a mapping; callers must not rely on ordering when comparing.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from podinfo_operator.resources.app import EnvVar

if TYPE_CHECKING:
    from collections.abc import Iterable

    from podinfo_operator.resources.app import MyAppResourceSpec

UI_COLOR = "PODINFO_UI_COLOR"
UI_MESSAGE = "PODINFO_UI_MESSAGE"
CACHE_SERVER = "PODINFO_CACHE_SERVER"


def synthesized_env(spec: MyAppResourceSpec) -> list[EnvVar]:
    """Variables synthesized from *spec*, in the order they are appended."""
    env = [
        EnvVar(name=UI_COLOR, value=spec.ui.color),
        EnvVar(name=UI_MESSAGE, value=spec.ui.message),
    ]
    if spec.cache_server.enabled:
        env.append(EnvVar(name=CACHE_SERVER, value=spec.cache_server.address))
    return env


def merge_env(overlay: Iterable[EnvVar], synthesized: Iterable[EnvVar]) -> dict[str, str]:
    """Fold ``overlay + synthesized`` into a name -> value mapping (last write wins)."""
    merged: dict[str, str] = {}
    for var in (*overlay, *synthesized):
        merged[var.name] = var.value
    return merged


def expected_env(spec: MyAppResourceSpec) -> dict[str, str]:
    return merge_env(spec.env, synthesized_env(spec))
