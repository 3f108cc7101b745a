"""Drift detection between expected and observed children."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from podinfo_operator.resources.markers import CompareStrategy, collect_compare_strategies

if TYPE_CHECKING:
    from podinfo_operator.resources.child import ChildRole, ManagedChild


def values_differ(
    desired: Any,
    observed: Any,
    *,
    strategy: CompareStrategy | None = None,
) -> bool:
    """Check whether a desired value differs from the observed value.

    Comparison semantics depend on *strategy*:

    - ``strategy="exact"``:
      - Values are compared with strict equality.
      - For dicts, extra or missing keys are treated as differences.
    - ``strategy=None`` or ``"partial"``:
      - For dict values, only keys present in *desired* are compared.
      - Extra keys present only in *observed* are ignored.
      - Non-dict values use strict equality.
    """
    if strategy == "exact":
        return desired != observed

    if isinstance(desired, dict) and isinstance(observed, dict):
        return any(
            k not in observed or values_differ(v, observed[k], strategy="partial")
            for k, v in desired.items()
        )
    return desired != observed


def diff_child(expected: ManagedChild, observed: ManagedChild) -> dict[str, dict[str, Any]]:
    """Field-level drift over the ``Compare``-marked fields only.

    Returns ``{field: {"from": observed, "to": expected}}``; empty when in sync.
    Unmarked fields (image, labels, ...) are immutable after creation and
    never reported.
    """
    strategies = collect_compare_strategies(expected)
    diff: dict[str, dict[str, Any]] = {}
    for name, strategy in strategies.items():
        want = getattr(expected, name)
        have = getattr(observed, name)
        if values_differ(want, have, strategy=strategy):
            diff[name] = {"from": have, "to": want}
    return diff


def env_differs(expected: dict[str, str], observed: dict[str, str]) -> bool:
    """Asymmetric env comparison: variables only present in *observed* are not drift."""
    return values_differ(expected, observed, strategy="partial")


@dataclass(frozen=True)
class ChildPatch:
    """Minimal in-place correction for one observed child."""

    name: str
    namespace: str
    role: ChildRole
    container_name: str
    resource_version: str | None = None
    replicas: int | None = None
    env: dict[str, str] | None = None
    clear_value_from: frozenset[str] = frozenset()

    @classmethod
    def from_diff(
        cls,
        observed: ManagedChild,
        diff: dict[str, dict[str, Any]],
    ) -> ChildPatch:
        env = dict(diff["env"]["to"]) if "env" in diff else None
        return cls(
            name=observed.name,
            namespace=observed.namespace,
            role=observed.role,
            container_name=observed.container_name,
            resource_version=observed.resource_version,
            replicas=diff["replicas"]["to"] if "replicas" in diff else None,
            env=env,
            clear_value_from=observed.sourced_env.intersection(env or ()),
        )

    @property
    def empty(self) -> bool:
        return self.replicas is None and self.env is None

    def to_body(self) -> dict[str, Any]:
        """Strategic-merge patch body.

        Containers and env entries merge by name, so only the fields set
        here are touched and observed-only variables survive. A variable
        switched to ``valueFrom`` out of band gets ``valueFrom: null`` so the
        merged entry carries the literal value alone.
        """
        spec: dict[str, Any] = {}
        if self.replicas is not None:
            spec["replicas"] = self.replicas
        if self.env is not None:
            spec["template"] = {
                "spec": {
                    "containers": [
                        {
                            "name": self.container_name,
                            "env": [self._env_entry(k, v) for k, v in self.env.items()],
                        }
                    ]
                }
            }
        body: dict[str, Any] = {"spec": spec}
        if self.resource_version is not None:
            body["metadata"] = {"resourceVersion": self.resource_version}
        return body

    def _env_entry(self, name: str, value: str) -> dict[str, Any]:
        entry: dict[str, Any] = {"name": name, "value": value}
        if name in self.clear_value_from:
            entry["valueFrom"] = None
        return entry
