"""Managed child resource models (apps/v1 Deployments)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, ClassVar

from pydantic import Field

from podinfo_operator.resources.base import KubeModel, NamespacedName
from podinfo_operator.resources.markers import Compare

logger = logging.getLogger(__name__)


class ChildRole(str, Enum):
    PRIMARY = "podinfo"
    CACHE = "redis"


def child_name(parent_name: str, role: ChildRole) -> str:
    """Deterministic child name: ``<parent-name>-<role>``."""
    return f"{parent_name}-{role.value}"


@dataclass(frozen=True, slots=True)
class ChildLabels:
    """Label set identifying the children of one parent for one role.

    Used both for ownership filtering and as the pod selector.
    """

    role: ChildRole
    parent_name: str

    def as_dict(self) -> dict[str, str]:
        return {"app": self.role.value, f"{self.role.value}_cr": self.parent_name}

    def selector(self) -> str:
        """Exact label-match selector, e.g. ``app=podinfo,podinfo_cr=example-app``."""
        return ",".join(f"{k}={v}" for k, v in sorted(self.as_dict().items()))

    def matches(self, labels: dict[str, str] | None) -> bool:
        labels = labels or {}
        return all(labels.get(k) == v for k, v in self.as_dict().items())


class OwnerReference(KubeModel):
    api_version: str
    kind: str
    name: str
    uid: str
    controller: bool = True
    block_owner_deletion: bool = True


class ManagedChild(KubeModel):
    """A derived Deployment, either expected (from the parent) or observed."""

    api_version: ClassVar[str] = "apps/v1"
    kind: ClassVar[str] = "Deployment"
    plural: ClassVar[str] = "deployments"

    name: str = Field(min_length=1)
    namespace: str
    role: ChildRole
    labels: dict[str, str] = Field(default_factory=dict)
    replicas: Annotated[int, Compare("exact")] = 0
    container_name: str
    image: str = ""
    env: Annotated[dict[str, str], Compare("partial")] = Field(default_factory=dict)
    sourced_env: frozenset[str] = Field(default=frozenset(), exclude=True)
    owner: OwnerReference | None = None
    resource_version: str | None = None

    @property
    def identity(self) -> NamespacedName:
        return NamespacedName(namespace=self.namespace, name=self.name)

    @property
    def address(self) -> str:
        """Display address, e.g. ``deployment/default/example-app-podinfo``."""
        return f"deployment/{self.namespace}/{self.name}"

    def to_manifest(self) -> dict[str, Any]:
        """Render the apps/v1 Deployment body in wire form."""
        container: dict[str, Any] = {"name": self.container_name, "image": self.image}
        if self.env:
            container["env"] = [{"name": k, "value": v} for k, v in self.env.items()]

        metadata: dict[str, Any] = {
            "name": self.name,
            "namespace": self.namespace,
            "labels": dict(self.labels),
        }
        if self.owner is not None:
            metadata["ownerReferences"] = [self.owner.model_dump(by_alias=True)]
        if self.resource_version is not None:
            metadata["resourceVersion"] = self.resource_version

        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            "metadata": metadata,
            "spec": {
                "replicas": self.replicas,
                "selector": {"matchLabels": dict(self.labels)},
                "template": {
                    "metadata": {"labels": dict(self.labels)},
                    "spec": {"containers": [container]},
                },
            },
        }

    @classmethod
    def from_manifest(cls, obj: dict[str, Any], *, role: ChildRole) -> ManagedChild:
        """Parse an observed Deployment (wire form).

        The container named after *role* is used, falling back to the first
        container. Env entries sourced via ``valueFrom`` carry no literal
        value; they are left out of ``env`` and their names kept in
        ``sourced_env``.
        """
        metadata = obj.get("metadata") or {}
        spec = obj.get("spec") or {}
        pod_spec = (spec.get("template") or {}).get("spec") or {}
        containers = pod_spec.get("containers") or []
        container = next(
            (c for c in containers if c.get("name") == role.value),
            containers[0] if containers else {},
        )

        env: dict[str, str] = {}
        sourced: set[str] = set()
        for entry in container.get("env") or []:
            if "valueFrom" in entry and "value" not in entry:
                logger.debug("Skipping valueFrom env %s", entry.get("name"))
                sourced.add(entry["name"])
                continue
            env[entry["name"]] = entry.get("value") or ""

        owners = metadata.get("ownerReferences") or []
        owner = next((o for o in owners if o.get("controller")), None)

        return cls(
            name=metadata["name"],
            namespace=metadata.get("namespace", "default"),
            role=role,
            labels=metadata.get("labels") or {},
            replicas=1 if spec.get("replicas") is None else spec["replicas"],
            container_name=container.get("name", role.value),
            image=container.get("image", ""),
            env=env,
            sourced_env=frozenset(sourced),
            owner=OwnerReference.model_validate(owner) if owner is not None else None,
            resource_version=metadata.get("resourceVersion"),
        )
