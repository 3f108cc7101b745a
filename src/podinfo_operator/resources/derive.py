"""Pure derivation of managed children from a MyAppResource.

No I/O. Identical input yields equal output, which is what lets the engine
detect "no drift" by comparing against what the control plane reports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from podinfo_operator.resources.child import ChildLabels, ChildRole, ManagedChild, child_name
from podinfo_operator.resources.env import expected_env

if TYPE_CHECKING:
    from podinfo_operator.resources.app import MyAppResource

# Pinned; spec.image is not consulted.
PODINFO_IMAGE = "ghcr.io/stefanprodan/podinfo:latest"
REDIS_IMAGE = "redis:latest"


def labels_for(desired: MyAppResource, role: ChildRole) -> ChildLabels:
    return ChildLabels(role=role, parent_name=desired.name)


def derive_workload(desired: MyAppResource) -> ManagedChild:
    """Expected spec of the primary podinfo Deployment."""
    role = ChildRole.PRIMARY
    return ManagedChild(
        name=child_name(desired.name, role),
        namespace=desired.namespace,
        role=role,
        labels=labels_for(desired, role).as_dict(),
        replicas=desired.spec.replica_count,
        container_name=role.value,
        image=PODINFO_IMAGE,
        env=expected_env(desired.spec),
    )


def derive_cache_dependency(desired: MyAppResource) -> ManagedChild | None:
    """Expected spec of the redis Deployment, or ``None`` when disabled."""
    if not desired.spec.redis.enabled:
        return None
    role = ChildRole.CACHE
    return ManagedChild(
        name=child_name(desired.name, role),
        namespace=desired.namespace,
        role=role,
        labels=labels_for(desired, role).as_dict(),
        # Same replica count as the primary workload.
        replicas=desired.spec.replica_count,
        container_name=role.value,
        image=REDIS_IMAGE,
    )


def derive_children(desired: MyAppResource) -> list[ManagedChild]:
    """All expected children, primary workload first."""
    children = [derive_workload(desired)]
    cache = derive_cache_dependency(desired)
    if cache is not None:
        children.append(cache)
    return children
