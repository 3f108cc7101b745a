"""Resource models: the desired MyAppResource and the children it implies."""

from podinfo_operator.resources.app import (
    UI,
    CacheServer,
    EnvVar,
    Image,
    MyAppResource,
    MyAppResourceSpec,
    Redis,
    ResourceRequirements,
)
from podinfo_operator.resources.base import NamespacedName, ObjectMeta
from podinfo_operator.resources.child import (
    ChildLabels,
    ChildRole,
    ManagedChild,
    OwnerReference,
    child_name,
)
from podinfo_operator.resources.derive import (
    derive_cache_dependency,
    derive_children,
    derive_workload,
)
from podinfo_operator.resources.env import merge_env, synthesized_env

__all__ = [
    "UI",
    "CacheServer",
    "ChildLabels",
    "ChildRole",
    "EnvVar",
    "Image",
    "ManagedChild",
    "MyAppResource",
    "MyAppResourceSpec",
    "NamespacedName",
    "ObjectMeta",
    "OwnerReference",
    "Redis",
    "ResourceRequirements",
    "child_name",
    "derive_cache_dependency",
    "derive_children",
    "derive_workload",
    "merge_env",
    "synthesized_env",
]
