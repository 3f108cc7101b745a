"""Reconcile engine for MyAppResource children."""

from podinfo_operator.engine.diff import ChildPatch, diff_child, env_differs, values_differ
from podinfo_operator.engine.engine import ReconcileEngine, validate_desired
from podinfo_operator.engine.errors import EngineError, ValidationError
from podinfo_operator.engine.types import Action, ReconcileResult, ResourceChange

__all__ = [
    "Action",
    "ChildPatch",
    "EngineError",
    "ReconcileEngine",
    "ReconcileResult",
    "ResourceChange",
    "ValidationError",
    "diff_child",
    "env_differs",
    "validate_desired",
    "values_differ",
]
