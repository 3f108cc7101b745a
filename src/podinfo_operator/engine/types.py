"""Engine types (changes, reconcile results)."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

if TYPE_CHECKING:
    from podinfo_operator.core.gateway import PodRef


class Action(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    NOOP = "no-op"


class ResourceChange(BaseModel):
    address: str
    role: str
    action: Action
    desired: dict[str, Any] | None = None
    prior: dict[str, Any] | None = None
    diff: dict[str, Any] | None = None


def summarize(changes: list[ResourceChange]) -> dict[str, int]:
    counts = {a.value: 0 for a in Action}
    for c in changes:
        counts[c.action.value] += 1
    return counts


@dataclass(frozen=True)
class ReconcileResult:
    """Outcome of one reconcile invocation.

    - ``requeue_after is None and error is None``: converged, nothing to do
    - ``requeue_after`` set: invoke again after that many seconds (0 = now)
    - ``error`` set without ``requeue_after``: fatal, retrying will not help
    """

    requeue_after: float | None = None
    error: Exception | None = None
    changes: list[ResourceChange] = field(default_factory=list)
    pods: list[PodRef] = field(default_factory=list)

    @property
    def done(self) -> bool:
        return self.requeue_after is None and self.error is None

    @property
    def requeue(self) -> bool:
        return self.requeue_after is not None

    @property
    def fatal(self) -> bool:
        return self.error is not None and self.requeue_after is None
