"""Reconcile engine for MyAppResource children."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from podinfo_operator.core.deadline import Deadline
from podinfo_operator.core.errors import ConflictError, GatewayError, NotFoundError, OwnershipError
from podinfo_operator.engine.diff import ChildPatch, diff_child
from podinfo_operator.engine.errors import ValidationError
from podinfo_operator.engine.types import Action, ReconcileResult, ResourceChange
from podinfo_operator.resources.base import NamespacedName
from podinfo_operator.resources.child import ChildRole, child_name
from podinfo_operator.resources.derive import derive_children, labels_for

if TYPE_CHECKING:
    from podinfo_operator.core.gateway import ControlPlaneGateway
    from podinfo_operator.resources.app import MyAppResource
    from podinfo_operator.resources.child import ManagedChild

logger = logging.getLogger(__name__)


def validate_desired(desired: MyAppResource) -> list[str]:
    """Checks the schema cannot express. Return list of error messages (empty = valid)."""
    errors: list[str] = []
    cache = desired.spec.cache_server
    if cache.enabled:
        if not cache.host:
            errors.append(f"{desired.identity}: cacheServer.host is required when enabled")
        if not 1 <= cache.port <= 65535:
            errors.append(
                f"{desired.identity}: cacheServer.port must be in 1..65535, got {cache.port}"
            )
    for i, var in enumerate(desired.spec.env):
        if var.value_from is not None:
            errors.append(
                f"{desired.identity}: env[{i}] ({var.name}) uses valueFrom;"
                " only literal values are supported"
            )
    return errors


class ReconcileEngine:
    """Level-triggered convergence of one MyAppResource's children.

    Each :meth:`reconcile` call re-reads everything, performs at most one
    mutation and asks to be requeued right after it, so a follow-up pass
    validates the result against what the control plane actually stored.
    The engine holds no state between calls and never retries in-process.
    """

    def __init__(
        self,
        *,
        gateway: ControlPlaneGateway,
        retry_after: float = 1.0,
        reconcile_timeout: float | None = None,
    ) -> None:
        if retry_after <= 0:
            raise ValueError(f"retry_after must be > 0, got {retry_after}")
        self._gateway = gateway
        self._retry_after = retry_after
        self._reconcile_timeout = reconcile_timeout

    @property
    def gateway(self) -> ControlPlaneGateway:
        return self._gateway

    def _deadline(self, deadline: Deadline | None) -> Deadline:
        return deadline if deadline is not None else Deadline(self._reconcile_timeout)

    def _observe(
        self, identity: NamespacedName, role: ChildRole, deadline: Deadline
    ) -> ManagedChild | None:
        try:
            return self._gateway.fetch_child(identity, role, deadline=deadline)
        except NotFoundError:
            return None

    @staticmethod
    def _classify(expected: ManagedChild, observed: ManagedChild | None) -> ResourceChange:
        """Classify one expected child as CREATE, UPDATE, or NOOP."""
        desired_dump = expected.model_dump(mode="json", exclude={"resource_version"})
        if observed is None:
            logger.debug("Classified %s as create", expected.address)
            return ResourceChange(
                address=expected.address,
                role=expected.role.value,
                action=Action.CREATE,
                desired=desired_dump,
            )

        diff = diff_child(expected, observed)
        action = Action.UPDATE if diff else Action.NOOP
        logger.debug("Classified %s as %s", expected.address, action.value)
        return ResourceChange(
            address=expected.address,
            role=expected.role.value,
            action=action,
            desired=desired_dump,
            prior=observed.model_dump(mode="json"),
            diff=diff or None,
        )

    def _stale_cache(self, desired: MyAppResource, deadline: Deadline) -> ManagedChild | None:
        """The cache Deployment we created earlier, if redis has since been disabled."""
        if desired.spec.redis.enabled:
            return None
        role = ChildRole.CACHE
        identity = NamespacedName(namespace=desired.namespace, name=child_name(desired.name, role))
        observed = self._observe(identity, role, deadline)
        if observed is None:
            return None
        if not labels_for(desired, role).matches(observed.labels):
            logger.debug("Leaving %s alone: not labelled for %s", observed.address, desired.name)
            return None
        return observed

    @staticmethod
    def _delete_change(observed: ManagedChild) -> ResourceChange:
        return ResourceChange(
            address=observed.address,
            role=observed.role.value,
            action=Action.DELETE,
            prior=observed.model_dump(mode="json"),
        )

    def _failed(self, identity: NamespacedName, exc: Exception) -> ReconcileResult:
        retryable = isinstance(exc, GatewayError) and exc.retryable
        if isinstance(exc, ConflictError):
            logger.info("Conflict while reconciling %s, will retry: %s", identity, exc)
        elif retryable:
            logger.warning("Transient error reconciling %s, will retry: %s", identity, exc)
        else:
            logger.error("Failed to reconcile %s: %s", identity, exc)
        return ReconcileResult(requeue_after=self._retry_after if retryable else None, error=exc)

    def _apply(
        self,
        desired: MyAppResource,
        change: ResourceChange,
        *,
        expected: ManagedChild | None,
        observed: ManagedChild | None,
        deadline: Deadline,
    ) -> ReconcileResult:
        """Run the single mutation for *change* and request an immediate requeue."""
        logger.info("Applying %s: %s", change.address, change.action.value)
        try:
            match change.action:
                case Action.CREATE:
                    assert expected is not None
                    try:
                        expected = self._gateway.link_ownership(desired, expected)
                    except OwnershipError as exc:
                        logger.warning("Creating %s without owner: %s", change.address, exc)
                    self._gateway.create_child(expected, deadline=deadline)
                case Action.UPDATE:
                    assert observed is not None and change.diff is not None
                    patch = ChildPatch.from_diff(observed, change.diff)
                    self._gateway.update_child(patch, deadline=deadline)
                case Action.DELETE:
                    assert observed is not None
                    self._gateway.delete_child(observed.identity, deadline=deadline)
                case _:
                    raise ValueError(f"Unknown action: {change.action}")
        except NotFoundError as exc:
            if change.action is Action.CREATE:
                return self._failed(desired.identity, exc)
            # Gone between read and write; the next pass re-observes.
            logger.info("%s disappeared during %s", change.address, change.action.value)
            return ReconcileResult(requeue_after=0.0)
        except GatewayError as exc:
            return self._failed(desired.identity, exc)

        return ReconcileResult(requeue_after=0.0, changes=[change])

    def reconcile(
        self, identity: NamespacedName, *, deadline: Deadline | None = None
    ) -> ReconcileResult:
        """Run one reconcile pass for *identity*."""
        deadline = self._deadline(deadline)
        logger.debug("Reconciling %s", identity)

        try:
            desired = self._gateway.fetch_desired(identity, deadline=deadline)
        except NotFoundError:
            # Children are garbage collected through their owner reference.
            logger.info("%s not found; ignoring since it must have been deleted", identity)
            return ReconcileResult()
        except GatewayError as exc:
            return self._failed(identity, exc)

        errors = validate_desired(desired)
        if errors:
            return self._failed(identity, ValidationError(errors))

        try:
            for expected in derive_children(desired):
                observed = self._observe(expected.identity, expected.role, deadline)
                change = self._classify(expected, observed)
                if change.action is not Action.NOOP:
                    return self._apply(
                        desired, change, expected=expected, observed=observed, deadline=deadline
                    )

            stale = self._stale_cache(desired, deadline)
            if stale is not None:
                return self._apply(
                    desired,
                    self._delete_change(stale),
                    expected=None,
                    observed=stale,
                    deadline=deadline,
                )

            pods = self._gateway.list_pods(
                desired.namespace, labels_for(desired, ChildRole.PRIMARY), deadline=deadline
            )
        except GatewayError as exc:
            return self._failed(identity, exc)

        logger.info("%s is up-to-date (%d pods)", identity, len(pods))
        return ReconcileResult(pods=pods)

    def plan(
        self, identity: NamespacedName, *, deadline: Deadline | None = None
    ) -> list[ResourceChange]:
        """Classify every child :meth:`reconcile` would touch, without mutating.

        Raises ``GatewayError`` or ``ValidationError`` instead of returning a
        result; an absent resource plans nothing.
        """
        deadline = self._deadline(deadline)
        try:
            desired = self._gateway.fetch_desired(identity, deadline=deadline)
        except NotFoundError:
            logger.info("%s not found; nothing to plan", identity)
            return []

        errors = validate_desired(desired)
        if errors:
            raise ValidationError(errors)

        changes = [
            self._classify(
                expected, self._observe(expected.identity, expected.role, deadline)
            )
            for expected in derive_children(desired)
        ]
        stale = self._stale_cache(desired, deadline)
        if stale is not None:
            changes.append(self._delete_change(stale))
        return changes
