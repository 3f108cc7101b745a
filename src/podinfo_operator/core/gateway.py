"""Control-plane gateway: the only component that performs external I/O."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

import pydantic
from kubernetes.client import ApiException
from urllib3.exceptions import HTTPError

from podinfo_operator.core.deadline import Deadline
from podinfo_operator.core.errors import (
    CanceledError,
    InvalidRequestError,
    OwnershipError,
    UnavailableError,
    UnknownKindError,
    from_api_exception,
)
from podinfo_operator.resources.app import MyAppResource
from podinfo_operator.resources.child import ChildRole, ManagedChild, OwnerReference

if TYPE_CHECKING:
    from collections.abc import Callable

    from podinfo_operator.core.provider import KubeProvider
    from podinfo_operator.core.scheme import Scheme
    from podinfo_operator.engine.diff import ChildPatch
    from podinfo_operator.resources.base import NamespacedName
    from podinfo_operator.resources.child import ChildLabels

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class PodRef:
    name: str
    phase: str | None = None


class ControlPlaneGateway:
    """get/list/create/update/delete against the cluster API.

    Every call checks the invocation :class:`Deadline` first and bounds its
    HTTP timeout by the time left. API failures are mapped to the
    ``core.errors`` taxonomy; nothing is swallowed here.
    """

    def __init__(
        self,
        *,
        provider: KubeProvider,
        scheme: Scheme,
        request_timeout: float = 10.0,
    ) -> None:
        self._provider = provider
        self._scheme = scheme
        self._request_timeout = request_timeout

    def _call(
        self,
        fn: Callable[..., T],
        *args: Any,
        action: str,
        target: str,
        deadline: Deadline | None,
        **kwargs: Any,
    ) -> T:
        deadline = deadline or Deadline.never()
        deadline.check(f"{action} {target}")
        timeout = deadline.request_timeout(self._request_timeout)
        logger.debug("%s %s (timeout=%.1fs)", action, target, timeout)
        try:
            return fn(*args, _request_timeout=timeout, **kwargs)
        except ApiException as exc:
            raise from_api_exception(exc, action=action, target=target) from exc
        except HTTPError as exc:
            if deadline.expired:
                raise CanceledError(f"Deadline exceeded during {action} {target}") from exc
            raise UnavailableError(f"Failed to {action} {target}: {exc}") from exc

    def _to_dict(self, obj: Any) -> dict[str, Any]:
        if isinstance(obj, dict):
            return obj
        return self._provider.client.sanitize_for_serialization(obj)

    def _to_child(self, obj: Any, role: ChildRole) -> ManagedChild:
        try:
            return ManagedChild.from_manifest(self._to_dict(obj), role=role)
        except (KeyError, pydantic.ValidationError) as exc:
            raise InvalidRequestError(f"Undecodable Deployment: {exc}") from exc

    # -- desired state -------------------------------------------------

    def fetch_desired(
        self, identity: NamespacedName, *, deadline: Deadline | None = None
    ) -> MyAppResource:
        """Read the MyAppResource. Raises ``NotFoundError`` when it was deleted."""
        gvk = self._scheme.get(MyAppResource)
        obj = self._call(
            self._provider.custom.get_namespaced_custom_object,
            gvk.group,
            gvk.version,
            identity.namespace,
            gvk.plural,
            identity.name,
            action="get",
            target=f"{gvk.kind} {identity}",
            deadline=deadline,
        )
        try:
            return MyAppResource.from_object(obj)
        except pydantic.ValidationError as exc:
            raise InvalidRequestError(f"Invalid {gvk.kind} {identity}: {exc}") from exc

    # -- managed children ----------------------------------------------

    def fetch_child(
        self,
        identity: NamespacedName,
        role: ChildRole,
        *,
        deadline: Deadline | None = None,
    ) -> ManagedChild:
        obj = self._call(
            self._provider.apps.read_namespaced_deployment,
            identity.name,
            identity.namespace,
            action="get",
            target=f"Deployment {identity}",
            deadline=deadline,
        )
        return self._to_child(obj, role)

    def create_child(
        self, child: ManagedChild, *, deadline: Deadline | None = None
    ) -> ManagedChild:
        obj = self._call(
            self._provider.apps.create_namespaced_deployment,
            child.namespace,
            child.to_manifest(),
            action="create",
            target=f"Deployment {child.identity}",
            deadline=deadline,
        )
        return self._to_child(obj, child.role)

    def update_child(self, patch: ChildPatch, *, deadline: Deadline | None = None) -> ManagedChild:
        """Patch replicas and/or env in place, guarded by the observed resourceVersion."""
        obj = self._call(
            self._provider.apps.patch_namespaced_deployment,
            patch.name,
            patch.namespace,
            patch.to_body(),
            _content_type="application/strategic-merge-patch+json",
            action="update",
            target=f"Deployment {patch.namespace}/{patch.name}",
            deadline=deadline,
        )
        return self._to_child(obj, patch.role)

    def delete_child(self, identity: NamespacedName, *, deadline: Deadline | None = None) -> None:
        self._call(
            self._provider.apps.delete_namespaced_deployment,
            identity.name,
            identity.namespace,
            propagation_policy="Background",
            action="delete",
            target=f"Deployment {identity}",
            deadline=deadline,
        )

    def list_pods(
        self,
        namespace: str,
        labels: ChildLabels,
        *,
        deadline: Deadline | None = None,
    ) -> list[PodRef]:
        selector = labels.selector()
        pod_list = self._call(
            self._provider.core.list_namespaced_pod,
            namespace,
            label_selector=selector,
            action="list",
            target=f"pods in {namespace} matching {selector}",
            deadline=deadline,
        )
        return [
            PodRef(
                name=pod.metadata.name,
                phase=pod.status.phase if pod.status is not None else None,
            )
            for pod in pod_list.items or []
        ]

    # -- ownership -----------------------------------------------------

    def link_ownership(self, parent: MyAppResource, child: ManagedChild) -> ManagedChild:
        """Return *child* carrying a controller reference to *parent*.

        The reference lets the cluster's garbage collector cascade deletion.
        Raises ``OwnershipError`` when the link cannot be made.
        """
        if not parent.metadata.uid:
            raise OwnershipError(f"{parent.kind} {parent.identity} has no uid")
        if parent.namespace != child.namespace:
            raise OwnershipError(
                f"Cross-namespace owner {parent.identity} for {child.identity} is not allowed"
            )
        if (
            child.owner is not None
            and child.owner.controller
            and child.owner.uid != parent.metadata.uid
        ):
            raise OwnershipError(
                f"{child.identity} is already controlled by {child.owner.kind} {child.owner.name}"
            )
        try:
            gvk = self._scheme.get(parent)
        except UnknownKindError as exc:
            raise OwnershipError(str(exc)) from exc

        owner = OwnerReference(
            api_version=gvk.api_version,
            kind=gvk.kind,
            name=parent.name,
            uid=parent.metadata.uid,
        )
        return child.model_copy(update={"owner": owner})
