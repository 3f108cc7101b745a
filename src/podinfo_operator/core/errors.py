"""Control-plane gateway error types.

Every failure the gateway surfaces is one of these. ``retryable`` tells the
engine whether a requeue can help.
"""

from __future__ import annotations

import contextlib
import json
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from kubernetes.client import ApiException


class GatewayError(Exception):
    """Base exception for control-plane gateway errors."""

    retryable: ClassVar[bool] = True

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class NotFoundError(GatewayError):
    """The object does not exist. Expected; drives create-vs-update branching."""

    retryable = False


class ConflictError(GatewayError):
    """Concurrent modification (or an object that already exists)."""


class UnavailableError(GatewayError):
    """Transient control-plane or network failure."""


class CanceledError(UnavailableError):
    """The invocation deadline expired or was canceled before the call finished."""


class InvalidRequestError(GatewayError):
    """Malformed request, undecodable object, or missing permission. Not retried."""

    retryable = False


class UnknownKindError(InvalidRequestError):
    """Raised when a model type has no scheme registration."""

    def __init__(self, kind: str) -> None:
        super().__init__(f"Unknown kind: {kind}")
        self.kind = kind


class OwnershipError(GatewayError):
    """Owner linkage could not be established. Callers downgrade it to a warning."""

    retryable = False


_INVALID_STATUSES = frozenset({400, 401, 403, 405, 415, 422})


def _api_message(exc: ApiException) -> str:
    message = exc.reason or ""
    if exc.body:
        with contextlib.suppress(ValueError, TypeError, AttributeError):
            message = json.loads(exc.body).get("message") or message
    return message


def from_api_exception(exc: ApiException, *, action: str, target: str) -> GatewayError:
    """Map an ``ApiException`` to the gateway taxonomy by HTTP status."""
    status = exc.status
    msg = f"Failed to {action} {target}: {_api_message(exc)} (status {status})"
    if status == 404:
        return NotFoundError(msg, status=status)
    if status == 409:
        return ConflictError(msg, status=status)
    if status in _INVALID_STATUSES:
        return InvalidRequestError(msg, status=status)
    return UnavailableError(msg, status=status)
