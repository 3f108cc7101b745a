"""Core infrastructure components: cluster connection and gateway."""

from podinfo_operator.core.deadline import Deadline
from podinfo_operator.core.errors import (
    CanceledError,
    ConflictError,
    GatewayError,
    InvalidRequestError,
    NotFoundError,
    OwnershipError,
    UnavailableError,
    UnknownKindError,
)
from podinfo_operator.core.gateway import ControlPlaneGateway, PodRef
from podinfo_operator.core.provider import KubeProvider
from podinfo_operator.core.scheme import GroupVersionKind, Scheme

__all__ = [
    "CanceledError",
    "ConflictError",
    "ControlPlaneGateway",
    "Deadline",
    "GatewayError",
    "GroupVersionKind",
    "InvalidRequestError",
    "KubeProvider",
    "NotFoundError",
    "OwnershipError",
    "PodRef",
    "Scheme",
    "UnavailableError",
    "UnknownKindError",
]
