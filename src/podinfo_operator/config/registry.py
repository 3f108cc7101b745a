"""Default scheme factory."""

from __future__ import annotations

from podinfo_operator.core.scheme import Scheme
from podinfo_operator.resources.app import MyAppResource
from podinfo_operator.resources.child import ManagedChild


def default_scheme() -> Scheme:
    """Create a fresh scheme with the built-in kinds registered."""
    scheme = Scheme()
    scheme.register(MyAppResource)
    scheme.register(ManagedChild)
    return scheme
