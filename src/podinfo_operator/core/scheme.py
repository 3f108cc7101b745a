"""Type scheme: maps models to their group/version/kind."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from podinfo_operator.core.errors import UnknownKindError


@dataclass(frozen=True)
class GroupVersionKind:
    api_version: str
    kind: str
    plural: str

    @property
    def group(self) -> str:
        group, sep, _ = self.api_version.rpartition("/")
        return group if sep else ""

    @property
    def version(self) -> str:
        return self.api_version.rpartition("/")[2]


class Scheme:
    """Registry mapping model classes -> GroupVersionKind.

    Built once at process start and passed by reference to the gateway.
    """

    def __init__(self) -> None:
        self._kinds: dict[type[Any], GroupVersionKind] = {}

    def register(self, model: type[Any]) -> None:
        api_version = getattr(model, "api_version", None)
        kind = getattr(model, "kind", None)
        plural = getattr(model, "plural", None)
        for attr, value in (("api_version", api_version), ("kind", kind), ("plural", plural)):
            if not isinstance(value, str) or not value:
                raise ValueError(f"Model must define a non-empty classvar `{attr}`")

        if model in self._kinds:
            raise ValueError(f"Model already registered: {model.__name__}")

        self._kinds[model] = GroupVersionKind(api_version=api_version, kind=kind, plural=plural)

    def get(self, model_or_obj: Any) -> GroupVersionKind:
        model = model_or_obj if isinstance(model_or_obj, type) else type(model_or_obj)
        try:
            return self._kinds[model]
        except KeyError as e:
            raise UnknownKindError(model.__name__) from e
