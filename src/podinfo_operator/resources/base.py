"""Base types shared by desired and managed resource models."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


@dataclass(frozen=True, slots=True)
class NamespacedName:
    """Identity of a namespaced object (e.g. ``default/example-app``)."""

    namespace: str
    name: str

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("name must not be empty")
        if not self.namespace:
            raise ValueError("namespace must not be empty")

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"

    @classmethod
    def parse(cls, value: str, *, default_namespace: str = "default") -> NamespacedName:
        """Parse ``namespace/name`` or a bare ``name``."""
        namespace, sep, name = value.partition("/")
        if not sep:
            return cls(namespace=default_namespace, name=namespace)
        return cls(namespace=namespace, name=name)


class KubeModel(BaseModel):
    """Base for models that mirror control-plane objects.

    Attributes are snake_case; the wire form is camelCase. Unknown wire
    fields are ignored so that server-populated data never fails parsing.
    """

    model_config = ConfigDict(
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ObjectMeta(KubeModel):
    name: str = Field(min_length=1)
    namespace: str = "default"
    uid: str | None = None
    resource_version: str | None = None
    generation: int | None = None
    labels: dict[str, str] = Field(default_factory=dict)

    @property
    def identity(self) -> NamespacedName:
        return NamespacedName(namespace=self.namespace, name=self.name)
