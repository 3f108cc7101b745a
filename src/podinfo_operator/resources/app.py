"""MyAppResource desired-state model."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import Field

from podinfo_operator.resources.base import KubeModel, NamespacedName, ObjectMeta

INT32_MAX = 2**31 - 1


class ResourceRequirements(KubeModel):
    """Resource limits; opaque quantity strings validated by the control plane."""

    memory_limit: str = ""
    cpu_request: str = ""


class Image(KubeModel):
    repository: str = ""
    tag: str = ""


class UI(KubeModel):
    color: str = ""
    message: str = ""


class Redis(KubeModel):
    enabled: bool = False


class CacheServer(KubeModel):
    enabled: bool = False
    host: str = ""
    port: int = 0

    @property
    def address(self) -> str:
        return f"tcp://{self.host}:{self.port}"


class EnvVar(KubeModel):
    name: str = Field(min_length=1)
    value: str = ""
    value_from: dict[str, Any] | None = None


class MyAppResourceSpec(KubeModel):
    replica_count: int = Field(default=0, ge=0, le=INT32_MAX)
    resources: ResourceRequirements = Field(default_factory=ResourceRequirements)
    image: Image = Field(default_factory=Image)
    ui: UI = Field(default_factory=UI)
    redis: Redis = Field(default_factory=Redis)
    cache_server: CacheServer = Field(default_factory=CacheServer)
    env: list[EnvVar] = Field(default_factory=list)


class MyAppResource(KubeModel):
    """The user-declared intent, as read from the control plane.

    The engine only ever reads this object.
    """

    api_version: ClassVar[str] = "app.example.com/v1alpha1"
    kind: ClassVar[str] = "MyAppResource"
    plural: ClassVar[str] = "myappresources"

    metadata: ObjectMeta
    spec: MyAppResourceSpec = Field(default_factory=MyAppResourceSpec)

    @property
    def identity(self) -> NamespacedName:
        return self.metadata.identity

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def namespace(self) -> str:
        return self.metadata.namespace

    @classmethod
    def from_object(cls, obj: dict[str, Any]) -> MyAppResource:
        """Build from the object returned by the custom objects API."""
        return cls.model_validate(obj)

    def to_object(self) -> dict[str, Any]:
        """Render the wire form, suitable for creating the custom object."""
        return {
            "apiVersion": self.api_version,
            "kind": self.kind,
            **self.model_dump(mode="json", by_alias=True, exclude_none=True),
        }
