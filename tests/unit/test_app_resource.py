from __future__ import annotations

import pytest
from pydantic import ValidationError

from podinfo_operator.resources.app import INT32_MAX, MyAppResource
from podinfo_operator.resources.base import NamespacedName


class TestNamespacedName:
    def test_str(self) -> None:
        assert str(NamespacedName(namespace="prod", name="web")) == "prod/web"

    def test_parse_qualified(self) -> None:
        assert NamespacedName.parse("prod/web") == NamespacedName("prod", "web")

    def test_parse_bare_uses_default_namespace(self) -> None:
        assert NamespacedName.parse("web", default_namespace="dev") == NamespacedName("dev", "web")

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValueError, match="name"):
            NamespacedName(namespace="default", name="")

    def test_empty_namespace_rejected(self) -> None:
        with pytest.raises(ValueError, match="namespace"):
            NamespacedName.parse("/web")

    def test_hashable(self) -> None:
        assert len({NamespacedName("a", "b"), NamespacedName("a", "b")}) == 1


class TestMyAppResource:
    def test_parses_wire_form(self, make_app) -> None:
        app = make_app(
            replicaCount=3,
            resources={"memoryLimit": "64Mi", "cpuRequest": "100m"},
            image={"repository": "ghcr.io/stefanprodan/podinfo", "tag": "6.5.0"},
            ui={"color": "#34577c", "message": "hello"},
            redis={"enabled": True},
            cacheServer={"enabled": True, "host": "cache", "port": 6379},
            env=[{"name": "FOO", "value": "1"}],
        )

        assert app.identity == NamespacedName("default", "example-app")
        assert app.spec.replica_count == 3
        assert app.spec.resources.memory_limit == "64Mi"
        assert app.spec.ui.message == "hello"
        assert app.spec.redis.enabled is True
        assert app.spec.cache_server.address == "tcp://cache:6379"
        assert [(e.name, e.value) for e in app.spec.env] == [("FOO", "1")]

    def test_empty_spec_is_valid(self, make_app) -> None:
        app = make_app()

        assert app.spec.replica_count == 0
        assert app.spec.env == []
        assert app.spec.redis.enabled is False
        assert app.spec.cache_server.enabled is False

    def test_missing_spec_is_valid(self) -> None:
        app = MyAppResource.from_object({"metadata": {"name": "bare"}})

        assert app.namespace == "default"
        assert app.spec.replica_count == 0

    def test_unknown_fields_ignored(self, make_app) -> None:
        app = make_app(replicaCount=1, somethingNew={"x": 1})
        assert app.spec.replica_count == 1

    def test_env_value_defaults_to_empty(self, make_app) -> None:
        app = make_app(env=[{"name": "EMPTY"}])
        assert app.spec.env[0].value == ""

    def test_env_value_from_is_kept(self, make_app) -> None:
        ref = {"configMapKeyRef": {"name": "cm", "key": "k"}}
        app = make_app(env=[{"name": "FROM_CM", "valueFrom": ref}])

        (var,) = app.spec.env
        assert var.value == ""
        assert var.value_from == ref

    def test_env_name_required(self, make_app) -> None:
        with pytest.raises(ValidationError):
            make_app(env=[{"name": "", "value": "x"}])

    def test_duplicate_env_names_accepted(self, make_app) -> None:
        app = make_app(env=[{"name": "A", "value": "1"}, {"name": "A", "value": "2"}])
        assert len(app.spec.env) == 2

    @pytest.mark.parametrize("count", [-1, INT32_MAX + 1])
    def test_replica_count_bounds(self, make_app, count: int) -> None:
        with pytest.raises(ValidationError):
            make_app(replicaCount=count)

    def test_replica_count_upper_bound_inclusive(self, make_app) -> None:
        assert make_app(replicaCount=INT32_MAX).spec.replica_count == INT32_MAX

    def test_to_object_uses_wire_names(self, make_app) -> None:
        obj = make_app(replicaCount=2, cacheServer={"enabled": True}).to_object()

        assert obj["apiVersion"] == "app.example.com/v1alpha1"
        assert obj["kind"] == "MyAppResource"
        assert obj["spec"]["replicaCount"] == 2
        assert obj["spec"]["cacheServer"]["enabled"] is True
        assert obj["metadata"]["name"] == "example-app"
