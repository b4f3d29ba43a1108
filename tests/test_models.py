from oas_builder.catalog.base import (
    ActionDescriptor,
    HostSnapshot,
    InputDescriptor,
    RouteBinding,
)
from oas_builder.config import ServerConfig


class TestInputDescriptor:
    def test_defaults(self):
        d = InputDescriptor()
        assert d.type is None
        assert d.location is None
        assert d.nested is None

    def test_openapi_keys_map_to_fields(self):
        d = InputDescriptor(**{"in": "header", "allowEmptyValue": True, "schema": {"x": {"type": "number"}}})
        assert d.location == "header"
        assert d.allow_empty_value is True
        assert d.nested["x"]["type"] == "number"

    def test_declaration_keeps_extra_keys_and_drops_unset(self):
        d = InputDescriptor(**{"type": "number", "minimum": 1, "in": "query"})
        assert d.declaration() == {"type": "number", "minimum": 1, "in": "query"}

    def test_declaration_nests_schema(self):
        d = InputDescriptor(**{"schema": {"x": {"required": True}}})
        assert d.declaration() == {"schema": {"x": {"required": True}}}


class TestActionDescriptor:
    def test_operation_id(self):
        action = ActionDescriptor(name="createWidget", version=2)
        assert action.operation_id == "createWidget_2"

    def test_string_version(self):
        action = ActionDescriptor(name="a", version="1.1")
        assert action.operation_id == "a_1.1"

    def test_inputs_are_typed(self):
        action = ActionDescriptor(name="a", inputs={"id": {"required": True}})
        assert isinstance(action.inputs["id"], InputDescriptor)
        assert action.inputs["id"].required is True

    def test_default_location_alias(self):
        action = ActionDescriptor(**{"name": "a", "in": "query"})
        assert action.location == "query"


class TestHostSnapshot:
    def test_iter_actions_in_registry_order(self):
        snapshot = HostSnapshot(
            actions={
                "a": {"1": ActionDescriptor(name="a", version=1), "2": ActionDescriptor(name="a", version=2)},
                "b": {"1": ActionDescriptor(name="b", version=1)},
            }
        )
        assert [x.operation_id for x in snapshot.iter_actions()] == ["a_1", "a_2", "b_1"]

    def test_defaults(self):
        snapshot = HostSnapshot()
        assert snapshot.verbs == ["head", "get", "post", "patch", "put", "delete"]
        assert snapshot.config == ServerConfig()

    def test_route_binding_defaults(self):
        binding = RouteBinding(path="/a", action="a")
        assert binding.ignored is False
        assert binding.api_version is None
