"""End-to-end builds of the fixture snapshot."""

import json
from pathlib import Path

import yaml

from oas_builder.builder.document import OPENAPI_VERSION, DocumentBuilder
from oas_builder.catalog.loader import load_snapshot, snapshot_from_dict
from oas_builder.validator import validate_document, validate_references

FIXTURES = Path(__file__).parent / "fixtures"


def _build() -> dict:
    return DocumentBuilder(load_snapshot(FIXTURES / "host.yaml")).build()


def _count_refs(node, ref: str) -> int:
    if isinstance(node, dict):
        return (node.get("$ref") == ref) + sum(_count_refs(v, ref) for v in node.values())
    if isinstance(node, list):
        return sum(_count_refs(v, ref) for v in node)
    return 0


class TestDocumentShape:
    def test_section_order(self):
        doc = _build()
        assert list(doc) == ["openapi", "info", "servers", "security", "paths", "tags", "externalDocs", "components"]
        assert doc["openapi"] == OPENAPI_VERSION

    def test_info(self):
        assert _build()["info"] == {
            "title": "Widget Service",
            "description": "Widget inventory API",
            "contact": {"name": "Jane Doe", "email": "jane@example.com", "url": "https://example.com"},
            "license": {"name": "MIT"},
            "version": "2.3.0",
        }

    def test_servers_and_security(self):
        doc = _build()
        assert doc["servers"] == [{"url": "http://api.example.com/api"}]
        assert doc["security"] == [{"ApiKeyAuth": []}, {"BearerAuth": []}]
        assert set(doc["components"]["securitySchemes"]) == {"ApiKeyAuth", "BearerAuth"}

    def test_tags_and_external_docs(self):
        doc = _build()
        assert doc["tags"] == [
            {"name": "1", "description": "Version 1 of the API"},
            {"name": "Core", "description": "Core actions"},
        ]
        assert doc["externalDocs"] == {"description": "Find more info here", "url": "https://docs.example.com"}

    def test_paths(self):
        paths = _build()["paths"]
        assert set(paths) == {"/widgets", "/widgets/{id}", "/widgets/import"}
        assert set(paths["/widgets"]) >= {"get", "post"}
        assert paths["/widgets/{id}"]["get"]["deprecated"] is False
        assert "/internal/health" not in paths

    def test_every_operation_is_secured(self):
        doc = _build()
        for path_item in doc["paths"].values():
            for method in ("get", "post", "put", "delete"):
                if method in path_item:
                    assert path_item[method]["security"] == doc["security"]


class TestDocumentProperties:
    def test_idempotent(self):
        snapshot = load_snapshot(FIXTURES / "host.yaml")
        builder = DocumentBuilder(snapshot)
        first = json.dumps(builder.build(), indent=2)
        second = json.dumps(builder.build(), indent=2)
        third = json.dumps(DocumentBuilder(snapshot).build(), indent=2)
        assert first == second == third

    def test_references_resolve(self):
        assert validate_references(_build()) == {}

    def test_document_is_valid(self):
        assert validate_document(_build()) == {}

    def test_request_body_shared(self):
        doc = _build()
        assert list(doc["components"]["requestBodies"]) == ["createWidget_1"]
        assert _count_refs(doc["paths"], "#/components/requestBodies/createWidget_1") == 2

    def test_path_parameter_resolved(self):
        doc = _build()
        assert doc["components"]["parameters"]["showWidget_1_id"]["in"] == "path"

    def test_output_example(self):
        op = _build()["paths"]["/widgets"]["post"]
        example = op["responses"]["200"]["content"]["application/json"]["examples"]["default"]["value"]
        assert example == {"id": 1, "name": "gizmo"}


class TestDocumentAccessor:
    def test_empty_before_build(self):
        builder = DocumentBuilder(load_snapshot(FIXTURES / "host.yaml"))
        assert builder.document == {}

    def test_accessor_returns_copy(self):
        builder = DocumentBuilder(load_snapshot(FIXTURES / "host.yaml"))
        builder.build()
        builder.document["paths"].clear()
        assert builder.document["paths"]

    def test_minimal_snapshot(self):
        doc = DocumentBuilder(snapshot_from_dict({"server": {"oas": {"base_url": "h:1"}}})).build()
        assert doc["paths"]["/"]["get"]["operationId"] == "genericActionForQueryRouting_1"
        assert "tags" not in doc
        assert "externalDocs" not in doc
        assert validate_document(doc) == {}

    def test_malformed_nested_input_keeps_path(self):
        snapshot = snapshot_from_dict({
            "server": {"web": {"simple_routing": False, "query_routing": False}},
            "actions": {"create": {"1": {"inputs": {"a": {"schema": {"b": 3}}}}}},
            "routes": {"post": [{"path": "/create", "action": "create"}]},
        })
        doc = DocumentBuilder(snapshot).build()
        assert "/create" in doc["paths"]
        body = doc["components"]["requestBodies"]["create_1"]
        assert "schema" not in body["content"]["application/json"]


class TestWrite:
    def test_write_to_public_path(self, tmp_path):
        data = yaml.safe_load((FIXTURES / "host.yaml").read_text(encoding="utf-8"))
        data["server"]["public_paths"] = [str(tmp_path)]
        builder = DocumentBuilder(snapshot_from_dict(data))
        doc = builder.build()

        written = builder.write()
        assert written == tmp_path / "openapi.json"
        assert json.loads(written.read_text(encoding="utf-8")) == doc

    def test_write_before_build_is_skipped(self, tmp_path):
        data = {"server": {"public_paths": [str(tmp_path)]}}
        builder = DocumentBuilder(snapshot_from_dict(data))
        assert builder.write() is None
