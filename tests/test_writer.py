import json

import yaml

from oas_builder.config import OasConfig, ServerConfig
from oas_builder.writer import dump_document, write_document

DOC = {"openapi": "3.0.1", "info": {"title": "Ünïcode API", "version": "1"}, "paths": {}}


class TestDumpDocument:
    def test_json_two_space_indent(self):
        text = dump_document(DOC)
        assert text.startswith('{\n  "openapi": "3.0.1"')
        assert "Ünïcode" in text

    def test_yaml_keeps_key_order(self):
        text = dump_document(DOC, "yaml")
        assert text.startswith("openapi: 3.0.1")
        assert yaml.safe_load(text) == DOC


class TestWriteDocument:
    def test_writes_json(self, tmp_path):
        config = ServerConfig(public_paths=[str(tmp_path)], oas=OasConfig(document_path="/docs", document_name="spec"))
        target = write_document(DOC, config)
        assert target == tmp_path / "docs" / "spec.json"
        assert json.loads(target.read_text(encoding="utf-8")) == DOC

    def test_creates_nested_directory(self, tmp_path):
        config = ServerConfig(public_paths=[str(tmp_path)], oas=OasConfig(document_path="/a/b"))
        assert write_document(DOC, config) == tmp_path / "a" / "b" / "openapi.json"

    def test_no_public_path(self, caplog):
        assert write_document(DOC, ServerConfig()) is None
        assert "No public directory" in caplog.text

    def test_empty_document(self, tmp_path, caplog):
        config = ServerConfig(public_paths=[str(tmp_path)])
        assert write_document({}, config) is None
        assert "empty" in caplog.text

    def test_no_document_name(self, tmp_path, caplog):
        config = ServerConfig(public_paths=[str(tmp_path)], oas=OasConfig(document_name=None))
        assert write_document(DOC, config) is None
        assert "No path or name" in caplog.text
        assert list(tmp_path.iterdir()) == []

    def test_filesystem_error_is_logged(self, tmp_path, caplog):
        blocker = tmp_path / "public"
        blocker.write_text("not a directory", encoding="utf-8")
        config = ServerConfig(public_paths=[str(blocker)])
        assert write_document(DOC, config) is None
        assert "Cannot write" in caplog.text
