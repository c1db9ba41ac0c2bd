from pathlib import Path

import pytest

from api_model_tool.errors import MalformedSpecError
from api_model_tool.parser.loader import load_docs, load_spec, parse_spec

FIXTURES = Path(__file__).parent / "fixtures"


class TestLoadSpec:
    def test_load_sns_model(self):
        spec = load_spec(FIXTURES / "sns" / "api-2.json")
        assert spec.metadata.protocol == "query"
        assert spec.metadata.api_version == "2010-03-31"
        assert "CreateTopic" in spec.operations
        assert spec.shapes["CreateTopicInput"].required == ["Name"]

    def test_load_rest_json_model(self):
        spec = load_spec(FIXTURES / "eks" / "api-2.json")
        create = spec.operations["CreateCluster"]
        assert create.http.method == "POST"
        assert create.http.request_uri == "/clusters"
        assert create.input.shape == "CreateClusterRequest"

    def test_missing_file(self, tmp_path):
        with pytest.raises(MalformedSpecError, match="expected to find"):
            load_spec(tmp_path / "api-2.json")

    def test_invalid_json(self, tmp_path):
        f = tmp_path / "api-2.json"
        f.write_text("{not json")
        with pytest.raises(MalformedSpecError, match="invalid JSON"):
            load_spec(f)


class TestParseSpec:
    def test_missing_top_level_field(self):
        with pytest.raises(MalformedSpecError, match="shapes"):
            parse_spec({"metadata": {}, "operations": {}})

    def test_non_object_root(self):
        with pytest.raises(MalformedSpecError, match="list"):
            parse_spec([])

    def test_shape_without_type(self):
        with pytest.raises(MalformedSpecError):
            parse_spec({"metadata": {}, "operations": {}, "shapes": {"Bad": {"members": {}}}})


class TestLoadDocs:
    def test_load_docs(self):
        docs = load_docs(FIXTURES / "sns" / "docs-2.json")
        assert docs.operation_doc("CreateTopic").startswith("<p>Creates a topic")

    def test_missing_docs_is_not_fatal(self, tmp_path):
        assert load_docs(tmp_path / "docs-2.json") is None

    def test_no_docs_path(self):
        assert load_docs(None) is None

    def test_unreadable_docs_is_not_fatal(self, tmp_path):
        f = tmp_path / "docs-2.json"
        f.write_text("[oops")
        assert load_docs(f) is None
