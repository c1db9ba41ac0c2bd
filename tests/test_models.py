from api_model_tool.parser.base import ApiSpec, DocSpec, OperationSpec, ShapeRef, ShapeSpec


class TestShapeSpec:
    def test_create_scalar_shape(self):
        s = ShapeSpec(type="string")
        assert s.type == "string"
        assert s.exception is False
        assert s.required == []
        assert s.members == {}
        assert s.member is None

    def test_parse_string_constraints(self):
        s = ShapeSpec.model_validate(
            {"type": "string", "min": 1, "max": 128, "pattern": "^[a-z]+$", "enum": ["a", "b"]}
        )
        assert s.min == 1
        assert s.max == 128
        assert s.pattern == "^[a-z]+$"
        assert s.enum == ["a", "b"]

    def test_parse_structure_with_located_member(self):
        s = ShapeSpec.model_validate({
            "type": "structure",
            "required": ["name"],
            "members": {"name": {"shape": "String", "location": "uri", "locationName": "name"}},
        })
        assert s.members["name"].shape == "String"
        assert s.members["name"].location == "uri"
        assert s.members["name"].location_name == "name"

    def test_parse_exception_error_metadata(self):
        s = ShapeSpec.model_validate({
            "type": "structure",
            "members": {},
            "exception": True,
            "error": {"code": "NotFound", "httpStatusCode": 404, "senderFault": True},
        })
        assert s.exception is True
        assert s.error.http_status_code == 404
        assert s.error.sender_fault is True

    def test_unknown_keys_are_ignored(self):
        s = ShapeSpec.model_validate({"type": "map", "key": {"shape": "K"}, "value": {"shape": "V"}})
        assert s.type == "map"


class TestOperationSpec:
    def test_http_defaults(self):
        op = OperationSpec()
        assert op.http.method == "POST"
        assert op.http.request_uri == "/"
        assert op.http.response_code is None
        assert op.errors == []

    def test_parse_wire_names(self):
        op = OperationSpec.model_validate({
            "http": {"method": "PUT", "requestUri": "/widgets/{Id}", "responseCode": 201},
            "input": {"shape": "PutWidgetInput"},
            "errors": [{"shape": "NotFound"}, {"shape": "Conflict"}],
        })
        assert op.http.request_uri == "/widgets/{Id}"
        assert op.http.response_code == 201
        assert op.input == ShapeRef(shape="PutWidgetInput")
        assert [e.shape for e in op.errors] == ["NotFound", "Conflict"]


class TestApiSpec:
    def test_preserves_document_order(self):
        spec = ApiSpec.model_validate({
            "metadata": {"apiVersion": "2020-01-01", "serviceFullName": "Widgets", "protocol": "json"},
            "operations": {},
            "shapes": {"B": {"type": "string"}, "A": {"type": "string"}},
        })
        assert list(spec.shapes) == ["B", "A"]
        assert spec.metadata.api_version == "2020-01-01"
        assert spec.metadata.service_full_name == "Widgets"


class TestDocSpec:
    def test_lookups(self):
        docs = DocSpec.model_validate({
            "operations": {"CreateWidget": "<p>Creates a widget.</p>", "DeleteWidget": None},
            "shapes": {"Widget": {"base": "<p>A widget.</p>", "refs": {}}, "WidgetId": {"base": None, "refs": {}}},
        })
        assert docs.operation_doc("CreateWidget") == "<p>Creates a widget.</p>"
        assert docs.operation_doc("DeleteWidget") == ""
        assert docs.operation_doc("Missing") == ""
        assert docs.shape_doc("Widget") == "<p>A widget.</p>"
        assert docs.shape_doc("WidgetId") == ""
        assert docs.shape_doc("Missing") == ""
