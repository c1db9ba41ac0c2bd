from pathlib import Path

import pytest

from api_model_tool.errors import DanglingReferenceError
from api_model_tool.model.graph import ObjectType, build_graph
from api_model_tool.parser.base import ApiSpec, DocSpec
from api_model_tool.parser.loader import load_spec

FIXTURES = Path(__file__).parent / "fixtures"


def _spec(shapes: dict, operations: dict | None = None, protocol: str = "json") -> ApiSpec:
    return ApiSpec.model_validate({
        "metadata": {"apiVersion": "2020-01-01", "serviceFullName": "Test", "protocol": protocol},
        "operations": operations or {},
        "shapes": shapes,
    })


class TestClassification:
    def test_basic_kinds(self):
        graph = build_graph(_spec({
            "Name": {"type": "string"},
            "Count": {"type": "integer"},
            "Names": {"type": "list", "member": {"shape": "Name"}},
            "Thing": {"type": "structure", "members": {"Name": {"shape": "Name"}}},
            "Oops": {"type": "structure", "members": {}, "exception": True},
        }))
        objects = graph.objects
        assert objects["Name"].type is ObjectType.SCALAR
        assert objects["Count"].type is ObjectType.SCALAR
        assert objects["Names"].type is ObjectType.LIST
        assert objects["Thing"].type is ObjectType.OBJECT
        assert objects["Oops"].type is ObjectType.EXCEPTION

    def test_input_and_output_become_payloads(self):
        graph = build_graph(_spec(
            {
                "In": {"type": "structure", "members": {}},
                "Out": {"type": "structure", "members": {}},
                "Ids": {"type": "list", "member": {"shape": "Id"}},
                "Id": {"type": "string"},
            },
            {
                "DoIt": {"input": {"shape": "In"}, "output": {"shape": "Out"}},
                "Odd": {"input": {"shape": "Ids"}},
            },
        ))
        assert graph.objects["In"].type is ObjectType.PAYLOAD
        assert graph.objects["Out"].type is ObjectType.PAYLOAD
        assert graph.objects["Ids"].type is ObjectType.PAYLOAD
        assert graph.objects["Id"].type is ObjectType.SCALAR

    def test_exception_never_becomes_payload(self):
        graph = build_graph(_spec(
            {"Fault": {"type": "structure", "members": {}, "exception": True}},
            {"Weird": {"output": {"shape": "Fault"}, "errors": [{"shape": "Fault"}]}},
        ))
        assert graph.objects["Fault"].type is ObjectType.EXCEPTION

    def test_every_shape_has_one_classification(self):
        spec = load_spec(FIXTURES / "eks" / "api-2.json")
        graph = build_graph(spec)
        assert set(graph.objects) == set(spec.shapes)
        counts = {t: 0 for t in ObjectType}
        for obj in graph.objects.values():
            counts[obj.type] += 1
        assert counts == {
            ObjectType.SCALAR: 5,
            ObjectType.OBJECT: 4,
            ObjectType.PAYLOAD: 10,
            ObjectType.EXCEPTION: 5,
            ObjectType.LIST: 1,
        }

    def test_classification_frozen_after_build(self):
        graph = build_graph(_spec({"Name": {"type": "string"}}))
        with pytest.raises(AttributeError, match="frozen"):
            graph.objects["Name"].type = ObjectType.OBJECT


class TestWiring:
    def test_members_point_at_shared_objects(self):
        graph = build_graph(_spec({
            "Id": {"type": "string"},
            "A": {"type": "structure", "members": {"Id": {"shape": "Id"}}},
            "B": {"type": "structure", "members": {"Key": {"shape": "Id", "location": "header"}}},
        }))
        assert graph.objects["A"].members["Id"] is graph.objects["Id"]
        assert graph.objects["B"].members["Key"] is graph.objects["Id"]
        assert graph.objects["B"].member_locations["Key"] == "header"

    def test_list_has_element_member(self):
        graph = build_graph(_spec({
            "Id": {"type": "string"},
            "Ids": {"type": "list", "member": {"shape": "Id"}},
        }))
        assert graph.objects["Ids"].members == {"Id": graph.objects["Id"]}

    def test_self_reference(self):
        graph = build_graph(_spec({
            "Node": {"type": "structure", "members": {"Next": {"shape": "Node"}}},
        }))
        node = graph.objects["Node"]
        assert node.members["Next"] is node

    def test_mutual_reference(self):
        graph = build_graph(_spec({
            "A": {"type": "structure", "members": {"B": {"shape": "B"}}},
            "B": {"type": "structure", "members": {"A": {"shape": "A"}}},
        }))
        a, b = graph.objects["A"], graph.objects["B"]
        assert a.members["B"] is b
        assert b.members["A"] is a

    def test_required_members(self):
        graph = build_graph(_spec({
            "Id": {"type": "string"},
            "A": {"type": "structure", "required": ["Id"], "members": {"Id": {"shape": "Id"}}},
        }))
        assert graph.objects["A"].required == frozenset({"Id"})


class TestOperations:
    def test_resolved_operation(self):
        spec = load_spec(FIXTURES / "eks" / "api-2.json")
        graph = build_graph(spec)
        op = graph.operations["CreateCluster"]
        assert op.method == "POST"
        assert op.request_uri == "/clusters"
        assert op.input is graph.objects["CreateClusterRequest"]
        assert op.output is graph.objects["CreateClusterResponse"]
        assert [e.name for e in op.errors] == [
            "ResourceInUseException",
            "InvalidParameterException",
            "ClientException",
            "ServerException",
        ]

    def test_operation_documentation(self):
        docs = DocSpec(operations={"Ping": "<p>Checks liveness.</p>"})
        graph = build_graph(_spec({}, {"Ping": {"http": {"method": "get", "requestUri": "/ping"}}}), docs)
        op = graph.operations["Ping"]
        assert op.documentation == "<p>Checks liveness.</p>"
        assert op.method == "GET"
        assert op.input is None
        assert op.output is None


class TestDanglingReferences:
    def test_member(self):
        with pytest.raises(DanglingReferenceError) as exc:
            build_graph(_spec({"A": {"type": "structure", "members": {"X": {"shape": "Missing"}}}}))
        assert exc.value.shape_name == "Missing"
        assert exc.value.referrer == "A.X"

    def test_list_element(self):
        with pytest.raises(DanglingReferenceError, match="Missing"):
            build_graph(_spec({"L": {"type": "list", "member": {"shape": "Missing"}}}))

    @pytest.mark.parametrize("op_spec", [
        {"input": {"shape": "Missing"}},
        {"output": {"shape": "Missing"}},
        {"errors": [{"shape": "Missing"}]},
    ])
    def test_operation_refs(self, op_spec):
        with pytest.raises(DanglingReferenceError) as exc:
            build_graph(_spec({}, {"DoIt": op_spec}))
        assert exc.value.shape_name == "Missing"
        assert exc.value.referrer.startswith("DoIt.")
