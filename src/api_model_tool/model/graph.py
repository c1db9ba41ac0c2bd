"""Shape graph builder.

Turns the flat shape map of an API model into a graph of classified
``Object`` nodes whose members point at each other (cycles allowed), and
resolves every operation into an ``Operation`` pointing at those nodes.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum

from api_model_tool.errors import DanglingReferenceError
from api_model_tool.parser.base import ApiSpec, DocSpec, ShapeRef

logger = logging.getLogger(__name__)


class ObjectType(str, Enum):
    SCALAR = "scalar"
    OBJECT = "object"
    PAYLOAD = "payload"
    EXCEPTION = "exception"
    LIST = "list"


@dataclass(eq=False)
class Object:
    """A classified shape node. Shared by reference across the graph."""

    name: str
    type: ObjectType
    data_type: str
    members: dict[str, "Object"] = field(default_factory=dict, repr=False)
    member_locations: dict[str, str | None] = field(default_factory=dict, repr=False)
    required: frozenset[str] = frozenset()
    _frozen: bool = field(default=False, init=False, repr=False)

    def __setattr__(self, name, value):
        if name == "type" and getattr(self, "_frozen", False):
            raise AttributeError(f"classification of {self.name} is frozen")
        super().__setattr__(name, value)

    def freeze(self) -> None:
        self._frozen = True


@dataclass(eq=False)
class Operation:
    name: str
    method: str
    request_uri: str
    response_code: int | None = None
    input: Object | None = None
    output: Object | None = None
    errors: list[Object] = field(default_factory=list)
    documentation: str = ""


@dataclass
class ShapeGraph:
    """All objects and operations of one API, keyed by name in document order."""

    objects: dict[str, Object]
    operations: dict[str, Operation]


def classify(shape_type: str, exception: bool) -> ObjectType:
    if shape_type == "structure":
        return ObjectType.EXCEPTION if exception else ObjectType.OBJECT
    if shape_type == "list":
        return ObjectType.LIST
    return ObjectType.SCALAR


def build_graph(spec: ApiSpec, docs: DocSpec | None = None) -> ShapeGraph:
    """Build the object graph and resolved operations for an API model.

    Raises DanglingReferenceError if any member, list element or operation
    refers to an undefined shape.
    """
    objects: dict[str, Object] = {}
    for shape_name, shape in spec.shapes.items():
        objects[shape_name] = Object(
            name=shape_name,
            type=classify(shape.type, shape.exception),
            data_type=shape.type,
            required=frozenset(shape.required),
        )

    for shape_name, shape in spec.shapes.items():
        obj = objects[shape_name]
        if shape.type == "structure":
            for member_name, ref in shape.members.items():
                obj.members[member_name] = _resolve(objects, ref, f"{shape_name}.{member_name}")
                obj.member_locations[member_name] = ref.location
        elif shape.type == "list" and shape.member is not None:
            element = _resolve(objects, shape.member, f"{shape_name}.member")
            obj.members[element.name] = element
            obj.member_locations[element.name] = shape.member.location

    operations: dict[str, Operation] = {}
    for op_name, op_spec in spec.operations.items():
        op = Operation(
            name=op_name,
            method=op_spec.http.method.upper(),
            request_uri=op_spec.http.request_uri,
            response_code=op_spec.http.response_code,
            documentation=docs.operation_doc(op_name) if docs else "",
        )
        if op_spec.input is not None:
            op.input = _payload(objects, op_spec.input, f"{op_name}.input")
        if op_spec.output is not None:
            op.output = _payload(objects, op_spec.output, f"{op_name}.output")
        op.errors = [_resolve(objects, ref, f"{op_name}.errors") for ref in op_spec.errors]
        operations[op_name] = op

    for obj in objects.values():
        obj.freeze()

    logger.debug("built shape graph: %d objects, %d operations", len(objects), len(operations))
    return ShapeGraph(objects=objects, operations=operations)


def _resolve(objects: dict[str, Object], ref: ShapeRef, referrer: str) -> Object:
    obj = objects.get(ref.shape)
    if obj is None:
        raise DanglingReferenceError(ref.shape, referrer)
    return obj


def _payload(objects: dict[str, Object], ref: ShapeRef, referrer: str) -> Object:
    # Exceptions keep their classification even when used as a payload.
    obj = _resolve(objects, ref, referrer)
    if obj.type is not ObjectType.EXCEPTION:
        obj.type = ObjectType.PAYLOAD
    return obj
