"""Schema synthesizer.

Renders shapes into OpenAPI3 schema dictionaries. Every structure shape is
rendered once into the component registry and referenced by ``$ref``
everywhere else, which also makes self-referential and mutually recursive
structures terminate. Scalars, lists and maps are inlined where used.
"""

import logging
from enum import Enum
from typing import Any, Mapping

from api_model_tool.errors import DanglingReferenceError, InvalidShapeError, UnknownShapeTypeError
from api_model_tool.parser.base import DocSpec, ShapeSpec

logger = logging.getLogger(__name__)

REF_PREFIX = "#/components/schemas/"
EXCEPTION_MARKER = "x-exception"


class ShapeType(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    LONG = "long"
    DOUBLE = "double"
    FLOAT = "float"
    BOOLEAN = "boolean"
    BLOB = "blob"
    TIMESTAMP = "timestamp"
    LIST = "list"
    MAP = "map"
    STRUCTURE = "structure"

    @classmethod
    def of(cls, shape_name: str, shape: ShapeSpec) -> "ShapeType":
        try:
            return cls(shape.type)
        except ValueError:
            raise UnknownShapeTypeError(shape_name, shape.type) from None


def ref_name(schema: Mapping[str, Any]) -> str | None:
    """Return the component name a ``$ref`` schema points at, if any."""
    ref = schema.get("$ref")
    if isinstance(ref, str) and ref.startswith(REF_PREFIX):
        return ref[len(REF_PREFIX):]
    return None


def make_ref(shape_name: str) -> dict:
    return {"$ref": REF_PREFIX + shape_name}


class SchemaSynthesizer:
    """Builds schemas for the shapes of one API model.

    ``components`` is the registry of structure schemas; it only grows, and
    an entry, once added, is never replaced.
    """

    def __init__(self, shapes: Mapping[str, ShapeSpec], docs: DocSpec | None = None):
        self.shapes = shapes
        self.docs = docs
        self.components: dict[str, dict] = {}
        self._inlining: list[str] = []

    def synthesize(self, shape_name: str) -> dict:
        """Return the full schema of a shape.

        Structures return their registry entry (the same object on every
        call); other kinds return a freshly built inline schema.
        """
        shape = self._shape(shape_name, shape_name)
        if ShapeType.of(shape_name, shape) is ShapeType.STRUCTURE:
            return self._component(shape_name, shape)
        return self._inline(shape_name, shape)

    def reference(self, shape_name: str, referrer: str | None = None) -> dict:
        """Return the schema a parent embeds for a shape: ``$ref`` for structures."""
        shape = self._shape(shape_name, referrer or shape_name)
        if ShapeType.of(shape_name, shape) is ShapeType.STRUCTURE:
            self._component(shape_name, shape)
            return make_ref(shape_name)
        return self._inline(shape_name, shape)

    def closure(self, schema: Mapping[str, Any]) -> dict[str, dict]:
        """Collect every component transitively referenced from ``schema``."""
        found: dict[str, dict] = {}
        pending = [schema]
        while pending:
            node = pending.pop()
            name = ref_name(node)
            if name is not None:
                if name not in found:
                    found[name] = self.components[name]
                    pending.append(found[name])
                continue
            for value in node.values():
                if isinstance(value, dict):
                    pending.append(value)
                elif isinstance(value, list):
                    pending.extend(v for v in value if isinstance(v, dict))
        return found

    def _shape(self, shape_name: str, referrer: str) -> ShapeSpec:
        shape = self.shapes.get(shape_name)
        if shape is None:
            raise DanglingReferenceError(shape_name, referrer)
        return shape

    def _component(self, shape_name: str, shape: ShapeSpec) -> dict:
        schema = self.components.get(shape_name)
        if schema is not None:
            return schema
        # Registered before members are visited so cycles resolve to $ref.
        schema = {"type": "object"}
        self.components[shape_name] = schema
        try:
            self._fill_structure(shape_name, shape, schema)
        except Exception:
            del self.components[shape_name]
            raise
        logger.debug("synthesized component %s", shape_name)
        return schema

    def _fill_structure(self, shape_name: str, shape: ShapeSpec, schema: dict) -> None:
        description = self.docs.shape_doc(shape_name) if self.docs else ""
        if description:
            schema["description"] = description
        properties = {}
        for member_name, ref in shape.members.items():
            properties[member_name] = self.reference(ref.shape, f"{shape_name}.{member_name}")
        if properties:
            schema["properties"] = properties
        if shape.required:
            schema["required"] = list(shape.required)
        if shape.exception:
            schema[EXCEPTION_MARKER] = True

    def _inline(self, shape_name: str, shape: ShapeSpec) -> dict:
        kind = ShapeType.of(shape_name, shape)
        if kind is ShapeType.STRING:
            schema: dict = {"type": "string"}
            if shape.min is not None:
                schema["minLength"] = shape.min
            if shape.max is not None:
                schema["maxLength"] = shape.max
            if shape.pattern is not None:
                schema["pattern"] = shape.pattern
            if shape.enum:
                schema["enum"] = list(shape.enum)
            return schema
        if kind in (ShapeType.DOUBLE, ShapeType.FLOAT):
            return _with_bounds({"type": "number", "format": kind.value}, shape)
        if kind is ShapeType.LONG:
            return _with_bounds({"type": "integer", "format": "int64"}, shape)
        if kind is ShapeType.INTEGER:
            return _with_bounds({"type": "integer", "format": "int32"}, shape)
        if kind is ShapeType.BLOB:
            return {"type": "string", "format": "byte"}
        if kind is ShapeType.BOOLEAN:
            return {"type": "boolean"}
        if kind is ShapeType.TIMESTAMP:
            return {"type": "string", "format": "date-time"}
        if kind is ShapeType.MAP:
            return {"type": "object", "additionalProperties": True}
        if kind is ShapeType.LIST:
            return self._array(shape_name, shape)
        raise InvalidShapeError(f"{shape_name}: structure shapes are not inlined")

    def _array(self, shape_name: str, shape: ShapeSpec) -> dict:
        if shape.member is None:
            raise InvalidShapeError(f"expected list shape {shape_name} to have a member")
        if shape_name in self._inlining:
            chain = " -> ".join(self._inlining + [shape_name])
            raise InvalidShapeError(f"list shape {shape_name} contains itself: {chain}")
        self._inlining.append(shape_name)
        try:
            items = self.reference(shape.member.shape, f"{shape_name}.member")
        finally:
            self._inlining.pop()
        schema = {"type": "array", "items": items}
        if shape.max is not None:
            schema["maxItems"] = shape.max
        return schema


def _with_bounds(schema: dict, shape: ShapeSpec) -> dict:
    if shape.min is not None:
        schema["minimum"] = shape.min
    if shape.max is not None:
        schema["maximum"] = shape.max
    return schema
