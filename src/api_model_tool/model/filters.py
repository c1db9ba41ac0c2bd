"""Filters for selecting operations and objects.

Each dimension is an any-of match; an empty dimension places no
constraint, so a default-constructed filter matches everything.
"""

from typing import Iterable

from pydantic import BaseModel

from api_model_tool.model.graph import Object, ObjectType, Operation


class OperationFilter(BaseModel):
    methods: list[str] = []
    prefixes: list[str] = []

    def matches(self, op: Operation) -> bool:
        if self.methods and op.method.upper() not in {m.upper() for m in self.methods}:
            return False
        return _has_prefix(op.name, self.prefixes)


class ObjectFilter(BaseModel):
    types: list[ObjectType] = []
    prefixes: list[str] = []

    def matches(self, obj: Object) -> bool:
        if self.types and obj.type not in self.types:
            return False
        return _has_prefix(obj.name, self.prefixes)


def filter_operations(operations: Iterable[Operation], filter: OperationFilter | None = None) -> list[Operation]:
    if filter is None:
        return list(operations)
    return [op for op in operations if filter.matches(op)]


def filter_objects(objects: Iterable[Object], filter: ObjectFilter | None = None) -> list[Object]:
    if filter is None:
        return list(objects)
    return [obj for obj in objects if filter.matches(obj)]


def _has_prefix(name: str, prefixes: list[str]) -> bool:
    if not prefixes:
        return True
    return any(name.startswith(p) for p in prefixes)
