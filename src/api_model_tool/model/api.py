"""The API model facade.

An ``API`` wraps one parsed model document. The object graph, schema
registry, resources and OpenAPI document are each built on first use and
kept for the lifetime of the instance.
"""

import logging
from pathlib import Path

from pydantic import BaseModel

from api_model_tool.model.filters import ObjectFilter, OperationFilter, filter_objects, filter_operations
from api_model_tool.model.graph import Object, ObjectType, Operation, ShapeGraph, build_graph
from api_model_tool.model.openapi import OPENAPI_VERSION, build_document
from api_model_tool.model.resource import Inflector, Resource, infer_resources
from api_model_tool.model.schema import SchemaSynthesizer
from api_model_tool.parser.base import ApiSpec, DocSpec
from api_model_tool.parser.loader import load_docs, load_spec

logger = logging.getLogger(__name__)


class ApiSummary(BaseModel):
    alias: str
    full_name: str
    api_version: str
    protocol: str
    operations: int
    objects: int
    scalars: int
    structures: int
    payloads: int
    exceptions: int
    lists: int


class API:
    def __init__(self, alias: str, spec: ApiSpec, docs: DocSpec | None = None, inflector: Inflector | None = None):
        self.alias = alias
        self.spec = spec
        self.docs = docs
        self.inflector = inflector
        self._graph: ShapeGraph | None = None
        self._synthesizer: SchemaSynthesizer | None = None
        self._resources: dict[str, Resource] | None = None
        self._document: dict | None = None

    @classmethod
    def from_files(cls, alias: str, model_path: Path, docs_path: Path | None = None) -> "API":
        return cls(alias, load_spec(model_path), load_docs(docs_path))

    @property
    def version(self) -> str:
        return self.spec.metadata.api_version

    @property
    def full_name(self) -> str:
        return self.spec.metadata.service_full_name

    @property
    def protocol(self) -> str:
        return self.spec.metadata.protocol

    @property
    def graph(self) -> ShapeGraph:
        if self._graph is None:
            logger.debug("evaluating API %s", self.alias)
            self._graph = build_graph(self.spec, self.docs)
        return self._graph

    @property
    def synthesizer(self) -> SchemaSynthesizer:
        if self._synthesizer is None:
            self._synthesizer = SchemaSynthesizer(self.spec.shapes, self.docs)
        return self._synthesizer

    def get_operations(self, filter: OperationFilter | None = None) -> list[Operation]:
        return filter_operations(self.graph.operations.values(), filter)

    def get_operation(self, name: str) -> Operation | None:
        return self.graph.operations.get(name)

    def get_objects(self, filter: ObjectFilter | None = None) -> list[Object]:
        return filter_objects(self.graph.objects.values(), filter)

    def get_object(self, name: str) -> Object | None:
        return self.graph.objects.get(name)

    def get_resources(self) -> dict[str, Resource]:
        if self._resources is None:
            # The graph must exist before the synthesizer is shared with inference.
            operations = self.graph.operations.values()
            self._resources = infer_resources(operations, self.synthesizer, self.protocol, self.inflector)
            logger.debug("inferred %d resources for %s", len(self._resources), self.alias)
        return self._resources

    def get_resource(self, name: str) -> Resource | None:
        """Look up a resource by object name, falling back to a
        case-insensitive match on its object, singular or plural name."""
        resources = self.get_resources()
        if name in resources:
            return resources[name]
        wanted = name.lower()
        for resource in resources.values():
            if wanted in (resource.name.lower(), resource.singular_name.lower(), resource.plural_name.lower()):
                return resource
        return None

    def resource_schema(self, name: str) -> dict | None:
        """Standalone schema document for one resource and everything it references."""
        resource = self.get_resource(name)
        if resource is None:
            return None
        schema = resource.to_schema()
        referenced = self.synthesizer.closure(schema)
        key = resource.singular_name
        if key in referenced:
            key += "Resource"
        schemas = {key: schema}
        schemas.update(referenced)
        return {
            "openapi": OPENAPI_VERSION,
            "info": {"title": self.full_name or self.alias, "version": self.version},
            "components": {"schemas": schemas},
        }

    def openapi(self) -> dict:
        if self._document is None:
            self._document = build_document(self.spec, self.graph, self.synthesizer, title=self.alias)
        return self._document

    def summary(self) -> ApiSummary:
        counts = {t: 0 for t in ObjectType}
        for obj in self.graph.objects.values():
            counts[obj.type] += 1
        return ApiSummary(
            alias=self.alias,
            full_name=self.full_name,
            api_version=self.version,
            protocol=self.protocol,
            operations=len(self.graph.operations),
            objects=len(self.graph.objects),
            scalars=counts[ObjectType.SCALAR],
            structures=counts[ObjectType.OBJECT],
            payloads=counts[ObjectType.PAYLOAD],
            exceptions=counts[ObjectType.EXCEPTION],
            lists=counts[ObjectType.LIST],
        )
