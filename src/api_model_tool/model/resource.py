"""Resource inference.

Many service APIs follow a pattern we can use to find their top-level
resources: there is a ``Create{ObjectName}`` operation whose input shape
lists the fields a caller supplies, and whose output shape describes how
the created object is identified. For example, SNS::

    "CreateTopic": {
      "http": {"method": "POST", "requestUri": "/"},
      "input": {"shape": "CreateTopicInput"},
      "output": {"shape": "CreateTopicResponse"}
    }

    "CreateTopicInput": {
      "type": "structure",
      "required": ["Name"],
      "members": {
        "Name": {"shape": "topicName"},
        "Attributes": {"shape": "TopicAttributesMap"},
        "Tags": {"shape": "TagList"}
      }
    }

    "CreateTopicResponse": {
      "type": "structure",
      "members": {"TopicArn": {"shape": "topicARN"}}
    }

yields a ``Topic`` resource with ``Name``, ``Attributes``, ``Tags`` and
``TopicArn`` properties, of which ``Name`` is required.
"""

import logging
from typing import Iterable

import inflection
from pydantic import BaseModel, ConfigDict

from api_model_tool.model.graph import Object, Operation
from api_model_tool.model.schema import SchemaSynthesizer

logger = logging.getLogger(__name__)

# Longest first: "CreateOrUpdateTags" must not become "OrUpdateTags".
CREATE_PREFIXES = ("CreateOrUpdate", "Create")

# Tags hang off nearly every resource and are never resources themselves.
EXCLUDED_SINGULAR_NAMES = frozenset({"Tag"})

NON_BODY_LOCATIONS = frozenset({"header", "headers", "uri"})

URI_ROUTED_PROTOCOLS = frozenset({"rest-json"})


class Inflector:
    """English singular/plural forms of CamelCase object names.

    Rules from the ``inflection`` package match on the end of the name,
    case-insensitively, so only the last word of ``EventBus`` or
    ``PlatformApplications`` is inflected and its case is kept. Names that
    are already singular (``Alias``, ``Address``) come back unchanged.
    """

    def singular(self, word: str) -> str:
        return inflection.singularize(word)

    def plural(self, word: str) -> str:
        return inflection.pluralize(word)


class Resource(BaseModel):
    """A primary entity inferred from a creation operation."""

    model_config = ConfigDict(frozen=True)

    name: str
    singular_name: str
    plural_name: str
    properties: dict[str, dict]
    required: frozenset[str] = frozenset()

    def to_schema(self) -> dict:
        schema: dict = {"type": "object", "properties": dict(self.properties)}
        if self.required:
            schema["required"] = sorted(self.required)
        return schema


def strip_create_prefix(operation_name: str) -> str | None:
    """Return the object name of a creation operation, or None."""
    for prefix in CREATE_PREFIXES:
        if operation_name.startswith(prefix):
            return operation_name[len(prefix):]
    return None


def is_nested_uri(request_uri: str) -> bool:
    """True when a request URI is more than one path segment deep."""
    return request_uri.count("/") > 1


def infer_resources(
    operations: Iterable[Operation],
    synthesizer: SchemaSynthesizer,
    protocol: str,
    inflector: Inflector | None = None,
) -> dict[str, Resource]:
    """Infer resources from the creation operations of an API."""
    inflector = inflector or Inflector()
    resources: dict[str, Resource] = {}
    for op in operations:
        obj_name = strip_create_prefix(op.name)
        if not obj_name:
            continue
        singular_name = inflector.singular(obj_name)
        if singular_name in EXCLUDED_SINGULAR_NAMES:
            logger.debug("skipping %s: %s is not a resource", op.name, singular_name)
            continue
        if protocol in URI_ROUTED_PROTOCOLS and is_nested_uri(op.request_uri):
            logger.debug("skipping %s: nested request URI %s", op.name, op.request_uri)
            continue

        properties: dict[str, dict] = {}
        required: frozenset[str] = frozenset()
        if op.input is not None:
            for member_name, member in op.input.members.items():
                properties[member_name] = synthesizer.reference(member.name)
            required = op.input.required
        if op.output is not None:
            for member_name, member in _body_members(op.output, singular_name):
                if member_name not in properties:
                    properties[member_name] = synthesizer.reference(member.name)

        if obj_name in resources:
            logger.debug("%s replaces earlier resource %s", op.name, obj_name)
        resources[obj_name] = Resource(
            name=obj_name,
            singular_name=singular_name,
            plural_name=inflector.plural(singular_name),
            properties=properties,
            required=required,
        )
    return resources


def _body_members(output: Object, singular_name: str) -> list[tuple[str, Object]]:
    members, locations = output.members, output.member_locations
    # Responses often wrap the created entity in a single member named after
    # it, e.g. EKS CreateClusterResponse {"cluster": Cluster}.
    if len(members) == 1:
        (member_name, member), = members.items()
        if member_name.lower() == singular_name.lower():
            members, locations = member.members, member.member_locations
    return [
        (name, member)
        for name, member in members.items()
        if locations.get(name) not in NON_BODY_LOCATIONS
    ]
