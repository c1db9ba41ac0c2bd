"""OpenAPI3 document builder.

Binds every operation's input, output and error shapes to request bodies
and responses, with one component schema per structure shape.
"""

import logging

from api_model_tool.model.graph import Operation, ShapeGraph
from api_model_tool.model.schema import SchemaSynthesizer
from api_model_tool.parser.base import ApiSpec

logger = logging.getLogger(__name__)

OPENAPI_VERSION = "3.0.3"
JSON_CONTENT_TYPE = "application/json"
DEFAULT_SUCCESS_CODE = 200
# Older XML APIs (S3, for one) declare errors with no status code at all.
DEFAULT_ERROR_CODE = 400

# RPC-style protocols send every action to the same verb and URI (usually
# POST /) and name the action in the body or a header.
ACTION_ROUTED_PROTOCOLS = frozenset({"query", "json", "ec2"})


def build_document(spec: ApiSpec, graph: ShapeGraph, synthesizer: SchemaSynthesizer, title: str = "") -> dict:
    """Render the whole API as an OpenAPI3 document."""
    for shape_name, shape in spec.shapes.items():
        if shape.type == "structure":
            synthesizer.synthesize(shape_name)

    paths: dict[str, dict] = {}
    for op in graph.operations.values():
        method = op.method.lower()
        path = operation_path(op, spec.metadata.protocol)
        if method in paths.get(path, {}):
            logger.warning("%s shares %s %s with an earlier operation", op.name, op.method, path)
            path = _action_path(op)
        paths.setdefault(path, {})[method] = _operation(op, spec, synthesizer)

    schemas = {name: synthesizer.components[name] for name in spec.shapes if name in synthesizer.components}
    return {
        "openapi": OPENAPI_VERSION,
        "info": {
            "title": spec.metadata.service_full_name or title,
            "version": spec.metadata.api_version,
        },
        "paths": paths,
        "components": {"schemas": schemas},
    }


def operation_path(op: Operation, protocol: str) -> str:
    # The action name is embedded as a fragment to keep operations that share
    # a verb and URI distinct. See OAI/OpenAPI-Specification#1635.
    if protocol in ACTION_ROUTED_PROTOCOLS:
        return _action_path(op)
    return op.request_uri


def _action_path(op: Operation) -> str:
    return f"{op.request_uri}#action={op.name}"


def _operation(op: Operation, spec: ApiSpec, synthesizer: SchemaSynthesizer) -> dict:
    result: dict = {"operationId": op.name}
    if op.documentation:
        result["description"] = op.documentation
    if op.input is not None:
        result["requestBody"] = {"content": _json_content(synthesizer.reference(op.input.name))}

    responses: dict[str, dict] = {}
    success_code = str(op.response_code or DEFAULT_SUCCESS_CODE)
    if op.output is not None:
        responses[success_code] = {
            "description": op.output.name,
            "content": _json_content(synthesizer.reference(op.output.name)),
        }
    else:
        responses[success_code] = {"description": "Success"}

    # Errors sharing a status code are combined into a single oneOf response.
    by_code: dict[str, list[str]] = {}
    for error in op.errors:
        error_spec = spec.shapes[error.name].error
        code = DEFAULT_ERROR_CODE
        if error_spec is not None and error_spec.http_status_code is not None:
            code = error_spec.http_status_code
        names = by_code.setdefault(str(code), [])
        if error.name not in names:
            names.append(error.name)
    for code, names in by_code.items():
        refs = [synthesizer.reference(name) for name in names]
        schema = refs[0] if len(refs) == 1 else {"oneOf": refs}
        responses[code] = {"description": ", ".join(names), "content": _json_content(schema)}

    result["responses"] = responses
    return result


def _json_content(schema: dict) -> dict:
    return {JSON_CONTENT_TYPE: {"schema": schema}}
