"""Data models for raw API model documents.

An API model (``api-2.json``) describes named shapes and the operations that
use them; the optional docs document (``docs-2.json``) carries human-readable
text for both. These models mirror the wire layout and are consumed by the
graph builder.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class WireModel(BaseModel):
    """Base for models whose fields use camelCase aliases on the wire."""

    model_config = ConfigDict(populate_by_name=True)


class ShapeRef(WireModel):
    """A reference to a named shape, optionally tagged with a wire location."""

    shape: str
    location: str | None = None  # header / headers / uri / querystring / statusCode
    location_name: str | None = Field(default=None, alias="locationName")


class ErrorSpec(WireModel):
    """Error metadata attached to exception shapes."""

    code: str | None = None
    http_status_code: int | None = Field(default=None, alias="httpStatusCode")
    sender_fault: bool = Field(default=False, alias="senderFault")


class ShapeSpec(WireModel):
    """A single named shape definition."""

    type: str  # string / integer / long / double / float / boolean / blob / timestamp / list / map / structure
    exception: bool = False
    required: list[str] = []
    members: dict[str, ShapeRef] = {}
    member: ShapeRef | None = None  # list element
    min: int | float | None = None
    max: int | float | None = None
    pattern: str | None = None
    enum: list[Any] = []
    error: ErrorSpec | None = None


class HttpSpec(WireModel):
    method: str = "POST"
    request_uri: str = Field(default="/", alias="requestUri")
    response_code: int | None = Field(default=None, alias="responseCode")


class OperationSpec(WireModel):
    """A single named operation and the shapes it consumes and produces."""

    name: str | None = None
    http: HttpSpec = HttpSpec()
    input: ShapeRef | None = None
    output: ShapeRef | None = None
    errors: list[ShapeRef] = []


class Metadata(WireModel):
    api_version: str = Field(default="", alias="apiVersion")
    service_full_name: str = Field(default="", alias="serviceFullName")
    protocol: str = ""


class ApiSpec(WireModel):
    """The whole API model document."""

    metadata: Metadata
    operations: dict[str, OperationSpec]
    shapes: dict[str, ShapeSpec]


class ShapeDoc(WireModel):
    base: str | None = None
    refs: dict[str, str | None] = {}


class DocSpec(WireModel):
    """Documentation strings keyed by operation and shape name."""

    service: str | None = None
    operations: dict[str, str | None] = {}
    shapes: dict[str, ShapeDoc] = {}

    def operation_doc(self, name: str) -> str:
        return self.operations.get(name) or ""

    def shape_doc(self, name: str) -> str:
        doc = self.shapes.get(name)
        if doc is None:
            return ""
        return doc.base or ""
