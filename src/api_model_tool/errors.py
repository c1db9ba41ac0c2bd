"""Error types raised while loading and evaluating API models."""


class ApiModelError(Exception):
    """Base class for all api-model-tool errors."""


class MalformedSpecError(ApiModelError):
    """The API model document is missing, undecodable or structurally invalid."""


class DanglingReferenceError(ApiModelError):
    """A shape reference names a shape that is not defined in the model."""

    def __init__(self, shape_name: str, referrer: str):
        self.shape_name = shape_name
        self.referrer = referrer
        super().__init__(f"expected to find shape {shape_name} referenced by {referrer}")


class UnknownShapeTypeError(ApiModelError):
    """A shape declares a type outside the supported vocabulary."""

    def __init__(self, shape_name: str, shape_type: str):
        self.shape_name = shape_name
        self.shape_type = shape_type
        super().__init__(f"unknown shape type {shape_type!r} for shape {shape_name}")


class InvalidShapeError(ApiModelError):
    """A shape is well-typed but cannot be rendered (e.g. list with no element)."""


class ServiceNotFoundError(ApiModelError):
    """No model directory exists for the requested service alias."""


class InvalidVersionDirectoryError(ApiModelError):
    """A service model directory contains something other than version directories."""


class NoValidVersionDirectoryError(ApiModelError):
    """A service model directory has no version directories."""


class SDKRepoError(ApiModelError):
    """The upstream model repository could not be cloned."""
