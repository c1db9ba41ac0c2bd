"""Loaders for API model and docs documents."""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from api_model_tool.errors import MalformedSpecError
from api_model_tool.parser.base import ApiSpec, DocSpec

logger = logging.getLogger(__name__)


def load_spec(file_path: Path) -> ApiSpec:
    """Read and validate an API model JSON file."""
    if not file_path.exists():
        raise MalformedSpecError(f"expected to find {file_path}")
    text = file_path.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedSpecError(f"{file_path}: invalid JSON ({e.msg}, line {e.lineno})") from e
    logger.debug("loaded API model from %s", file_path)
    return parse_spec(data)


def parse_spec(data: Any) -> ApiSpec:
    """Validate an already-decoded API model document."""
    if not isinstance(data, dict):
        raise MalformedSpecError(f"expected a JSON object at document root, got {type(data).__name__}")
    try:
        return ApiSpec.model_validate(data)
    except ValidationError as e:
        raise MalformedSpecError(str(e)) from e


def load_docs(file_path: Path | None) -> DocSpec | None:
    """Read the optional docs document.

    A missing or unreadable docs file is not an error: the model is simply
    rendered without descriptions.
    """
    if file_path is None:
        return None
    if not file_path.exists():
        logger.info("no docs document at %s", file_path)
        return None
    try:
        data = json.loads(file_path.read_text(encoding="utf-8"))
        return DocSpec.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.warning("ignoring unreadable docs document %s: %s", file_path, e)
        return None
