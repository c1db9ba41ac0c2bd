"""Application settings and logging setup.

Values can be overridden from the environment; CLI options take precedence
over both.
"""

import logging
import os
from pathlib import Path

APP_NAME = "api-model-tool"

SDK_REPO_URL = os.getenv("API_MODEL_TOOL_SDK_REPO", "https://github.com/aws/aws-sdk-go")
SDK_CLONE_DIR = "aws-sdk-go"

DEFAULT_CACHE_PATH = Path(
    os.getenv("API_MODEL_TOOL_CACHE_PATH", str(Path.home() / ".cache" / APP_NAME))
)

MODEL_FILENAME = "api-2.json"
DOCS_FILENAME = "docs-2.json"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(debug: bool = False) -> None:
    """Send package logs to stderr; DEBUG when requested, WARNING otherwise."""
    level = logging.DEBUG if debug else logging.WARNING
    logger = logging.getLogger("api_model_tool")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
