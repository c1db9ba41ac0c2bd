"""Local cache of upstream API models.

The models live in a shallow clone of the upstream SDK repository, laid out
as ``models/apis/<alias>/<version>/{api-2.json,docs-2.json}``.
"""

import logging
import subprocess
from pathlib import Path

from api_model_tool.config import DOCS_FILENAME, MODEL_FILENAME, SDK_CLONE_DIR, SDK_REPO_URL
from api_model_tool.errors import (
    InvalidVersionDirectoryError,
    NoValidVersionDirectoryError,
    SDKRepoError,
    ServiceNotFoundError,
)
from api_model_tool.model.api import API

logger = logging.getLogger(__name__)


def ensure_sdk_repo(cache_path: Path, repo_url: str = SDK_REPO_URL) -> Path:
    """Return the path of the local SDK clone, cloning it first if needed."""
    src_path = cache_path / "src"
    src_path.mkdir(parents=True, exist_ok=True)
    clone_path = src_path / SDK_CLONE_DIR
    if clone_path.exists():
        return clone_path

    logger.info("cloning %s to local cache %s", repo_url, clone_path)
    try:
        subprocess.run(
            ["git", "clone", "--depth", "1", repo_url, str(clone_path)],
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise SDKRepoError("git executable not found") from e
    except subprocess.CalledProcessError as e:
        raise SDKRepoError(f"failed to clone {repo_url}: {e.stderr.strip()}") from e
    return clone_path


class SDKHelper:
    """Finds and loads service models inside an SDK checkout."""

    def __init__(self, base_path: Path):
        self.base_path = base_path

    @property
    def apis_path(self) -> Path:
        return self.base_path / "models" / "apis"

    def list_aliases(self) -> list[str]:
        if not self.apis_path.is_dir():
            return []
        return sorted(p.name for p in self.apis_path.iterdir() if p.is_dir())

    def api_version(self, alias: str) -> str:
        """Return the newest API version directory name for a service."""
        api_path = self.apis_path / alias
        if not api_path.is_dir():
            raise ServiceNotFoundError(f"no such service: {alias}")
        versions = []
        for entry in api_path.iterdir():
            if not entry.is_dir():
                raise InvalidVersionDirectoryError(
                    f"expected to find only directories in {api_path} but found {entry.name}"
                )
            versions.append(entry.name)
        if not versions:
            raise NoValidVersionDirectoryError(f"no valid version directories found in {api_path}")
        # Versions are ISO dates, so lexical order is chronological.
        return max(versions)

    def model_and_docs_path(self, alias: str) -> tuple[Path, Path]:
        version_path = self.apis_path / alias / self.api_version(alias)
        return version_path / MODEL_FILENAME, version_path / DOCS_FILENAME

    def load_api(self, alias: str) -> API:
        model_path, docs_path = self.model_and_docs_path(alias)
        return API.from_files(alias, model_path, docs_path)

    def get_apis(self, aliases: list[str] | None = None, protocols: list[str] | None = None) -> list[API]:
        """Load every cached API, optionally restricted by alias and protocol."""
        apis = []
        for alias in self.list_aliases():
            if aliases and alias not in aliases:
                continue
            api = self.load_api(alias)
            if protocols and api.protocol not in protocols:
                continue
            apis.append(api)
        return apis
