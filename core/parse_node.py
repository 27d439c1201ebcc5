"""Node.js package.json reading, parsing and writing."""

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path

from .errors import ManifestParseError, ManifestReadError, ManifestWriteError
from .models import DEPENDENCY_TYPES, Manifest

logger = logging.getLogger(__name__)


def read_manifest(path: Path | str) -> str:
    """Read a manifest file as UTF-8 text.

    Args:
        path: Location of the package.json file

    Returns:
        The raw file content

    Raises:
        ManifestReadError: If the file is missing or unreadable
    """
    path = Path(path)
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ManifestReadError(f"Manifest {path} not found", path)
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestReadError(f"Could not read manifest {path}: {e}", path)


def parse_package_json(content: str, path: Path | str | None = None) -> Manifest:
    """Parse package.json content into Manifest.

    Args:
        content: The package.json file content
        path: Optional location, used for error messages

    Returns:
        Parsed Manifest object

    Raises:
        ManifestParseError: If the content is not a JSON object or a
            dependency section is not an object
    """
    where = path or "<input>"
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ManifestParseError(f"Invalid JSON in {where}: {e}", path)

    if not isinstance(data, dict):
        raise ManifestParseError(f"{where} does not contain a JSON object", path)

    for dep_type in DEPENDENCY_TYPES:
        section = data.get(dep_type)
        if section is not None and not isinstance(section, dict):
            raise ManifestParseError(f"'{dep_type}' in {where} must be an object", path)
        for name, version in (section or {}).items():
            if not isinstance(version, str):
                raise ManifestParseError(f"Version of '{name}' in {where} must be a string", path)

    return Manifest(data=data, raw=content, path=Path(path) if path is not None else None)


def load_manifest(path: Path | str) -> Manifest:
    """Read and parse the manifest at ``path``."""
    logger.debug("Loading manifest %s", path)
    return parse_package_json(read_manifest(path), path)


class ManifestCache:
    """Load-once cache of parsed manifests, keyed by resolved path."""

    def __init__(self):
        self._manifests: dict[Path, Manifest] = {}

    def load(self, path: Path | str) -> Manifest:
        key = Path(path).resolve()
        if key not in self._manifests:
            self._manifests[key] = load_manifest(path)
        return self._manifests[key]

    def clear(self) -> None:
        self._manifests.clear()

    def __contains__(self, path: Path | str) -> bool:
        return Path(path).resolve() in self._manifests


def dump_manifest(manifest: Manifest) -> str:
    """Serialize a manifest with two-space indentation."""
    return json.dumps(manifest.data, indent=2, ensure_ascii=False) + "\n"


def write_manifest(path: Path | str, manifest: Manifest) -> None:
    """Replace the file at ``path`` with the serialized manifest.

    The content goes to a temporary file in the same directory first and is
    then renamed over the target, so readers never see a partial file.

    Raises:
        ManifestWriteError: If the file could not be written
    """
    path = Path(path)
    content = dump_manifest(manifest)
    tmp_name = None
    try:
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", delete=False
        ) as tmp:
            tmp_name = tmp.name
            tmp.write(content)
        if path.exists():
            shutil.copymode(path, tmp_name)
        os.replace(tmp_name, path)
    except OSError as e:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise ManifestWriteError(f"Could not write manifest {path}: {e}", path)

    logger.debug("Wrote manifest %s", path)
