"""Error types for depalign."""

from pathlib import Path


class DepalignError(Exception):
    """Base class for depalign errors."""


class ManifestError(DepalignError):
    """A manifest could not be read, parsed, or written."""

    def __init__(self, message: str, path: Path | str | None = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class ManifestReadError(ManifestError):
    """The manifest file is missing or unreadable."""


class ManifestParseError(ManifestError):
    """The manifest content is not a valid package.json object."""


class ManifestWriteError(ManifestError):
    """The updated manifest could not be persisted."""


class ForcedRejection(DepalignError):
    """Raised by stand-in collaborators to abort a run after the prompt."""
