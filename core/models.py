"""Core data models for depalign."""

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

DEPENDENCIES = "dependencies"
DEV_DEPENDENCIES = "devDependencies"
DEPENDENCY_TYPES = (DEPENDENCIES, DEV_DEPENDENCIES)

# Declared version shown for a package the project does not list at all
MISSING = "missing"


@dataclass
class Manifest:
    """A parsed package.json manifest."""

    data: dict[str, Any]
    raw: str = ""
    path: Path | None = None

    def section(self, dep_type: str) -> dict[str, str]:
        """Return the ``dependencies`` or ``devDependencies`` mapping."""
        return self.data.get(dep_type) or {}

    @property
    def dependencies(self) -> dict[str, str]:
        return self.section(DEPENDENCIES)

    @property
    def dev_dependencies(self) -> dict[str, str]:
        return self.section(DEV_DEPENDENCIES)


@dataclass(frozen=True)
class MismatchRecord:
    """A package whose declared version does not match a required one."""

    required: str
    project: str  # declared version or MISSING
    type: str  # dependencies, devDependencies

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass
class ReconcileResult:
    """Outcome of a single reconciliation run."""

    outcome: str  # up_to_date, declined, updated, failed
    mismatches: dict[str, MismatchRecord] = field(default_factory=dict)
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.outcome != "failed"

    def raise_for_failure(self) -> None:
        """Re-raise the error that ended a failed run."""
        if self.error is not None:
            raise self.error
