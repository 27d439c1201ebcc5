"""Reconcile a project's dependency versions with the tool and template manifests."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from functools import partial
from pathlib import Path
from typing import Protocol

from rich.markup import escape
from rich.prompt import Confirm

from .mismatch import Mismatches, apply_mismatches, detect_mismatches, format_mismatches
from .models import ReconcileResult
from .npm import clean_dependency_cache, install_dependencies
from .parse_node import ManifestCache, load_manifest, write_manifest

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
TOOL_MANIFEST = DATA_DIR / "package.json"
TEMPLATE_MANIFEST = DATA_DIR / "templates" / "new" / "package.json"
PROJECT_MANIFEST_NAME = "package.json"


class ProcessHandle(Protocol):
    """A running install process; ``wait()`` returns once it has closed."""

    async def wait(self) -> int | None: ...


def build_prompt(mismatches: Mismatches) -> str:
    """Build the confirmation message shown before updating the project."""
    return (
        "[red]The depalign CLI and your project have mismatching versions "
        "of the following modules:[/red]\n"
        f"[yellow]{escape(format_mismatches(mismatches))}[/yellow]\n"
        "Would you like to automatically update your project's dependencies to match the CLI?"
    )


async def prompt_confirm(message: str) -> bool:
    """Ask a yes/no question on the terminal without blocking the event loop."""
    return await asyncio.to_thread(Confirm.ask, message, default=True)


async def always_confirm(message: str) -> bool:
    return True


class Reconciler:
    """Detects version mismatches and updates the project manifest on request."""

    def __init__(
        self,
        project_dir: Path | str = ".",
        tool_manifest: Path | str | None = None,
        template_manifest: Path | str | None = None,
        confirm: Callable[[str], Awaitable[bool]] = prompt_confirm,
        clean_cache: Callable[[], None] | None = None,
        install: Callable[[], Awaitable[ProcessHandle]] | None = None,
        install_command: str | None = None,
    ):
        """Initialize the reconciler.

        Args:
            project_dir: Root of the project holding package.json
            tool_manifest: Manifest of the tool; defaults to the bundled one
            template_manifest: Manifest of new projects; defaults to the bundled one
            confirm: Coroutine asking the user to accept the update
            clean_cache: Removes installed dependencies before reinstalling
            install: Starts reinstalling and returns the running process
            install_command: Command line for the default installer
        """
        self.project_dir = Path(project_dir)
        self.project_manifest = self.project_dir / PROJECT_MANIFEST_NAME
        self.tool_manifest = Path(tool_manifest) if tool_manifest else TOOL_MANIFEST
        self.template_manifest = Path(template_manifest) if template_manifest else TEMPLATE_MANIFEST
        self.confirm = confirm
        self.clean_cache = clean_cache or partial(clean_dependency_cache, self.project_dir)
        self.install = install or partial(install_dependencies, self.project_dir, install_command)
        self._cache = ManifestCache()

    def check(self) -> Mismatches:
        """Load the three manifests and return their mismatches.

        Raises:
            ManifestReadError: If a manifest is missing or unreadable
            ManifestParseError: If a manifest is not valid package.json
        """
        project = self._cache.load(self.project_manifest)
        tool = load_manifest(self.tool_manifest)
        template = load_manifest(self.template_manifest)
        return detect_mismatches(project, tool, template)

    async def reconcile(self) -> ReconcileResult:
        """Run detection and, if the user agrees, update and reinstall.

        Manifest errors are raised before anything is shown to the user.
        Errors from the prompt onward end the run with a ``failed`` result
        carrying the original exception.
        """
        self._cache.clear()
        mismatches = self.check()

        if not mismatches:
            logger.info("Project dependencies already match")
            return ReconcileResult(outcome="up_to_date")

        try:
            if not await self.confirm(build_prompt(mismatches)):
                logger.info("Dependency update declined")
                return ReconcileResult(outcome="declined", mismatches=mismatches)

            await self._update(mismatches)
        except Exception as e:
            logger.info("Dependency update failed: %s", e)
            return ReconcileResult(outcome="failed", mismatches=mismatches, error=e)

        return ReconcileResult(outcome="updated", mismatches=mismatches)

    async def _update(self, mismatches: Mismatches) -> None:
        project = apply_mismatches(self._cache.load(self.project_manifest), mismatches)
        write_manifest(self.project_manifest, project)
        self._cache.clear()

        self.clean_cache()
        process = await self.install()
        await process.wait()
        logger.info("node_modules have been updated.")
