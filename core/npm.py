"""Dependency cache cleanup and installation for Node.js projects."""

import asyncio
import logging
import shlex
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def clean_dependency_cache(project_dir: Path | str) -> None:
    """Remove the project's installed node_modules, if any."""
    node_modules = Path(project_dir) / "node_modules"
    if node_modules.is_dir():
        logger.info("Removing %s", node_modules)
        shutil.rmtree(node_modules)


def install_command(project_dir: Path | str, command: str | None = None) -> list[str]:
    """Pick the install command for a project.

    Args:
        project_dir: Project root
        command: Explicit command line; overrides detection when given

    Returns:
        The command as an argument list; ``yarn install`` when the project has
        a yarn.lock, ``npm install`` otherwise
    """
    if command:
        return shlex.split(command)
    if (Path(project_dir) / "yarn.lock").exists():
        return ["yarn", "install"]
    return ["npm", "install"]


async def install_dependencies(
    project_dir: Path | str, command: str | None = None
) -> asyncio.subprocess.Process:
    """Start installing the project's dependencies.

    The returned process is already running; await ``wait()`` on it to know
    when installation has finished.
    """
    args = install_command(project_dir, command)
    logger.info("Running %s in %s", " ".join(args), project_dir)
    return await asyncio.create_subprocess_exec(*args, cwd=str(project_dir))
