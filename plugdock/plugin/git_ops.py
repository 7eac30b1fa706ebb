"""
Git Operations for Package Installation.

Packages are cloned with the git command line tool running as a separate
process. The caller awaits the process exit instead of blocking the event
loop.
"""

import asyncio
import logging
import os
from pathlib import Path

from plugdock.errors import GitError

logger = logging.getLogger(__name__)


async def clone_repository(
    source_url: str,
    directory_name: str,
    cwd: Path,
    git_executable: str = "git",
) -> int:
    """
    Clone a repository into ``cwd / directory_name``.

    git runs non-interactively: credential prompts are disabled and its
    output is discarded.

    Args:
        source_url: Repository URL
        directory_name: Name of the directory created inside cwd
        cwd: Working directory for the clone
        git_executable: git command to run

    Returns:
        git exit code

    Raises:
        GitError: If the git executable cannot be started
    """
    env = os.environ.copy()
    env["GIT_TERMINAL_PROMPT"] = "0"

    try:
        process = await asyncio.create_subprocess_exec(
            git_executable,
            "clone",
            source_url,
            directory_name,
            cwd=cwd,
            env=env,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
    except FileNotFoundError as e:
        raise GitError(f"git command not found: {git_executable}") from e
    except OSError as e:
        raise GitError(f"Failed to start git: {e}") from e

    logger.debug(f"git clone {source_url} {directory_name} started (pid {process.pid})")
    exit_code = await process.wait()
    logger.debug(f"git clone {source_url} exited with {exit_code}")
    return exit_code
