"""Provides the git commands used to synchronize repositories."""

import shutil
import subprocess
from typing import Optional

from hostlore import logger
from hostlore.utils import FatalError

def git(cwd: Optional[str], *args: str) -> int:
    """
    Runs git with the given arguments. The standard streams are inherited,
    so progress and credential prompts reach the user.

    Parameters
    ----------
    cwd
        The working directory for git, or None to use the current directory.
    args
        The arguments passed to git.

    Returns
    -------
    int
        The exit status of git.

    Raises
    ------
    FatalError
        No git executable was found.
    """
    executable = shutil.which("git")
    if executable is None:
        raise FatalError("Could not find git executable in PATH")

    command = [executable, *args]
    logger.debug(f"running {command} in {cwd or '.'}")
    return subprocess.run(command, cwd=cwd, check=False).returncode
