"""Opens interactive sessions (or runs commands) on hosts via ssh."""

import shutil
import subprocess
from typing import Optional, Sequence

from jinja2.exceptions import TemplateError

from hostlore import globals as G, logger
from hostlore.session_settings import SessionSettings
from hostlore.types import Host
from hostlore.utils import FatalError

def _render(template: str, host: Host) -> str:
    try:
        return G.jinja2_env.from_string(template).render(host=host)
    except TemplateError as e:
        raise FatalError(f"Invalid session template '{template}': {e}") from e

def session_command(host: Host, extra: Sequence[str] = (), settings: Optional[SessionSettings] = None) -> list[str]:
    """
    Constructs the full command needed to open a session on the given host.

    Parameters
    ----------
    host
        The host to connect to.
    extra
        A command to execute on the host. The session is interactive if this is empty.
    settings
        Overrides for the base session settings.

    Returns
    -------
    list[str]
        The command, starting with the program to execute.

    Raises
    ------
    FatalError
        A template could not be rendered.
    """
    resolved = G.base_session_settings.overlay(settings or SessionSettings()).resolve()

    command = [resolved.program]
    command.extend(_render(opt, host) for opt in resolved.options)
    command.append(_render(resolved.destination, host))
    command.extend(extra)
    return command

def open_session(host: Host, extra: Sequence[str] = (), settings: Optional[SessionSettings] = None) -> None:
    """
    Opens a session on the given host. The standard streams are inherited,
    so an interactive session takes over the terminal until it is closed.

    Parameters
    ----------
    host
        The host to connect to.
    extra
        A command to execute verbatim on the host instead of opening a shell.
    settings
        Overrides for the base session settings.

    Raises
    ------
    FatalError
        The program was not found or exited with a non-zero status.
    """
    command = session_command(host, extra, settings)
    executable = shutil.which(command[0])
    if executable is None:
        raise FatalError(f"ssh command failed: could not find '{command[0]}' in PATH")

    logger.debug(f"executing {command}")
    status = subprocess.run([executable, *command[1:]], check=False).returncode
    if status != 0:
        raise FatalError(f"ssh command failed: exit status {status}")
