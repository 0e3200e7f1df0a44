"""
Provides utility functions.
"""

from __future__ import annotations

import os
import sys
from typing import NoReturn, Optional

from hostlore.logger import col

DOCUMENT_EXTENSION = ".yaml"
"""The file extension of loadable documents."""

REPO_MARKER = "_repo.yaml"
"""The file that marks a directory as a loadable repository."""

class FatalError(Exception):
    """An exception type for fatal errors, optionally including a file location."""
    def __init__(self, msg: str, loc: Optional[str] = None):
        super().__init__(msg)
        self.loc = loc

def print_error(msg: str, loc: Optional[str] = None) -> None:
    """Prints a message with a (possibly colored) 'error: ' prefix."""
    if loc is None:
        print(f"{col('[1;31m')}error:{col('[m')} {msg}", file=sys.stderr)
    else:
        print(f"{col('[1m')}{loc}: {col('[1;31m')}error:{col('[m')} {msg}", file=sys.stderr)

def die_error(msg: str, loc: Optional[str] = None, status_code: int = 1) -> NoReturn:
    """Prints a message with a colored 'error: ' prefix, and exit with the given status code afterwards."""
    print_error(msg, loc=loc)
    sys.exit(status_code)

def expand_path(path: str) -> str:
    """Expands a leading `~` and returns the normalized absolute path."""
    return os.path.abspath(os.path.expanduser(path))

def as_key(path: str) -> str:
    """
    Derives the lookup key of a document or repository from its path.
    The key is the last path component with a trailing `.yaml` removed.

    Example:

        >>> as_key("/srv/repos/infra/master.yaml")
        'master'
        >>> as_key("/srv/repos/infra/cluster6/")
        'cluster6'

    Parameters
    ----------
    path
        The path of the document or repository directory.

    Returns
    -------
    str
        The key, used verbatim (case sensitive) in lookups.
    """
    name = os.path.basename(os.path.normpath(path))
    return name.removesuffix(DOCUMENT_EXTENSION)
