"""
Provides logging utilities.

All diagnostic messages are written to stderr, so that listings
printed to stdout stay usable in pipes.
"""

import argparse
import os
import sys
from typing import Any, cast

from hostlore import globals as G

def _args_available() -> bool:
    return isinstance(cast(Any, G.args), argparse.Namespace)

def col(color_code: str) -> str:
    """Returns the given argument only if color is enabled."""
    if not _args_available():
        use_color = os.getenv("NO_COLOR") is None
    else:
        use_color = not G.args.no_color

    return color_code if use_color else ""

def is_debug() -> bool:
    """Returns True if debugging output was requested."""
    return _args_available() and G.args.debug

def verbosity() -> int:
    """Returns the requested verbosity level, or 0 if no arguments were parsed yet."""
    if not _args_available():
        return 0
    return cast(int, G.args.verbose)

def _emit(msg: str) -> None:
    # A single print call per message, so lines from worker threads don't interleave.
    print(msg, file=sys.stderr, flush=True)

def debug(msg: str) -> None:
    """Prints the given message only in debug mode."""
    if not is_debug():
        return

    _emit(f"   {col('[1;34m')}DEBUG{col('[m')}: {msg}")

def verbose(msg: str) -> None:
    """Prints the given informational message if the verbosity is at least 1."""
    if verbosity() < 1:
        return

    _emit(f"{col('[1;34m')}info:{col('[m')} {msg}")

def warning(msg: str) -> None:
    """Prints a message with a (possibly colored) 'warning: ' prefix."""
    _emit(f"{col('[1;33m')}warning:{col('[m')} {msg}")


def skip_repo(name: str) -> None:
    """Reports a directory that is not loaded because it lacks a repository marker."""
    verbose(f"Skipping repo {name}: no _repo.yaml found.")

def document_failed(path: str, reason: str) -> None:
    """Reports a document that could not be loaded."""
    warning(f"Failed to load info {col('[37m')}{path}{col('[m')}: {reason}")

def walk_error(path: str, error: Exception) -> None:
    """Reports a filesystem error that aborted the traversal of a directory."""
    warning(f"walk error {col('[37m')}{path}{col('[m')}: {error}")

def update_repo(key: str) -> None:
    """Prints the repository that is being updated next."""
    print(f"{col('[33;1m')}update{col('[m')} Updating {key}...", file=sys.stderr, flush=True)

def update_failed(key: str, status: int) -> None:
    """Reports a repository update that failed."""
    warning(f"Updating {key} failed with exit status {status}")

def repo_added(name: str, path: str) -> None:
    """Signals that a repository has been cloned successfully."""
    print(f"{col('[1;32m')}Repository added!{col('[m')} {name} {col('[37m')}({path}){col('[m')}", file=sys.stderr, flush=True)
