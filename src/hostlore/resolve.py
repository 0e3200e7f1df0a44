"""
Resolves command line tokens against a loaded repository tree.

Resolution never prints or executes anything itself. It returns
what the tokens refer to, and the caller decides how to present it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

from hostlore import logger
from hostlore.repo import Repo
from hostlore.types import Host, HostInfo

class ResolveError(ValueError):
    """Base class for tokens that cannot be resolved to a selection."""

class UnknownCategoryError(ResolveError):
    """The requested category does not exist in the document."""
    def __init__(self, name: str, choices: list[str]):
        super().__init__(f"No such type: {name}")
        self.name = name
        self.choices = choices

class HostIndexError(ResolveError):
    """The requested host index is not a valid position in the category."""

@dataclass
class RepoListing:
    """The tokens ended at a repository (or stopped matching)."""
    repo: Repo

@dataclass
class DocumentListing:
    """The tokens ended at a document without selecting a category."""
    info: HostInfo

@dataclass
class HostSelection:
    """The tokens selected a concrete host."""
    info: HostInfo
    category: str
    host: Host

Resolution = Union[RepoListing, DocumentListing, HostSelection]

def resolve(repo: Repo, tokens: Sequence[str]) -> Resolution:
    """
    Descends the repository tree along the given tokens.

    Each token is first looked up as a document of the current repository,
    which hands all remaining tokens over to `resolve_document`. Otherwise
    a matching subrepo becomes the current repository. The first token that
    matches neither stops the descent.

    Parameters
    ----------
    repo
        The repository to start at.
    tokens
        The tokens following the repository name.

    Returns
    -------
    Resolution
        A listing of the repository where descent stopped, or whatever
        `resolve_document` returns for the reached document.

    Raises
    ------
    ResolveError
        A document was reached, but the remaining tokens are invalid.
    """
    current = repo
    for i, token in enumerate(tokens):
        if token in current.info:
            return resolve_document(current.info[token], tokens[i + 1:])

        if token not in current.subrepos:
            logger.debug(f"'{token}' matches nothing in repo {current.key}, stopping")
            break
        current = current.subrepos[token]

    return RepoListing(current)

def resolve_document(info: HostInfo, tokens: Sequence[str]) -> Union[DocumentListing, HostSelection]:
    """
    Selects a host from the given document.

    - No token lists the document.
    - One token selects the primary host of the named category.
    - Two tokens select the host at the given index of the named category,
      or the host with the given fqdn if the second token is no index.

    Any further tokens are ignored.

    Raises
    ------
    UnknownCategoryError
        The category does not exist. Carries the sorted valid names.
    HostIndexError
        The second token is neither an index within range nor the fqdn
        of a host in the category, or the category has no hosts.
    """
    if len(tokens) == 0:
        return DocumentListing(info)
    if len(tokens) > 2:
        logger.debug(f"ignoring extra tokens {list(tokens[2:])}")

    name = tokens[0]
    if name not in info.types:
        raise UnknownCategoryError(name, info.category_names())
    category = info.types[name]

    if len(tokens) == 1:
        host = category.primary_host()
        if host is None:
            raise HostIndexError(f"Category '{name}' has no hosts")
        return HostSelection(info, name, host)

    selector = tokens[1]
    # Only plain ascii digits are an index, int() would also accept " 1", "1_0" or "１".
    if not (selector.isascii() and selector.isdigit()):
        host_by_fqdn = category.get_host(selector)
        if host_by_fqdn is None:
            raise HostIndexError(f"Non-integer argument: {selector} (no host with this fqdn in '{name}' either)")
        return HostSelection(info, name, host_by_fqdn)

    index = int(selector)
    try:
        host = category.host_at(index)
    except IndexError as e:
        raise HostIndexError(f"Invalid host for '{name}': {e}") from e
    return HostSelection(info, name, host)
