"""
Provides the repository tree and its concurrent loading.

A repository is a directory of documents. Every subdirectory of a repository
is a repository of its own (a subrepo), so the directory hierarchy maps
directly onto a tree of `Repo` nodes.
"""

from __future__ import annotations

import os
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Optional

from hostlore import logger
from hostlore.document import DecodeError, load_document
from hostlore.git import git
from hostlore.types import HostInfo
from hostlore.utils import DOCUMENT_EXTENSION, REPO_MARKER, FatalError, as_key, expand_path

@dataclass
class Repo:
    """
    A node in the repository tree. A node is only handed out after all of
    its documents and subrepos have been loaded, and is not modified afterwards.
    """

    key: str
    """The identity of this repository, derived from its directory name."""

    root: str
    """The directory this repository has been loaded from."""

    info: dict[str, HostInfo] = field(default_factory=dict)
    """The selectable documents of this repository by id."""

    control: dict[str, HostInfo] = field(default_factory=dict)
    """Documents whose name starts with an underscore (like `_repo.yaml`). These are never offered for selection."""

    subrepos: dict[str, Repo] = field(default_factory=dict)
    """The nested repositories by key."""

    def __str__(self) -> str:
        return f"R: {self.key} ({len(self.info)} articles)"

    def keys(self) -> list[str]:
        """Returns a sorted list of the document ids in this repository."""
        return sorted(self.info)

    def subrepo_keys(self) -> list[str]:
        """Returns a sorted list of the subrepo keys in this repository."""
        return sorted(self.subrepos)

def _is_control(key: str) -> bool:
    return key.startswith("_")

def _load_info(path: str) -> Optional[HostInfo]:
    try:
        return load_document(path)
    except DecodeError as e:
        # str(e) already starts with the location.
        logger.document_failed(path, e.args[0])
    except OSError as e:
        logger.document_failed(path, e.strerror or str(e))
    return None

def _scan(root: str) -> tuple[list[str], list[str]]:
    """
    Classifies the entries of the given directory.

    Returns
    -------
    tuple[list[str], list[str]]
        The paths of all documents and of all subrepos, sorted by name.
    """
    documents: list[str] = []
    subrepos: list[str] = []

    try:
        with os.scandir(root) as it:
            entries = sorted(it, key=lambda e: e.name)
    except OSError as e:
        logger.walk_error(root, e)
        return documents, subrepos

    for entry in entries:
        # Dotfile, like .git or whatever. Skip.
        if entry.name.startswith("."):
            continue

        try:
            is_dir = entry.is_dir(follow_symlinks=False)
        except OSError as e:
            logger.walk_error(entry.path, e)
            continue

        if is_dir:
            subrepos.append(entry.path)
        elif entry.name.endswith(DOCUMENT_EXTENSION):
            documents.append(entry.path)

    return documents, subrepos

def build_repo(path: str) -> Repo:
    """
    Loads the repository rooted at the given directory.

    Every document and every subrepo is loaded by its own concurrent task.
    Tasks only return their results, which are merged into the new node after
    all tasks have finished. Documents that fail to load are reported and
    left out, as are directories that cannot be read.

    Parameters
    ----------
    path
        The root directory of the repository.

    Returns
    -------
    Repo
        The fully loaded repository.
    """
    root = expand_path(path)
    repo = Repo(key=as_key(root), root=root)
    documents, subrepos = _scan(root)
    logger.debug(f"loading repo {root} ({len(documents)} documents, {len(subrepos)} subrepos)")

    n_tasks = len(documents) + len(subrepos)
    if n_tasks == 0:
        return repo

    info_futures: list[Future[Optional[HostInfo]]] = []
    subrepo_futures: list[Future[Repo]] = []
    with ThreadPoolExecutor(max_workers=n_tasks, thread_name_prefix=f"hostlore-{repo.key}") as executor:
        for document in documents:
            info_futures.append(executor.submit(_load_info, document))
        for subrepo in subrepos:
            subrepo_futures.append(executor.submit(build_repo, subrepo))
    # Leaving the executor waits for all tasks, so every result is available here.

    for info_future in info_futures:
        info = info_future.result()
        if info is None:
            continue
        if _is_control(info.id):
            repo.control[info.id] = info
        else:
            repo.info[info.id] = info

    for subrepo_future in subrepo_futures:
        sub = subrepo_future.result()
        repo.subrepos[sub.key] = sub

    return repo

def load_repos(path: str) -> dict[str, Repo]:
    """
    Loads every repository in the given directory concurrently.
    Only subdirectories containing a `_repo.yaml` marker are repositories,
    any other entry is skipped.

    Parameters
    ----------
    path
        The directory containing all repositories.

    Returns
    -------
    dict[str, Repo]
        The loaded repositories by key.

    Raises
    ------
    FatalError
        The directory cannot be read.
    """
    parent = expand_path(path)
    try:
        with os.scandir(parent) as it:
            names = sorted(e.name for e in it)
    except OSError as e:
        raise FatalError(f"Cannot read repository directory: {e.strerror}", loc=parent) from e

    roots = []
    for name in names:
        root = os.path.join(parent, name)
        if not os.path.isfile(os.path.join(root, REPO_MARKER)):
            logger.skip_repo(name)
            continue
        roots.append(root)

    if len(roots) == 0:
        return {}

    with ThreadPoolExecutor(max_workers=len(roots), thread_name_prefix="hostlore") as executor:
        futures = [executor.submit(build_repo, root) for root in roots]

    repos: dict[str, Repo] = {}
    for future in futures:
        repo = future.result()
        repos[repo.key] = repo
    return repos

def update_repos(repos: dict[str, Repo], remote: str = "origin", branch: str = "master") -> list[str]:
    """
    Pulls the latest changes into every given repository, one after another.

    Parameters
    ----------
    repos
        The repositories to update.
    remote
        The remote to pull from.
    branch
        The branch to pull.

    Returns
    -------
    list[str]
        The keys of all repositories that failed to update.
    """
    failed = []
    for key in sorted(repos):
        logger.update_repo(key)
        status = git(repos[key].root, "pull", remote, branch)
        if status != 0:
            logger.update_failed(key, status)
            failed.append(key)
    return failed

def add_repo(root: str, name: str, url: str) -> str:
    """
    Clones a new repository into the repository directory.

    Parameters
    ----------
    root
        The directory containing all repositories.
    name
        The directory name (and thereby key) of the new repository.
    url
        The url to clone from.

    Returns
    -------
    str
        The directory of the new repository.

    Raises
    ------
    FatalError
        The repository could not be cloned.
    """
    directory = os.path.join(expand_path(root), name)
    status = git(None, "clone", url, directory)
    if status != 0:
        raise FatalError(f"git clone of '{url}' failed with exit status {status}", loc=directory)

    logger.repo_added(name, directory)
    return directory
