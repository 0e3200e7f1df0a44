"""
Provides the top-level logic of hostlore such as
the CLI interface and the display of repositories and documents.
"""

import argparse
import os
import shlex
import sys
import textwrap
from typing import NoReturn, Optional

from hostlore import globals as G
from hostlore.logger import col
from hostlore.repo import Repo, add_repo, load_repos, update_repos
from hostlore.resolve import DocumentListing, HostIndexError, HostSelection, RepoListing, UnknownCategoryError, resolve
from hostlore.session import open_session
from hostlore.session_settings import SessionSettings
from hostlore.types import HostInfo
from hostlore.utils import FatalError, die_error, expand_path
from hostlore.version import version

def show_repos(repos: dict[str, Repo]) -> None:
    """Prints a sorted list of available repositories."""
    for key in sorted(repos):
        print(key)

def show_repo(repo: Repo) -> None:
    """Prints the contents of a repository, beginning with a blue listing of subrepos."""
    col_blue_b = col("\033[1;34m")
    col_reset  = col("\033[m")

    for key in repo.subrepo_keys():
        print(f"{col_blue_b}{key}{col_reset}")
    for key in repo.keys():
        print(key)

def show_document(info: HostInfo) -> None:
    """Prints a pretty list of the categories of a document and their hosts."""
    col_blue_b     = col("\033[1;34m")
    col_green_b    = col("\033[1;32m")
    col_cyan_b     = col("\033[1;36m")
    col_yellow     = col("\033[33m")
    col_hiyellow_b = col("\033[1;93m")
    col_grey       = col("\033[37m")
    col_reset      = col("\033[m")

    default = info.primary_category()
    for name in info.category_names():
        category = info.types[name]
        marker = f" ({col_green_b}default{col_reset})" if name == default else ""
        print(f"{col_cyan_b}{name}{col_reset}{marker}:")
        if category.summary:
            print(textwrap.fill(category.summary, width=80, initial_indent="  ", subsequent_indent="  "))
        for index, host in enumerate(category.hosts):
            line = f"  {col_yellow}[{col_hiyellow_b}{index}{col_reset}{col_yellow}]{col_reset} {col_blue_b}{host.fqdn}{col_reset}"

            # If the host is primary, mark that clearly
            if host.primary:
                line += f" ({col_green_b}primary{col_reset})"

            # If the host has a summary, add that as well
            if host.summary:
                line += f" ({col_grey}{host.summary}{col_reset})"

            print(line)
        print()

def session_settings(args: argparse.Namespace) -> SessionSettings:
    """
    Collects the session settings from the environment and the command line.
    Command line arguments take precedence over environment variables.
    """
    env_opts = os.getenv("HOSTLORE_SSH_OPTS")
    from_env = SessionSettings(
        program=os.getenv("HOSTLORE_SSH"),
        options=None if env_opts is None else shlex.split(env_opts),
        destination=os.getenv("HOSTLORE_DESTINATION"))
    from_args = SessionSettings(
        program=args.ssh,
        options=args.ssh_options,
        destination=args.destination)
    return from_env.overlay(from_args)

def repo_dir(args: argparse.Namespace) -> str:
    """Returns the directory containing all repositories."""
    return expand_path(args.repos or os.getenv("HOSTLORE_REPOS") or G.default_repo_dir)

def select(repos: dict[str, Repo], tokens: list[str], extra: list[str], settings: SessionSettings) -> None:
    """
    Resolves the given tokens and either displays the selected
    repository or document, or opens a session on the selected host.

    Parameters
    ----------
    repos
        All loaded repositories.
    tokens
        The tokens given on the command line, starting with the repository name.
    extra
        A remote command to execute on the selected host.
    settings
        The session settings from the environment and command line.
    """
    key, rest = tokens[0], tokens[1:]
    if key not in repos:
        die_error(f"No such repository: {key} (choices are: {', '.join(sorted(repos))})")

    try:
        result = resolve(repos[key], rest)
    except UnknownCategoryError as e:
        print(f"No such type: {e.name}")
        print(f"Choices are: {', '.join(e.choices)}")
        sys.exit(1)
    except HostIndexError as e:
        die_error(str(e))

    if isinstance(result, RepoListing):
        show_repo(result.repo)
    elif isinstance(result, DocumentListing):
        show_document(result.info)
    elif isinstance(result, HostSelection):
        open_session(result.host, extra, settings)

def main_run(args: argparse.Namespace) -> None:
    """
    Main method used to load the repositories and dispatch the selected action.

    Parameters
    ----------
    args
        The parsed arguments
    """
    root = repo_dir(args)

    try:
        if args.add is not None:
            name, url = args.add
            add_repo(root, name, url)
            return

        repos = load_repos(root)

        failed = update_repos(repos) if args.update else []

        if args.list or len(args.tokens) == 0:
            show_repos(repos)
        else:
            select(repos, args.tokens, args.extra, session_settings(args))

        # A failed update is reported only after the requested action ran.
        if len(failed) > 0:
            sys.exit(1)
    except FatalError as e:
        die_error(str(e), loc=e.loc)

class ArgumentParserError(Exception):
    """Error class for argument parsing errors."""

class ThrowingArgumentParser(argparse.ArgumentParser):
    """An argument parser that throws when invalid argument types are passed."""

    def error(self, message: str) -> NoReturn:
        """Raises an exception on error."""
        raise ArgumentParserError(message)

def split_extra(argv: list[str]) -> tuple[list[str], list[str]]:
    """Splits the arguments at the first `--`. Everything after it is the remote command."""
    if "--" not in argv:
        return argv, []
    i = argv.index("--")
    return argv[:i], argv[i + 1:]

def main(argv: Optional[list[str]] = None) -> None:
    """
    The main program entry point. This will parse arguments, load all repositories
    and resolve the given tokens. Defaults to sys.argv[1:] if argv is None.
    """
    if argv is None:
        argv = sys.argv[1:]
    argv, extra = split_extra(argv)
    parser = ThrowingArgumentParser(description="Browses repositories of host inventories and opens a ssh session on a selected host.",
            epilog="Everything after `--` is executed as a command on the selected host instead of opening a shell.")

    # General options
    parser.add_argument('-V', '--version', action='version',
            version=f"%(prog)s version {version}")
    parser.add_argument('--repos', dest='repos', default=None, type=str,
            help="The directory containing all repositories. Defaults to the HOSTLORE_REPOS environment variable, or ~/.hostlore if it is unset.")

    # Repository management
    parser.add_argument('-l', '--list', dest='list', action='store_true',
            help="List all available repositories and exit.")
    parser.add_argument('--update', dest='update', action='store_true',
            help="Run `git pull origin master` in every repository before doing anything else.")
    parser.add_argument('--add', dest='add', nargs=2, default=None, metavar=('NAME', 'URL'),
            help="Clone the git repository at URL into the repository directory as NAME and exit.")

    # Session options
    parser.add_argument('--ssh', dest='ssh', default=None, type=str,
            help="The program used to open sessions. Defaults to the HOSTLORE_SSH environment variable, or 'ssh'.")
    parser.add_argument('-o', '--ssh-option', dest='ssh_options', action='append', default=None,
            help="An option passed to the ssh program, can be given multiple times. Replaces the default options '-A -t'. Defaults to HOSTLORE_SSH_OPTS if set. Options are jinja2 templates, which can refer to the selected `host`.")
    parser.add_argument('--destination', dest='destination', default=None, type=str,
            help="A jinja2 template for the ssh destination. Defaults to HOSTLORE_DESTINATION, or '{{ host.fqdn }}'.")

    # Output options
    parser.add_argument('-v', '--verbose', dest='verbose', action='count', default=0,
            help="Increase output verbosity. Can be given multiple times.")
    parser.add_argument('--debug', dest='debug', action='store_true',
            help="Enable debugging output. Forces verbosity to max value.")
    parser.add_argument('--no-color', dest='no_color', action='store_true',
            help="Disables any color output. Color can also be disabled by setting the NO_COLOR environment variable.")
    parser.add_argument('tokens', nargs='*', metavar='token',
            help="The repository, followed by subrepos, a document, a category and a host index.")
    parser.set_defaults(func=main_run)

    try:
        args: argparse.Namespace = parser.parse_args(argv)
    except ArgumentParserError as e:
        die_error(str(e))

    # Force max verbosity with --debug
    if args.debug:
        args.verbose = 99

    # Disable color when NO_COLOR is set
    if os.getenv("NO_COLOR") is not None:
        args.no_color = True

    args.extra = extra
    G.args = args
    args.func(args)
