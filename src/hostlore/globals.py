"""Stores all global state."""

import argparse
from typing import cast
from jinja2 import Environment, StrictUndefined

from hostlore.session_settings import SessionSettings

args: argparse.Namespace = cast(argparse.Namespace, None)
"""
The parsed command line arguments. Stays None when hostlore is used as a library,
the logger then falls back to its environment based defaults.
"""

jinja2_env: Environment = Environment(
    autoescape=False,
    undefined=StrictUndefined)
"""The jinja2 environment used to render session templates."""

default_repo_dir: str = "~/.hostlore"
"""The directory containing all repositories, if neither --repos nor HOSTLORE_REPOS is given."""

base_session_settings = SessionSettings(
    program="ssh",
    options=["-A", "-t"],
    destination="{{ host.fqdn }}")
"""The base session settings that will be used if no other preferences are given."""
