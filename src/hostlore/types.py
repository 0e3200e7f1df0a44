"""
Provides the record types that are loaded from inventory documents.
A document (`HostInfo`) groups hosts into named categories.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

@dataclass(frozen=True)
class Host:
    """A single machine."""

    fqdn: str
    """The fully qualified domain name used to connect to this host."""

    summary: str = ""
    """An optional human readable description."""

    kind: str = ""
    """A free-form classification, e.g. `disaster` or `longquery`."""

    primary: bool = False
    """Whether this host is the default target of its category."""

    def has_value(self) -> bool:
        """Returns True if this host refers to an actual machine."""
        return self.fqdn != ""

@dataclass(frozen=True)
class Category:
    """A named group of hosts sharing a summary."""

    summary: str = ""
    """A human readable description of the hosts in this category."""

    primary: bool = False
    """Whether this category is the default category of its document."""

    hosts: tuple[Host, ...] = ()
    """The hosts in declaration order. Positional selection indexes into this sequence."""

    def primary_host(self) -> Optional[Host]:
        """
        Returns the default host of this category. This is the first host
        (in declaration order) that is marked as primary, or the first
        declared host if no host is marked.

        Returns
        -------
        Optional[Host]
            The primary host, or None if the category has no hosts at all.
        """
        for host in self.hosts:
            if host.primary:
                return host

        # No primary was found, just pick the first one
        return self.hosts[0] if len(self.hosts) > 0 else None

    def get_host(self, fqdn: str) -> Optional[Host]:
        """Returns the host with the given fqdn, or None if no such host exists."""
        for host in self.hosts:
            if host.fqdn == fqdn:
                return host
        return None

    def host_at(self, index: int) -> Host:
        """
        Returns the host at the given zero-based position.

        Raises
        ------
        IndexError
            The index is negative or out of range.
        """
        if not 0 <= index < len(self.hosts):
            raise IndexError(f"host index {index} out of range (0-{len(self.hosts) - 1})" if len(self.hosts) > 0
                             else f"host index {index} out of range (category has no hosts)")
        return self.hosts[index]

@dataclass
class HostInfo:
    """
    A loaded document with information about a group of hosts.
    Corresponds to a single `*.yaml` file in a repository.
    """

    type: str = ""
    """Describes what kind of machines this document enumerates."""

    summary: str = ""
    """A human readable description of the document."""

    types: dict[str, Category] = field(default_factory=dict)
    """All categories by name."""

    id: str = ""
    """The identity of this document, derived from its filename."""

    path: str = ""
    """The file this document has been loaded from."""

    def __str__(self) -> str:
        return f"H: {self.id} ({len(self.types)})"

    def category_names(self) -> list[str]:
        """Returns the sorted list of category names."""
        return sorted(self.types)

    def primary_category(self) -> Optional[str]:
        """Returns the name of the category marked as primary, if any."""
        for name in self.category_names():
            if self.types[name].primary:
                return name
        return None

