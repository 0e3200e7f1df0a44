"""
Provides a class that determines how a session on a host is opened.
"""

from __future__ import annotations
from typing import Any, Optional
from dataclasses import dataclass

@dataclass
class ResolvedSessionSettings:
    """
    This class stores a resolved version of the SessionSettings object,
    it only has more strict types for typechecking and is otherwise
    identical to the original object.
    """
    program: str
    options: list[str]
    destination: str

@dataclass
class SessionSettings:
    """
    This class stores the values that determine how a session is opened
    on a host. `destination` and each entry of `options` are jinja2 templates,
    which are rendered with the selected `host` before the session is started.
    """
    program: Optional[str] = None
    options: Optional[list[str]] = None
    destination: Optional[str] = None

    def overlay(self, settings: SessionSettings) -> SessionSettings:
        """
        Overlays settings on top of this. Values will only be overwritten
        if the new value is not None, effectively overlaying the given settings
        on top of the current settings.

        Parameters
        ----------
        settings
            The setting values to overwrite

        Returns
        -------
        The resulting overlayed session settings
        """
        return SessionSettings(
             program     = self.program     if settings.program     is None else settings.program,
             options     = self.options     if settings.options     is None else list(settings.options),
             destination = self.destination if settings.destination is None else settings.destination)

    def resolve(self) -> ResolvedSessionSettings:
        """
        Returns the strictly typed version of these settings.

        Raises
        ------
        ValueError
            A setting is still unset.
        """
        if self.program is None or self.options is None or self.destination is None:
            raise ValueError(f"Cannot resolve incomplete session settings {self!r}")
        return ResolvedSessionSettings(program=self.program, options=list(self.options), destination=self.destination)

    def __repr__(self) -> str:
        members = [None if self.program     is None else ("program", self.program),
                   None if self.options     is None else ("options", self.options),
                   None if self.destination is None else ("destination", self.destination)]
        existing_members: list[tuple[str, Any]] = [x for x in members if x is not None]
        member_str = ','.join([f"{n}={v}" for (n,v) in existing_members])
        return f"SessionSettings{{{member_str}}}"
