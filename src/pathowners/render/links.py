"""Hyperlink rendering for the text report.

Links are produced as ``rich`` styled text.  ``TerminalLinker`` attaches a
link style, which rich emits as an OSC 8 escape sequence on terminals
that support it; ``PlainLinker`` never links.  Both fall back to the bare
label when no URL is known.
"""
from __future__ import annotations

from abc import ABC, abstractmethod

from rich.style import Style
from rich.text import Text


class Linker(ABC):
    """Turns a label and an optional URL into display text."""

    @abstractmethod
    def link(self, label: str, url: str | None) -> Text:
        """Return ``label``, hyperlinked to ``url`` where supported."""


class TerminalLinker(Linker):
    """Emit terminal hyperlinks through rich link styles."""

    def link(self, label: str, url: str | None) -> Text:
        if not url:
            return Text(label)
        return Text(label, style=Style(link=url))


class PlainLinker(Linker):
    """Never link; used for non-terminal output."""

    def link(self, label: str, url: str | None) -> Text:
        return Text(label)


def linker_for(is_terminal: bool) -> Linker:
    """Return the linker appropriate for the output stream."""
    return TerminalLinker() if is_terminal else PlainLinker()


__all__ = ["Linker", "TerminalLinker", "PlainLinker", "linker_for"]
