"""Grouped, line-oriented text report.

Each display group is printed as its bold path headers, one per line,
followed by indented package lines::

    lib/x_test.go
    lib/y.go
      Core Libraries (Slack: #core-libs)

Under the full-listing policy each package line is prefixed with its
dominion label.  Groups with no owners print a dim ``(no owners)`` line.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence

from rich.text import Text

from pathowners.render.grouping import DisplayGroup, ListingPolicy, group_paths
from pathowners.render.links import Linker, PlainLinker
from pathowners.resolver import ResolvedPackage

INDENT = "  "
NO_OWNERS = "(no owners)"


class TextRenderer:
    """Render an ownership index as grouped text.

    Parameters
    ----------
    policy:
        Which packages to show per group and whether to label dominion.
    linker:
        Hyperlink strategy; defaults to plain text.
    show_channels:
        When ``False``, channel suffixes are omitted.
    """

    def __init__(
        self,
        policy: ListingPolicy = ListingPolicy.STRONG_PRIORITY,
        linker: Linker | None = None,
        show_channels: bool = True,
    ) -> None:
        self._policy = policy
        self._linker = linker or PlainLinker()
        self._show_channels = show_channels

    def render(self, index: Mapping[str, Sequence[ResolvedPackage]]) -> Text:
        """Return the report for ``index``; empty when there are no paths."""
        lines: list[Text] = []
        for group in group_paths(index):
            lines.extend(self.render_group(group))
        return Text("\n").join(lines)

    def render_group(self, group: DisplayGroup) -> list[Text]:
        lines = [Text(path, style="bold") for path in group.paths]
        if group.is_unowned:
            lines.append(Text(INDENT + NO_OWNERS, style="dim"))
            return lines
        for package in group.visible_packages(self._policy):
            lines.append(self.render_package(package))
        return lines

    def render_package(self, package: ResolvedPackage) -> Text:
        line = Text(INDENT)
        if self._policy is ListingPolicy.FULL:
            line.append(f"{package.dominion.label}: ")
        line.append_text(self._linker.link(package.name, package.url))
        channel = package.channel
        if self._show_channels and channel is not None and channel.name:
            line.append(" (Slack: ")
            line.append_text(self._linker.link(f"#{channel.name}", channel.uri))
            line.append(")")
        return line


def render_text(
    index: Mapping[str, Sequence[ResolvedPackage]],
    policy: ListingPolicy = ListingPolicy.STRONG_PRIORITY,
    linker: Linker | None = None,
    show_channels: bool = True,
) -> Text:
    """Convenience wrapper around ``TextRenderer``."""
    return TextRenderer(policy, linker, show_channels).render(index)


__all__ = ["TextRenderer", "render_text", "INDENT", "NO_OWNERS"]
