"""Rendering of ownership indexes.

``render`` dispatches on the output mode: ``"text"`` returns a grouped
``rich.text.Text`` report, ``"json"``/``"structured"`` a JSON string and
``"yaml"`` a YAML string.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum

from rich.text import Text

from pathowners.errors import ConfigurationError
from pathowners.render.grouping import (
    DisplayGroup,
    ListingPolicy,
    filter_by_policy,
    group_key,
    group_paths,
    sort_by_dominion,
)
from pathowners.render.links import Linker, PlainLinker, TerminalLinker, linker_for
from pathowners.render.structured import to_json, to_mapping, to_yaml
from pathowners.render.text import TextRenderer, render_text
from pathowners.resolver import ResolvedPackage


class OutputFormat(Enum):
    """Supported output modes."""

    TEXT = "text"
    JSON = "json"
    YAML = "yaml"

    @classmethod
    def parse(cls, value: "str | OutputFormat") -> "OutputFormat":
        """Return the format named ``value``; ``structured`` means JSON.

        Raises
        ------
        ConfigurationError
            If ``value`` names no supported format.
        """
        if isinstance(value, OutputFormat):
            return value
        normalized = value.strip().lower()
        if normalized == "structured":
            return cls.JSON
        for member in cls:
            if member.value == normalized:
                return member
        raise ConfigurationError(
            f"Unknown output format {value!r}. "
            "Available: text, json, structured, yaml"
        )


def render(
    index: Mapping[str, Sequence[ResolvedPackage]],
    mode: "str | OutputFormat" = OutputFormat.TEXT,
    policy: "str | ListingPolicy" = ListingPolicy.STRONG_PRIORITY,
    linker: Linker | None = None,
    show_channels: bool = True,
) -> "Text | str":
    """Render ``index`` in ``mode``.

    ``policy``, ``linker`` and ``show_channels`` only affect text output.
    """
    output_format = OutputFormat.parse(mode)
    listing = ListingPolicy.parse(policy)
    if output_format is OutputFormat.TEXT:
        return render_text(index, listing, linker, show_channels)
    if output_format is OutputFormat.YAML:
        return to_yaml(index)
    return to_json(index)


__all__ = [
    "DisplayGroup",
    "Linker",
    "ListingPolicy",
    "OutputFormat",
    "PlainLinker",
    "TerminalLinker",
    "TextRenderer",
    "filter_by_policy",
    "group_key",
    "group_paths",
    "linker_for",
    "render",
    "render_text",
    "sort_by_dominion",
    "to_json",
    "to_mapping",
    "to_yaml",
]
