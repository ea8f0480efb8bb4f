"""Structured output: the path-to-packages mapping as plain data.

No grouping or dominion filtering is applied.  Keys are in sorted path
order and each package is its full field record.
"""
from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

import yaml

from pathowners.resolver import ResolvedPackage


def to_mapping(
    index: Mapping[str, Sequence[ResolvedPackage]],
) -> dict[str, list[dict[str, Any]]]:
    """Return ``{path: [field record, ...]}`` with keys sorted."""
    return {
        path: [package.to_record() for package in index[path]]
        for path in sorted(index)
    }


def to_json(
    index: Mapping[str, Sequence[ResolvedPackage]], indent: int | None = None
) -> str:
    """Serialize the mapping as JSON, preserving sorted key order."""
    return json.dumps(to_mapping(index), indent=indent, ensure_ascii=False)


def to_yaml(index: Mapping[str, Sequence[ResolvedPackage]]) -> str:
    """Serialize the mapping as YAML, preserving sorted key order."""
    return yaml.safe_dump(
        to_mapping(index),
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


__all__ = ["to_mapping", "to_json", "to_yaml"]
