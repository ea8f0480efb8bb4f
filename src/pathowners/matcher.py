"""Prefix matching of candidate paths against package path rules.

A candidate lies under a prefix when it starts with the prefix as a
literal string.  There is no path-segment boundary check, so ``"foobar"``
is under ``"foo"``; see DESIGN.md for why this is kept.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence

from pathowners.models import Package, PathSpec


def contains_path(prefixes: Iterable[str], candidate: str) -> bool:
    """Return True if ``candidate`` starts with any of ``prefixes``."""
    return any(candidate.startswith(prefix) for prefix in prefixes)


def matches(
    included: Sequence[str], excluded: Sequence[str], candidate: str
) -> bool:
    """Return True if ``candidate`` is claimed and not disclaimed.

    An empty ``included`` list never matches.
    """
    return contains_path(included, candidate) and not contains_path(
        excluded, candidate
    )


def partition_specs(
    specs: Iterable[PathSpec], repository_phid: str
) -> tuple[list[str], list[str]]:
    """Split ``specs`` into trimmed included and excluded prefix lists.

    Specs scoped to any other repository are dropped.
    """
    included: list[str] = []
    excluded: list[str] = []
    for spec in specs:
        if spec.repository_phid != repository_phid:
            continue
        if spec.excluded:
            excluded.append(spec.prefix)
        else:
            included.append(spec.prefix)
    return included, excluded


def match_package_paths(
    package: Package, candidates: Iterable[str], repository_phid: str
) -> list[str]:
    """Return the candidates owned by ``package``, in input order."""
    included, excluded = partition_specs(package.path_specs, repository_phid)
    if not included:
        return []
    return [c for c in candidates if matches(included, excluded, c)]


__all__ = [
    "contains_path",
    "matches",
    "partition_specs",
    "match_package_paths",
]
