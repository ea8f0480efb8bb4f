"""Grouping of paths that share an identical owner set.

Paths are traversed in sorted order.  The first remaining path's owner
set is the pivot; every remaining path with the same set (compared as a
set, ignoring order) joins its group.  For example, with paths ``A``,
``B`` and ``C`` where ``A`` and ``C`` share owners::

    A
    C
      Package Bar
      Package Baz
    B
      Package Foo

Set equality is decided with a canonical key, the sorted package ids,
so a single pass over the index produces the same groups in the same
order as repeated pivot scans would.

Within a group, packages are ordered strong before weak and then by name.
The listing policy decides whether weak owners are shown once a strong
owner has been emitted.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import Enum

from pathowners.errors import ConfigurationError
from pathowners.models import Dominion
from pathowners.resolver import ResolvedPackage


class ListingPolicy(Enum):
    """How packages within a group are filtered for display.

    STRONG_PRIORITY
        Show strong owners; show weak owners only when a group has no
        strong owner at all.
    FULL
        Show every owner, labelled with its dominion.
    """

    STRONG_PRIORITY = "strong-priority"
    FULL = "full"

    @classmethod
    def parse(cls, value: "str | ListingPolicy") -> "ListingPolicy":
        if isinstance(value, ListingPolicy):
            return value
        for member in cls:
            if member.value == value:
                return member
        choices = ", ".join(m.value for m in cls)
        raise ConfigurationError(
            f"Unknown listing policy {value!r}. Available: {choices}"
        )


@dataclass(frozen=True)
class DisplayGroup:
    """A maximal set of paths resolving to the same packages.

    Parameters
    ----------
    paths:
        Member paths, in sorted order.
    packages:
        The shared packages, ordered by dominion then name.
    """

    paths: tuple[str, ...]
    packages: tuple[ResolvedPackage, ...]

    @property
    def is_unowned(self) -> bool:
        return not self.packages

    def visible_packages(
        self, policy: ListingPolicy = ListingPolicy.STRONG_PRIORITY
    ) -> list[ResolvedPackage]:
        """Return the packages shown for this group under ``policy``."""
        return filter_by_policy(self.packages, policy)


def group_key(packages: Iterable[ResolvedPackage]) -> str:
    """Return a key equal for two package collections iff they are equal sets."""
    return "\x00".join(sorted({p.key for p in packages}))


def sort_by_dominion(packages: Iterable[ResolvedPackage]) -> list[ResolvedPackage]:
    """Order packages strong first, then weak, each class by name."""
    return sorted(packages, key=lambda p: (p.dominion.rank, p.name.casefold(), p.name))


def filter_by_policy(
    packages: Sequence[ResolvedPackage], policy: ListingPolicy
) -> list[ResolvedPackage]:
    """Apply ``policy`` to packages already ordered by ``sort_by_dominion``.

    Under ``STRONG_PRIORITY`` the listing stops at the first weak package
    that follows a non-weak one, so weak owners only appear when there is
    no strong owner.
    """
    if policy is ListingPolicy.FULL:
        return list(packages)

    shown: list[ResolvedPackage] = []
    previously_weak = True
    for package in packages:
        weak = package.dominion is Dominion.WEAK
        if weak and not previously_weak:
            break
        shown.append(package)
        previously_weak = weak
    return shown


def group_paths(
    index: Mapping[str, Sequence[ResolvedPackage]],
) -> list[DisplayGroup]:
    """Partition the paths of ``index`` into display groups.

    Every path appears in exactly one group.  Groups are ordered by their
    first path; paths within a group keep the index's order.
    """
    members: dict[str, list[str]] = {}
    pivots: dict[str, Sequence[ResolvedPackage]] = {}
    for path in sorted(index):
        packages = index[path]
        key = group_key(packages)
        if key not in members:
            members[key] = []
            pivots[key] = packages
        members[key].append(path)

    return [
        DisplayGroup(
            paths=tuple(paths),
            packages=tuple(sort_by_dominion(pivots[key])),
        )
        for key, paths in members.items()
    ]


__all__ = [
    "DisplayGroup",
    "ListingPolicy",
    "filter_by_policy",
    "group_key",
    "group_paths",
    "sort_by_dominion",
]
