"""Map candidate paths to the packages that own them.

Usage
-----
::

    from pathowners.resolver import resolve

    index = resolve(["lib/x.go"], packages, "PHID-REPO-abc")
    for path, owners in index.items():
        print(path, [p.name for p in owners])

The index keeps every candidate as a key, even when nothing owns it, and
is sorted by path.  Within a path the packages stay in the order the
query returned them.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from pathowners.matcher import match_package_paths
from pathowners.models import Dominion, Package

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LinkSettings:
    """Configuration used to decorate packages with links.

    Parameters
    ----------
    base_uri:
        Base URL for per-package detail pages.
    slack_uri:
        Base URL of the messaging service, used to link channels.
    slack_field:
        Name of the package field that holds a channel name.
    """

    base_uri: str | None = None
    slack_uri: str | None = None
    slack_field: str | None = None


@dataclass(frozen=True, slots=True)
class Channel:
    """A communication channel reference attached to a package."""

    name: str | None
    uri: str | None = None

    def to_dict(self, include_uri: bool) -> dict[str, str | None]:
        data: dict[str, str | None] = {"channel_name": self.name}
        if include_uri:
            data["channel_uri"] = self.uri
        return data


@dataclass(frozen=True)
class ResolvedPackage:
    """A package together with the links computed for this run."""

    package: Package
    url: str | None = None
    channel: Channel | None = None
    channel_uri_configured: bool = False

    @property
    def key(self) -> str:
        return self.package.key

    @property
    def name(self) -> str:
        return self.package.name

    @property
    def dominion(self) -> Dominion:
        return self.package.dominion

    def to_record(self) -> dict[str, Any]:
        """Return the package's field record for structured output."""
        record = dict(self.package.fields)
        if self.url is not None:
            record["url"] = self.url
        if self.channel is not None:
            record["slack"] = self.channel.to_dict(self.channel_uri_configured)
        return record


def _join_uri(base: str, path: str) -> str:
    return base.rstrip("/") + path


def package_url(base_uri: str | None, package: Package) -> str | None:
    """Return the detail page URL for ``package``, or None."""
    if not base_uri:
        return None
    return _join_uri(base_uri, f"/owners/package/{package.id}/")


def package_channel(settings: LinkSettings, package: Package) -> Channel | None:
    """Return the channel reference for ``package``.

    Returns None when no channel field is configured.  A configured field
    that is missing or empty yields a ``Channel`` whose name is None; a
    value that trims to nothing (``"#"``) yields an empty name.
    """
    if not settings.slack_field:
        return None
    raw = package.fields.get(settings.slack_field)
    if not raw:
        return Channel(name=None)
    name = str(raw).strip().lstrip("#")
    if not name:
        return Channel(name="")
    uri = None
    if settings.slack_uri:
        uri = _join_uri(settings.slack_uri, f"/channels/{name}/")
    return Channel(name=name, uri=uri)


def decorate(package: Package, settings: LinkSettings) -> ResolvedPackage:
    """Attach detail and channel links to ``package``."""
    return ResolvedPackage(
        package=package,
        url=package_url(settings.base_uri, package),
        channel=package_channel(settings, package),
        channel_uri_configured=bool(settings.slack_field and settings.slack_uri),
    )


def normalize_path(path: str) -> str:
    """Strip leading and trailing ``/`` from a candidate path."""
    return path.strip("/")


class OwnershipIndex(Mapping[str, tuple[ResolvedPackage, ...]]):
    """Immutable mapping from candidate path to its owning packages.

    Keys iterate in lexicographic order.
    """

    def __init__(self, entries: Mapping[str, Sequence[ResolvedPackage]]) -> None:
        self._entries: dict[str, tuple[ResolvedPackage, ...]] = {
            path: tuple(entries[path]) for path in sorted(entries)
        }

    def __getitem__(self, path: str) -> tuple[ResolvedPackage, ...]:
        return self._entries[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, OwnershipIndex):
            return list(self._entries.items()) == list(other._entries.items())
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"OwnershipIndex({len(self._entries)} path(s))"

    def owned_paths(self) -> list[str]:
        """Return paths that have at least one owner."""
        return [path for path, owners in self._entries.items() if owners]

    def unowned_paths(self) -> list[str]:
        """Return paths no package owns."""
        return [path for path, owners in self._entries.items() if not owners]


def resolve(
    candidate_paths: Iterable[str],
    packages: Iterable[Package],
    repository_phid: str,
    settings: LinkSettings | None = None,
) -> OwnershipIndex:
    """Compute which packages own each candidate path.

    Parameters
    ----------
    candidate_paths:
        Paths to evaluate; they are normalized and de-duplicated.
    packages:
        Packages in the order the query returned them.
    repository_phid:
        Only path specs scoped to this repository are considered.
    settings:
        Link configuration used to decorate matched packages.

    Returns
    -------
    OwnershipIndex
        Every candidate path, sorted, mapped to its owners in query order.
    """
    settings = settings or LinkSettings()
    candidates = list(dict.fromkeys(normalize_path(p) for p in candidate_paths))
    bypath: dict[str, list[ResolvedPackage]] = {path: [] for path in candidates}

    for package in packages:
        matched = match_package_paths(package, candidates, repository_phid)
        if not matched:
            continue
        resolved = decorate(package, settings)
        for path in matched:
            bypath[path].append(resolved)
        logger.debug(
            "Package %r (%s) owns %d of %d path(s)",
            package.name,
            package.dominion.value,
            len(matched),
            len(candidates),
        )

    return OwnershipIndex(bypath)


__all__ = [
    "Channel",
    "LinkSettings",
    "OwnershipIndex",
    "ResolvedPackage",
    "decorate",
    "normalize_path",
    "package_channel",
    "package_url",
    "resolve",
]
