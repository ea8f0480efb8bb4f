"""The owners pipeline: query packages, resolve ownership.

A run is linear and has no partial results: candidate paths are
collected, packages are queried, ownership is resolved, and only then is
anything rendered.  Any error aborts the run.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from pathowners.config import OwnersConfig
from pathowners.errors import ConfigurationError
from pathowners.models import packages_from_records
from pathowners.resolver import LinkSettings, OwnershipIndex, resolve

logger = logging.getLogger(__name__)


class PackageSource(Protocol):
    """The remote query boundary; ``ConduitClient`` implements it."""

    def search_packages(
        self, repository_phid: str, paths: Sequence[str]
    ) -> list[object]: ...

    def repository_phid(self, callsign: str) -> str: ...


def target_repository(config: OwnersConfig, source: PackageSource) -> str:
    """Return the configured repository PHID, looking up a callsign if needed."""
    if config.repository_phid:
        return config.repository_phid
    if config.repository_callsign:
        phid = source.repository_phid(config.repository_callsign)
        logger.debug("Callsign %r is %s", config.repository_callsign, phid)
        return phid
    raise ConfigurationError(
        "No repository configured; set 'repository.phid' or "
        "'repository.callsign' in .arcconfig"
    )


def query_ownership(
    source: PackageSource,
    repository_phid: str,
    paths: Sequence[str],
    settings: LinkSettings | None = None,
) -> OwnershipIndex:
    """Fetch packages for ``paths`` and resolve which own each path.

    With no paths, no query is issued and the index is empty.
    """
    if not paths:
        logger.debug("No candidate paths; skipping package query")
        return OwnershipIndex({})
    records = source.search_packages(repository_phid, paths)
    packages = packages_from_records(records)
    logger.debug("Resolving %d path(s) against %d package(s)", len(paths), len(packages))
    return resolve(paths, packages, repository_phid, settings)


__all__ = ["PackageSource", "query_ownership", "target_repository"]
