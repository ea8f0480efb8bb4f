"""Shared test fixtures for path-owners.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

REPO = "PHID-REPO-main"


def make_record(
    package_id: int,
    name: str,
    dominion: str = "strong",
    include: tuple[str, ...] = (),
    exclude: tuple[str, ...] = (),
    repository: str = REPO,
    **fields: Any,
) -> dict[str, Any]:
    """Build an ``owners.search`` result entry."""
    paths = [
        {"repositoryPHID": repository, "path": p, "excluded": False} for p in include
    ] + [{"repositoryPHID": repository, "path": p, "excluded": True} for p in exclude]
    return {
        "id": package_id,
        "phid": f"PHID-OPKG-{package_id}",
        "fields": {"name": name, "dominion": {"value": dominion}, **fields},
        "attachments": {"paths": {"paths": paths}},
    }


@pytest.fixture()
def package_record() -> Callable[..., dict[str, Any]]:
    """Return the ``make_record`` factory."""
    return make_record


@pytest.fixture()
def repository_phid() -> str:
    return REPO


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"
