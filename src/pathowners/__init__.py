"""path-owners: report which ownership packages apply to a set of paths.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import pathowners

    packages = [pathowners.Package.from_record(r) for r in records]
    index = pathowners.resolve(["lib/x.go", "lib/y.go"], packages, "PHID-REPO-abc")

    # Grouped text report (a rich Text)
    report = pathowners.render(index, "text")

    # Machine-readable mapping
    payload = pathowners.render(index, "json")

    pathowners.__version__
    '0.1.0'
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pathowners.errors import (
    ConfigurationError,
    DataContractError,
    OwnersError,
    TransportError,
    WorkingCopyError,
)
from pathowners.models import Dominion, Package, PathSpec

# Load the ``pathowners.render`` subpackage before the ``render`` function
# below is defined, so the later submodule import cannot shadow it.
import pathowners.render as _render_subpackage  # noqa: E402,F401

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pathowners.resolver import LinkSettings, OwnershipIndex


def resolve(
    candidate_paths: "Iterable[str]",
    packages: "Iterable[Package]",
    repository_phid: str,
    settings: "LinkSettings | None" = None,
) -> "OwnershipIndex":
    """Map each candidate path to the packages that own it.

    Parameters
    ----------
    candidate_paths:
        Paths to evaluate.
    packages:
        Packages in query order.
    repository_phid:
        Repository whose path specs apply.
    settings:
        Optional link configuration.

    Returns
    -------
    OwnershipIndex
        Sorted mapping from every candidate path to its owners.
    """
    from pathowners.resolver import resolve as _resolve

    return _resolve(candidate_paths, packages, repository_phid, settings)


def render(index: "OwnershipIndex", mode: str = "text", **options: Any) -> Any:
    """Render an ``OwnershipIndex`` as text, JSON or YAML.

    Parameters
    ----------
    index:
        The resolved index.
    mode:
        ``"text"``, ``"json"``, ``"structured"`` or ``"yaml"``.
    **options:
        ``policy``, ``linker`` and ``show_channels`` for text output.

    Raises
    ------
    ConfigurationError
        If ``mode`` is not a supported format.
    """
    from pathowners.render import render as _render

    return _render(index, mode, **options)


__all__ = [
    "__version__",
    "ConfigurationError",
    "DataContractError",
    "Dominion",
    "OwnersError",
    "Package",
    "PathSpec",
    "TransportError",
    "WorkingCopyError",
    "render",
    "resolve",
]
