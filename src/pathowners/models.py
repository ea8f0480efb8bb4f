"""Data model for ownership packages.

Remote package records arrive as loosely-typed nested dicts.  They are
converted once, at the boundary, into frozen dataclasses: the fields the
resolver and renderers actually read (``id``, ``name``, ``dominion``,
path specs) are typed and validated, and the complete remote field map is
kept alongside for structured output.

A malformed record raises ``DataContractError`` naming the record; it is
never skipped.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pathowners.errors import DataContractError


class Dominion(Enum):
    """Ownership strength of a package."""

    STRONG = "strong"
    WEAK = "weak"

    @property
    def rank(self) -> int:
        """Sort rank: strong packages sort before weak ones."""
        return 0 if self is Dominion.STRONG else 1

    @property
    def label(self) -> str:
        """Display label used by the full-listing text variant."""
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: object, record_id: object = None) -> "Dominion":
        """Return the member for ``value`` or raise ``DataContractError``."""
        for member in cls:
            if member.value == value:
                return member
        raise DataContractError(
            f"dominion must be one of 'strong' or 'weak', got {value!r}",
            record_id=record_id,
        )


@dataclass(frozen=True, slots=True)
class PathSpec:
    """One include/exclude rule attached to a package.

    Parameters
    ----------
    repository_phid:
        The repository the rule is scoped to.
    path:
        Path prefix as stored on the server (not yet trimmed).
    excluded:
        ``True`` when the rule disclaims ``path`` instead of claiming it.
    """

    repository_phid: str
    path: str
    excluded: bool = False

    @property
    def prefix(self) -> str:
        """The path with leading and trailing ``/`` removed."""
        return self.path.strip("/")

    @classmethod
    def from_record(cls, record: object, record_id: object = None) -> "PathSpec":
        if not isinstance(record, Mapping):
            raise DataContractError(
                f"path attachment must be an object, got {type(record).__name__}",
                record_id=record_id,
            )
        repository = record.get("repositoryPHID")
        path = record.get("path")
        if not isinstance(repository, str) or not isinstance(path, str):
            raise DataContractError(
                "path attachment requires string 'repositoryPHID' and 'path'",
                record_id=record_id,
            )
        return cls(
            repository_phid=repository,
            path=path,
            excluded=bool(record.get("excluded")),
        )


@dataclass(frozen=True)
class Package:
    """An ownership package as returned by ``owners.search``.

    Parameters
    ----------
    id:
        Numeric package id, used in detail URLs and as the identity for
        grouping.
    name:
        Display name.
    dominion:
        Ownership strength.
    path_specs:
        All path rules, in any repository.
    fields:
        The complete remote ``fields`` map, including ``name`` and
        ``dominion``; variable fields (such as a channel field) are read
        from here.
    phid:
        The package PHID, when the server supplied one.
    """

    id: int | str
    name: str
    dominion: Dominion
    path_specs: tuple[PathSpec, ...] = ()
    fields: Mapping[str, Any] = field(default_factory=dict)
    phid: str | None = None

    @property
    def key(self) -> str:
        """Canonical identity string used to build grouping keys."""
        return str(self.id)

    def specs_for(self, repository_phid: str) -> list[PathSpec]:
        """Return the path specs scoped to ``repository_phid``."""
        return [s for s in self.path_specs if s.repository_phid == repository_phid]

    @classmethod
    def from_record(cls, record: object) -> "Package":
        """Build a ``Package`` from one ``owners.search`` result entry.

        Raises
        ------
        DataContractError
            If ``id``, ``fields.name``, ``fields.dominion.value`` or the
            ``paths`` attachment is missing or has the wrong type.
        """
        if not isinstance(record, Mapping):
            raise DataContractError(
                f"expected an object, got {type(record).__name__}"
            )
        record_id = record.get("id", record.get("phid"))
        package_id = record.get("id")
        if not isinstance(package_id, (int, str)) or isinstance(package_id, bool):
            raise DataContractError("missing 'id'", record_id=record_id)

        fields = record.get("fields")
        if not isinstance(fields, Mapping):
            raise DataContractError("missing 'fields'", record_id=record_id)
        name = fields.get("name")
        if not isinstance(name, str):
            raise DataContractError("missing 'fields.name'", record_id=record_id)
        dominion = fields.get("dominion")
        if not isinstance(dominion, Mapping) or "value" not in dominion:
            raise DataContractError(
                "missing 'fields.dominion.value'", record_id=record_id
            )

        try:
            raw_specs = record["attachments"]["paths"]["paths"]
        except (KeyError, TypeError):
            raise DataContractError(
                "missing 'attachments.paths.paths'", record_id=record_id
            ) from None
        if not isinstance(raw_specs, Sequence) or isinstance(raw_specs, str):
            raise DataContractError(
                "'attachments.paths.paths' must be a list", record_id=record_id
            )

        phid = record.get("phid")
        return cls(
            id=package_id,
            name=name,
            dominion=Dominion.parse(dominion["value"], record_id=record_id),
            path_specs=tuple(
                PathSpec.from_record(spec, record_id=record_id) for spec in raw_specs
            ),
            fields=dict(fields),
            phid=phid if isinstance(phid, str) else None,
        )


def packages_from_records(records: Sequence[object]) -> list[Package]:
    """Convert a list of remote records, preserving their order."""
    return [Package.from_record(record) for record in records]


__all__ = [
    "Dominion",
    "PathSpec",
    "Package",
    "packages_from_records",
]
