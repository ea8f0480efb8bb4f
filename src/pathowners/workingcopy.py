"""Discovery of candidate paths from a git or Mercurial working copy.

Without explicit paths, the candidates are the uncommitted changes plus
untracked files.  Explicit paths are made relative to the working-copy
root.  Either way the result is ``/``-separated, trimmed of leading and
trailing ``/`` and free of duplicates.
"""
from __future__ import annotations

import logging
import os
import posixpath
import subprocess
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pathowners.errors import WorkingCopyError

logger = logging.getLogger(__name__)


class Vcs(Enum):
    GIT = "git"
    HG = "hg"


@dataclass(frozen=True)
class WorkingCopy:
    """A detected working copy.

    Parameters
    ----------
    root:
        Absolute path of the working-copy root.
    vcs:
        The version-control system managing it.
    """

    root: Path
    vcs: Vcs


def _run(args: Sequence[str], cwd: Path) -> str:
    """Run a VCS command and return its stdout."""
    logger.debug("Running %s in %s", " ".join(args), cwd)
    try:
        completed = subprocess.run(
            list(args),
            cwd=cwd,
            check=True,
            capture_output=True,
            encoding="utf-8",
            errors="surrogateescape",
        )
    except FileNotFoundError as exc:
        raise WorkingCopyError(f"{args[0]} is not installed") from exc
    except subprocess.CalledProcessError as exc:
        detail = (exc.stderr or "").strip() or f"exit status {exc.returncode}"
        raise WorkingCopyError(f"{' '.join(args)} failed: {detail}") from exc
    return completed.stdout


def _probe(args: Sequence[str], cwd: Path) -> str | None:
    try:
        return _run(args, cwd).strip() or None
    except WorkingCopyError:
        return None


def detect_working_copy(start: str | Path = ".") -> WorkingCopy | None:
    """Return the git or Mercurial working copy containing ``start``."""
    start = Path(start).resolve()
    root = _probe(["git", "rev-parse", "--show-toplevel"], start)
    if root:
        return WorkingCopy(root=Path(root).resolve(), vcs=Vcs.GIT)
    root = _probe(["hg", "root"], start)
    if root:
        return WorkingCopy(root=Path(root).resolve(), vcs=Vcs.HG)
    return None


def _entries(output: str) -> list[str]:
    """Split NUL-terminated (``-z``) output into paths."""
    return [entry for entry in output.split("\0") if entry]


def _git_paths(root: Path) -> list[str]:
    # An unborn HEAD has nothing to diff against; staged files still count.
    if _probe(["git", "rev-parse", "--verify", "-q", "HEAD"], root):
        diff = ["git", "diff", "--name-only", "-z", "HEAD", "--"]
    else:
        diff = ["git", "diff", "--name-only", "-z", "--cached", "--"]
    changed = _entries(_run(diff, root))
    untracked = _entries(
        _run(["git", "ls-files", "-z", "--others", "--exclude-standard"], root)
    )
    return changed + untracked


def changed_paths(working_copy: WorkingCopy) -> list[str]:
    """Return uncommitted and untracked paths, relative to the root."""
    root = working_copy.root
    if working_copy.vcs is Vcs.GIT:
        paths = _git_paths(root)
    else:
        paths = _entries(
            _run(["hg", "status", "--no-status", "--print0", "-mardu"], root)
        )
    logger.debug("Working copy has %d changed or untracked path(s)", len(paths))
    return unique_paths(paths)


def relative_path(path: str | Path, root: Path, cwd: Path) -> str:
    """Return ``path`` relative to ``root`` with ``/`` separators.

    Raises
    ------
    WorkingCopyError
        If ``path`` lies outside ``root``.
    """
    absolute = Path(os.path.normpath(cwd / Path(path)))
    try:
        relative = absolute.relative_to(root)
    except ValueError:
        raise WorkingCopyError(
            f"Path {str(path)!r} is outside the working copy {root}"
        ) from None
    if relative == Path("."):
        return ""
    return relative.as_posix().strip("/")


def unique_paths(paths: Iterable[str]) -> list[str]:
    """Normalize paths and drop duplicates, keeping the first occurrence."""
    normalized = (_normalize(p) for p in paths)
    return list(dict.fromkeys(p for p in normalized if p))


def _normalize(path: str) -> str:
    cleaned = posixpath.normpath(path.replace(os.sep, "/")).strip("/")
    return "" if cleaned == "." else cleaned


def select_paths(
    explicit: Sequence[str],
    working_copy: WorkingCopy | None,
    cwd: str | Path | None = None,
) -> list[str]:
    """Return the candidate paths for a run.

    Parameters
    ----------
    explicit:
        Paths given on the command line; empty to use working-copy changes.
    working_copy:
        The detected working copy, if any.
    cwd:
        Directory explicit paths are relative to; defaults to the process
        working directory.

    Raises
    ------
    WorkingCopyError
        If no paths were given and there is no working copy, or a path is
        outside the working copy.
    """
    if not explicit:
        if working_copy is None:
            raise WorkingCopyError(
                "Not in a git or Mercurial working copy; pass paths explicitly"
            )
        return changed_paths(working_copy)

    if working_copy is None:
        return unique_paths(explicit)
    base = Path(cwd).resolve() if cwd is not None else Path.cwd().resolve()
    return unique_paths(relative_path(p, working_copy.root, base) for p in explicit)


__all__ = [
    "Vcs",
    "WorkingCopy",
    "changed_paths",
    "detect_working_copy",
    "relative_path",
    "select_paths",
    "unique_paths",
]
