"""Depth-first tree traversal with subtree pruning.

Entries of each directory are visited in lexical order so runs are
reproducible regardless of the filesystem's listing order. An excluded
directory is pruned: nothing beneath it is listed or yielded. Listing
errors abort the walk with ``WalkError``; there is no skip-and-continue.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterator, List, Sequence

from .config import DEFAULT_EXCLUDED_DIRS
from .errors import WalkError
from .exclude import excluded


@dataclass(frozen=True)
class WalkEntry:
    path: str  # as reachable from the cwd (root joined with rel)
    rel: str  # relative to the scan root, "/" separated
    is_dir: bool


def _list_dir(path: str) -> List[os.DirEntry]:
    try:
        with os.scandir(path) as it:
            return sorted(it, key=lambda e: e.name)
    except OSError as exc:
        raise WalkError(f"failed to walk {path}", cause=exc) from exc


def _is_dir(entry: os.DirEntry) -> bool:
    try:
        return entry.is_dir(follow_symlinks=False)
    except OSError as exc:
        raise WalkError(f"failed to walk {entry.path}", cause=exc) from exc


def _descend(
    path: str,
    rel: str,
    exclude: Sequence[str],
    excluded_dirs: Sequence[str],
) -> Iterator[WalkEntry]:
    for entry in _list_dir(path):
        child_rel = f"{rel}/{entry.name}" if rel else entry.name
        is_dir = _is_dir(entry)
        if excluded(child_rel, is_dir, exclude, excluded_dirs, name=entry.name):
            continue
        yield WalkEntry(entry.path, child_rel, is_dir)
        if is_dir:
            yield from _descend(entry.path, child_rel, exclude, excluded_dirs)


def iter_entries(
    root: str,
    exclude: Sequence[str] = (),
    excluded_dirs: Sequence[str] = DEFAULT_EXCLUDED_DIRS,
) -> Iterator[WalkEntry]:
    """Yield every non-excluded entry under ``root`` (root itself excluded).

    A ``root`` that is a regular file yields just that file.
    """
    if not os.path.isdir(root):
        name = os.path.basename(os.path.normpath(root))
        if not excluded(name, False, exclude, excluded_dirs, name=name):
            yield WalkEntry(root, name, False)
        return
    root_name = os.path.basename(os.path.normpath(root))
    if excluded("", True, exclude, excluded_dirs, name=root_name):
        return
    yield from _descend(root, "", exclude, excluded_dirs)


def walk(
    root: str,
    extension: str,
    exclude: Sequence[str] = (),
    excluded_dirs: Sequence[str] = DEFAULT_EXCLUDED_DIRS,
) -> Iterator[WalkEntry]:
    """Yield the qualifying files: non-excluded and ending with ``extension``."""
    for entry in iter_entries(root, exclude, excluded_dirs):
        if entry.is_dir or not entry.path.endswith(extension):
            continue
        yield entry


__all__ = ["WalkEntry", "iter_entries", "walk"]
