"""Exclusion rules applied while walking the tree.

Two sources: the caller's explicit entries, compared against the path
relative to the scan root as a whole, and the built-in directory names
(vendor, .git) which prune a directory wherever it appears.
"""
from __future__ import annotations

import os
from typing import Iterable, Optional, Sequence

from .config import DEFAULT_EXCLUDED_DIRS

_SEPARATORS = ("/", "\\")


def clean_path_prefixes(path: str, prefixes: Iterable[str]) -> str:
    prefixes = tuple(p for p in prefixes if p)
    while prefixes and path.startswith(prefixes):
        for prefix in prefixes:
            if path.startswith(prefix):
                path = path[len(prefix) :]
    return path


def normalize(path: str) -> str:
    """Use forward slashes and drop ``./`` plus leading/trailing separators."""
    p = path.replace("\\", "/")
    while p.startswith("./"):
        p = p[2:]
    return clean_path_prefixes(p, _SEPARATORS).rstrip("/")


def needs_exclusion(rel_path: str, exclude: Sequence[str]) -> bool:
    current = normalize(rel_path)
    if not current:
        return False
    for entry in exclude:
        wanted = normalize(entry)
        if wanted and current == wanted:
            return True
    return False


def excluded(
    rel_path: str,
    is_dir: bool,
    exclude: Sequence[str],
    excluded_dirs: Sequence[str] = DEFAULT_EXCLUDED_DIRS,
    name: Optional[str] = None,
) -> bool:
    """True when the entry must be skipped; for a directory, its whole subtree.

    ``name`` overrides the basename used for the built-in directory check
    (the walker passes it for the scan root, whose relative path is empty).
    """
    if name is None:
        name = os.path.basename(normalize(rel_path))
    if is_dir and name in excluded_dirs:
        return True
    return needs_exclusion(rel_path, exclude)


__all__ = ["clean_path_prefixes", "normalize", "needs_exclusion", "excluded"]
