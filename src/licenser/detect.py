"""Header presence detection.

Matching is purely textual and line based: the expected lines must appear
verbatim and in order, starting either at the first line of the file or
directly after a single leading line (an interpreter directive such as
``#!/usr/bin/env python``, or a build tag). Anything else counts as absent.
"""
from __future__ import annotations

from typing import IO, Iterable, List, Sequence

from .errors import FileOpenError

# The header may start at line 1 or after exactly one leading line.
MAX_LEADING_LINES = 1


def _strip_eol(raw: bytes) -> bytes:
    if raw.endswith(b"\n"):
        raw = raw[:-1]
    if raw.endswith(b"\r"):
        raw = raw[:-1]
    return raw


def leading_lines(stream: Iterable[bytes], limit: int) -> List[bytes]:
    """Read at most ``limit`` lines from a binary stream, without line endings."""
    found: List[bytes] = []
    if limit <= 0:
        return found
    for raw in stream:
        found.append(_strip_eol(raw))
        if len(found) >= limit:
            break
    return found


def contains_header(stream: Iterable[bytes], header_lines: Sequence[str]) -> bool:
    expected = [line.encode("utf-8") for line in header_lines]
    if not expected:
        return True
    found = leading_lines(stream, len(expected) + MAX_LEADING_LINES)
    for offset in range(MAX_LEADING_LINES + 1):
        if found[offset : offset + len(expected)] == expected:
            return True
    return False


def file_contains_header(path: str, header_lines: Sequence[str]) -> bool:
    """Open ``path`` read-only and check it for ``header_lines``.

    The handle is closed before returning, so callers are free to rewrite
    the file afterwards. Failing to open raises ``FileOpenError``.
    """
    try:
        handle: IO[bytes] = open(path, "rb")
    except OSError as exc:
        raise FileOpenError(f"failed to open {path}", cause=exc) from exc
    with handle:
        try:
            return contains_header(handle, header_lines)
        except OSError as exc:
            raise FileOpenError(f"failed to read {path}", cause=exc) from exc


__all__ = ["MAX_LEADING_LINES", "leading_lines", "contains_header", "file_contains_header"]
