"""In-place header insertion.

The new content is written to a temporary file next to the original and
moved over it with ``os.replace``, so an interrupted run leaves either the
old file or the fully rewritten one. Permission bits are carried over.
"""
from __future__ import annotations

import os
import stat
import tempfile

from .errors import RewriteError
from .logutil import get_logger

_SHEBANG = b"#!"


def insertion_offset(content: bytes) -> int:
    """Byte offset where the header goes: after a ``#!`` line, else 0.

    Deliberate exception to plain header + content: an interpreter line
    must stay first.
    """
    if not content.startswith(_SHEBANG):
        return 0
    eol = content.find(b"\n")
    if eol == -1:
        return len(content)
    return eol + 1


def with_header(content: bytes, header: bytes) -> bytes:
    offset = insertion_offset(content)
    head = content[:offset]
    if head and not head.endswith(b"\n"):
        head += b"\n"
    return head + header + content[offset:]


def rewrite_file_with_header(path: str, header: bytes) -> None:
    # Symlinks are written through: the link stays, its target gets the header.
    target = os.path.realpath(path)
    try:
        with open(target, "rb") as handle:
            original = handle.read()
        mode = stat.S_IMODE(os.stat(target).st_mode)
    except OSError as exc:
        raise RewriteError(f"failed to rewrite {path}", cause=exc) from exc

    directory = os.path.dirname(target) or "."
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(
            prefix=f".{os.path.basename(target)}.", suffix=".tmp", dir=directory
        )
        with os.fdopen(fd, "wb") as out:
            out.write(with_header(original, header))
            out.flush()
            os.fsync(out.fileno())
        os.chmod(tmp_path, mode)
        os.replace(tmp_path, target)
        tmp_path = None
    except OSError as exc:
        raise RewriteError(f"failed to rewrite {path}", cause=exc) from exc
    finally:
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError as cleanup_exc:
                get_logger().warning("could not remove temporary file %s: %s", tmp_path, cleanup_exc)
    get_logger().info("added license header to %s", path)


__all__ = ["insertion_offset", "with_header", "rewrite_file_with_header"]
