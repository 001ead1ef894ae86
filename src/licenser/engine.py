"""Run controller: validate, walk, check and fix or report.

``run`` is the single entry point used by the CLI. It takes an immutable
``LicenserConfig``, never raises for expected failures and returns an
``Outcome`` whose ``kind`` tells the caller how the run ended:

- configuration and tree access problems are detected before any file is
  touched;
- the first filesystem error during the walk stops the run;
- in dry-run mode every non-compliant file is reported, and the run ends
  with ``NEEDS_REWRITE`` only after the whole tree was scanned.
"""
from __future__ import annotations

import enum
import os
import sys
from dataclasses import dataclass, field
from typing import IO, Iterator, List, Optional, Tuple

from .config import LicenserConfig
from .detect import file_contains_header
from .errors import LicenserError, OutcomeKind, TreeAccessError
from .licenses import MaterializedHeader, materialize
from .logutil import get_logger
from .rewrite import rewrite_file_with_header
from .walk import WalkEntry, walk

MISSING_HEADER_FORMAT = "{path}: is missing the license header"


class FileStatus(enum.Enum):
    COMPLIANT = "compliant"
    VIOLATION = "violation"
    REWRITTEN = "rewritten"


@dataclass
class Outcome:
    kind: OutcomeKind = OutcomeKind.OK
    message: Optional[str] = None
    cause: Optional[BaseException] = None
    scanned: int = 0
    compliant: int = 0
    violations: List[str] = field(default_factory=list)
    rewritten: List[str] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.kind not in (OutcomeKind.OK, OutcomeKind.NEEDS_REWRITE)


def display_path(path: str) -> str:
    """Path relative to the cwd when one exists, else as walked."""
    try:
        return os.path.relpath(path)
    except ValueError:  # different drive on Windows
        return path


def check_file(entry: WalkEntry, header: MaterializedHeader, dry_run: bool) -> FileStatus:
    if file_contains_header(entry.path, header.lines):
        return FileStatus.COMPLIANT
    if dry_run:
        return FileStatus.VIOLATION
    rewrite_file_with_header(entry.path, header.data)
    return FileStatus.REWRITTEN


def check_tree(config: LicenserConfig, header: MaterializedHeader) -> Iterator[Tuple[WalkEntry, FileStatus]]:
    """Walk the configured tree, yielding each qualifying file with its status."""
    for entry in walk(config.path, config.extension, config.exclude, config.excluded_dirs):
        status = check_file(entry, header, config.dry_run)
        get_logger().debug("%s: %s", entry.path, status.value)
        yield entry, status


def _fail(outcome: Outcome, err: LicenserError) -> Outcome:
    outcome.kind = err.kind
    outcome.message = str(err)
    outcome.cause = err.cause
    return outcome


def run(config: LicenserConfig, out: Optional[IO[str]] = None) -> Outcome:
    out = out if out is not None else sys.stdout
    outcome = Outcome()
    log = get_logger()

    try:
        header = materialize(config.license, config.licensor)
    except LicenserError as err:
        return _fail(outcome, err)

    try:
        os.stat(config.path)
    except OSError as exc:
        return _fail(outcome, TreeAccessError(f"cannot stat {config.path}", cause=exc))

    log.debug(
        "checking %s for %s headers (ext=%r, dry_run=%s)",
        config.path,
        config.license,
        config.extension,
        config.dry_run,
    )
    try:
        for entry, status in check_tree(config, header):
            outcome.scanned += 1
            if status is FileStatus.COMPLIANT:
                outcome.compliant += 1
            elif status is FileStatus.VIOLATION:
                shown = display_path(entry.path)
                outcome.violations.append(shown)
                print(MISSING_HEADER_FORMAT.format(path=shown), file=out)
            else:
                outcome.rewritten.append(display_path(entry.path))
    except LicenserError as err:
        log.debug("run aborted after %d files", outcome.scanned)
        return _fail(outcome, err)

    if outcome.violations:
        outcome.kind = OutcomeKind.NEEDS_REWRITE
    return outcome


__all__ = [
    "MISSING_HEADER_FORMAT",
    "FileStatus",
    "Outcome",
    "display_path",
    "check_file",
    "check_tree",
    "run",
]
