"""Outcome kinds and the engine's error hierarchy.

Every fatal condition the engine can hit is a ``LicenserError`` subclass
carrying an ``OutcomeKind`` plus the underlying cause (usually an
``OSError``). Mapping kinds to process exit statuses is left to the CLI.
"""
from __future__ import annotations

import enum
from typing import Optional


class OutcomeKind(enum.Enum):
    OK = "ok"
    NEEDS_REWRITE = "needs_rewrite"
    TREE_ACCESS = "tree_access"
    WALK = "walk"
    FILE_OPEN = "file_open"
    REWRITE = "rewrite"
    UNKNOWN_LICENSE = "unknown_license"


class LicenserError(Exception):
    kind: OutcomeKind = OutcomeKind.OK

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause

    def __str__(self) -> str:
        msg = super().__str__()
        if self.cause is not None:
            return f"{msg}: {self.cause}"
        return msg


class ConfigurationError(LicenserError):
    kind = OutcomeKind.UNKNOWN_LICENSE


class TreeAccessError(LicenserError):
    kind = OutcomeKind.TREE_ACCESS


class WalkError(LicenserError):
    kind = OutcomeKind.WALK


class FileOpenError(LicenserError):
    kind = OutcomeKind.FILE_OPEN


class RewriteError(LicenserError):
    kind = OutcomeKind.REWRITE


__all__ = [
    "OutcomeKind",
    "LicenserError",
    "ConfigurationError",
    "TreeAccessError",
    "WalkError",
    "FileOpenError",
    "RewriteError",
]
