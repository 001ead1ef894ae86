"""JSON run report (``-json PATH``).

Shape documented by ``schemas/report.schema.json``; bump ``REPORT_VERSION``
when fields change.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from .config import LicenserConfig
from .engine import Outcome

REPORT_VERSION = 1


def build_report(config: LicenserConfig, outcome: Outcome) -> Dict[str, Any]:
    return {
        "version": REPORT_VERSION,
        "root": config.path,
        "license": config.license,
        "licensor": config.licensor,
        "extension": config.extension,
        "dry_run": config.dry_run,
        "scanned": outcome.scanned,
        "compliant": outcome.compliant,
        "violations": list(outcome.violations),
        "rewritten": list(outcome.rewritten),
        "outcome": outcome.kind.value,
        "error": outcome.message,
    }


def write_report(path: str, config: LicenserConfig, outcome: Outcome) -> Path:
    """Persist the report as JSON; OSError propagates to the caller."""
    path_obj = Path(path)
    path_obj.parent.mkdir(parents=True, exist_ok=True)
    with path_obj.open("w", encoding="utf-8") as handle:
        json.dump(build_report(config, outcome), handle, indent=2)
    return path_obj


__all__ = ["REPORT_VERSION", "build_report", "write_report"]
