from dataclasses import dataclass
from typing import Optional, Tuple

DEFAULT_EXT = ".go"
DEFAULT_PATH = "."
DEFAULT_LICENSE = "ASL2"
DEFAULT_LICENSOR = "Elasticsearch B.V."
# Directory names pruned from every walk regardless of -exclude
DEFAULT_EXCLUDED_DIRS: Tuple[str, ...] = ("vendor", ".git")


@dataclass(frozen=True)
class LicenserConfig:
    # Scan root; a single file is accepted too
    path: str = DEFAULT_PATH
    license: str = DEFAULT_LICENSE
    licensor: str = DEFAULT_LICENSOR
    # Literal, case-sensitive filename suffix
    extension: str = DEFAULT_EXT
    # Paths relative to the scan root, compared whole
    exclude: Tuple[str, ...] = ()
    # Report violations instead of rewriting files
    dry_run: bool = False
    # Optional JSON run report destination
    report: Optional[str] = None
    excluded_dirs: Tuple[str, ...] = DEFAULT_EXCLUDED_DIRS
