import argparse
import os
import sys
from typing import Dict, List, Optional, TYPE_CHECKING

from . import __version__
from .config import DEFAULT_EXT, DEFAULT_LICENSE, DEFAULT_LICENSOR, DEFAULT_PATH, LicenserConfig
from .engine import Outcome, run
from .errors import OutcomeKind
from .licenses import license_types
from .logutil import set_verbose
from .report import write_report

if TYPE_CHECKING:  # pragma: no cover - typing only
    from rich.console import Console as _Console
    from rich.text import Text as _Text
else:  # runtime optional import
    try:  # noqa: SIM105
        from rich.console import Console as _Console  # type: ignore
        from rich.text import Text as _Text  # type: ignore
    except Exception:  # noqa: BLE001
        _Console = None  # type: ignore
        _Text = None  # type: ignore

ConsoleType = Optional["_Console"]

# Process exit status per outcome; 3 stays unassigned.
EXIT_CODES: Dict[OutcomeKind, int] = {
    OutcomeKind.OK: 0,
    OutcomeKind.NEEDS_REWRITE: 1,
    OutcomeKind.TREE_ACCESS: 2,
    OutcomeKind.WALK: 4,
    OutcomeKind.FILE_OPEN: 5,
    OutcomeKind.REWRITE: 6,
    OutcomeKind.UNKNOWN_LICENSE: 7,
}

USAGE_TEXT = """\
licenser walks the specified path recursively and prepends a license header
to every file whose header doesn't match the selected license.
With -d, files are only reported and the exit status is 1 if any is missing it.
"""


def exit_code(outcome: Outcome) -> int:
    return EXIT_CODES[outcome.kind]


def _commit() -> str:
    return os.environ.get("LICENSER_COMMIT") or "unknown"


def _maybe_console(args: argparse.Namespace) -> ConsoleType:
    if getattr(args, "no_color", False):
        return None
    if _Console is None:
        return None
    # one line per diagnostic, whatever the terminal width
    return _Console(stderr=True, soft_wrap=True)


def _diagnostic(console: ConsoleType, message: str) -> None:
    if console is not None and _Text is not None:
        console.print(_Text("[licenser] ", style="bold red") + _Text(message))
    else:
        print(f"[licenser] {message}", file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="licenser",
        usage="%(prog)s [flags] [path]",
        description=USAGE_TEXT,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
    )
    parser.add_argument(
        "-version",
        "--version",
        action="version",
        version=f"licenser {__version__} ({_commit()})",
        help="prints out the binary version.",
    )
    parser.add_argument(
        "-exclude",
        "--exclude",
        action="append",
        default=[],
        metavar="PATH",
        help="path to exclude (can be specified multiple times).",
    )
    parser.add_argument(
        "-d",
        "--dry-run",
        dest="dry_run",
        action="store_true",
        help="skips rewriting files and returns exitcode 1 if any discrepancies are found.",
    )
    parser.add_argument("-ext", "--ext", default=DEFAULT_EXT, help="sets the file extension to scan for.")
    parser.add_argument(
        "-license",
        "--license",
        default=DEFAULT_LICENSE,
        help=f"sets the license type to check: {', '.join(license_types())}",
    )
    parser.add_argument("-licensor", "--licensor", default=DEFAULT_LICENSOR, help="sets the name of the licensor")
    parser.add_argument("-json", "--report", dest="report", metavar="PATH", help="Write a JSON run report to this path")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every file decision to stderr")
    parser.add_argument("--no-color", action="store_true", help="Disable colorized diagnostics even if rich present")
    parser.add_argument("path", nargs="?", default=DEFAULT_PATH, help="directory (or file) to scan; defaults to '.'")
    return parser


def config_from_args(args: argparse.Namespace) -> LicenserConfig:
    return LicenserConfig(
        path=args.path,
        license=args.license,
        licensor=args.licensor,
        extension=args.ext,
        exclude=tuple(args.exclude),
        dry_run=bool(args.dry_run),
        report=args.report,
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    set_verbose(args.verbose)
    console = _maybe_console(args)
    config = config_from_args(args)

    outcome = run(config, out=sys.stdout)
    sys.stdout.flush()
    if outcome.failed:
        _diagnostic(console, outcome.message or outcome.kind.value)

    traversed = outcome.kind not in (OutcomeKind.UNKNOWN_LICENSE, OutcomeKind.TREE_ACCESS)
    if config.report and traversed:
        try:
            write_report(config.report, config, outcome)
        except OSError as exc:
            _diagnostic(console, f"failed to write report {config.report}: {exc}")
    return exit_code(outcome)


if __name__ == "__main__":
    sys.exit(main())
