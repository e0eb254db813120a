"""Command-line interface for seqdir."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from seqdir import __version__
from seqdir.settings import default_config_path


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="seqdir",
        description="Track the lifecycle of Illumina sequencing run directories",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"seqdir {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    status_parser = subparsers.add_parser(
        "status",
        help="Report the current phase of a run directory",
    )
    status_parser.add_argument(
        "root",
        type=Path,
        help="Run directory",
    )
    status_parser.add_argument(
        "--json",
        action="store_true",
        help="Emit machine-readable JSON output",
    )

    watch_parser = subparsers.add_parser(
        "watch",
        help="Poll a run directory until it completes or fails",
    )
    watch_parser.add_argument(
        "root",
        type=Path,
        help="Run directory",
    )
    watch_parser.add_argument(
        "--interval",
        type=float,
        help="Seconds between polls (default: from settings)",
    )
    watch_parser.add_argument(
        "--max-polls",
        type=int,
        help="Stop after this many polls",
    )
    watch_parser.add_argument(
        "--once",
        action="store_true",
        help="Poll once and exit",
    )
    watch_parser.add_argument(
        "--config",
        type=Path,
        default=default_config_path(),
        help="Settings path (default: ~/.config/seqdir/settings.json)",
    )
    watch_parser.add_argument(
        "--json",
        action="store_true",
        help="Emit machine-readable JSON output",
    )
    watch_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log at DEBUG level",
    )

    verify_parser = subparsers.add_parser(
        "verify",
        help="Check that a run directory completed as planned",
    )
    verify_parser.add_argument(
        "root",
        type=Path,
        help="Run directory",
    )
    verify_parser.add_argument(
        "--json",
        action="store_true",
        help="Emit machine-readable JSON output",
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    try:
        # Import here to avoid slow startup
        if args.command == "status":
            from .commands.status import run_status
            return run_status(args)
        elif args.command == "watch":
            from .commands.watch import run_watch
            return run_watch(args)
        elif args.command == "verify":
            from .commands.verify import run_verify
            return run_verify(args)
        else:
            parser.print_help()
            return 1
    except Exception as exc:  # pragma: no cover - exercised in CLI tests
        from .errors import exit_code_for_exception

        print(str(exc), file=sys.stderr)
        return exit_code_for_exception(exc)


if __name__ == "__main__":
    sys.exit(main())
