"""Command-line entry point.

Installed as ``cargo-setup`` so it can also be run as ``cargo setup``; in that
case cargo passes ``setup`` as the first argument, which is skipped here
(see :func:`_strip_subcommand`).
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from pydantic import ValidationError

from .config import Config
from .errors import BaseCreationError, PreconditionError
from .models import CrateKind, ScaffoldReport, ScaffoldRequest
from .scaffolder import ProjectScaffolder
from .scaffolder.cargo import BaseProjectCreator
from .utils import print_error, print_success, print_summary_table, print_warning

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cargo setup",
        description="Scaffold a new crate with profile-based extras",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  cargo setup shortid-rs --bin\n"
            "  cargo setup my-lib --license 'MIT OR Apache-2.0'\n"
            "  cargo-setup my-lib --profile ./work-profile.toml\n"
        ),
    )
    parser.add_argument("name", help="Name of the new crate")

    kind = parser.add_mutually_exclusive_group()
    kind.add_argument(
        "--bin",
        dest="kind",
        action="store_const",
        const=CrateKind.BIN,
        help="Create a binary crate",
    )
    kind.add_argument(
        "--lib",
        dest="kind",
        action="store_const",
        const=CrateKind.LIB,
        help="Create a library crate (default)",
    )
    parser.set_defaults(kind=CrateKind.LIB)

    parser.add_argument(
        "--license",
        default=None,
        help="License override, e.g. MIT or Apache-2.0 (default: from profile, then MIT)",
    )
    parser.add_argument(
        "--profile",
        type=Path,
        default=None,
        help="Profile file to read (default: ~/.cargo-me.toml or $CARGO_SETUP_PROFILE)",
    )
    parser.add_argument(
        "--path",
        type=Path,
        default=None,
        help="Directory in which to create the crate (default: current directory)",
    )
    return parser


def main(
    argv: Optional[Sequence[str]] = None,
    creator: Optional[BaseProjectCreator] = None,
) -> int:
    """Parse *argv*, scaffold the crate and return the process exit code."""
    args_list = list(sys.argv[1:] if argv is None else argv)
    args = build_parser().parse_args(_strip_subcommand(args_list))

    try:
        request = ScaffoldRequest(
            project_name=args.name,
            kind=args.kind,
            license_override=args.license,
        )
    except ValidationError as exc:
        for err in exc.errors():
            print_error(f"Error: {err['msg']}")
        return EXIT_USAGE

    config = Config.from_env()
    if args.profile is not None:
        config.profile_path = args.profile.expanduser()
    if args.path is not None:
        config.output_dir = args.path

    scaffolder = ProjectScaffolder(creator=creator, config=config)
    try:
        report = scaffolder.scaffold(request)
    except PreconditionError as exc:
        print_error(f"Error: {exc}")
        return EXIT_FATAL
    except BaseCreationError as exc:
        if exc.stderr:
            print_error(exc.stderr)
        print_error(f"Error: {exc}")
        return EXIT_FATAL

    _print_report(request, report)
    return EXIT_OK


def _strip_subcommand(args: list[str]) -> list[str]:
    """Drop the ``setup`` argument cargo passes to external subcommands.

    Cargo sets ``CARGO`` when it runs ``cargo-setup``.  Without it, a leading
    ``setup`` is only dropped when another positional follows, so
    ``cargo-setup setup`` still scaffolds a crate named ``setup``.
    """
    if not args or args[0] != "setup":
        return args
    if "CARGO" in os.environ:
        return args[1:]
    if len(args) > 1 and not args[1].startswith("-"):
        return args[1:]
    return args


def _print_report(request: ScaffoldRequest, report: ScaffoldReport) -> None:
    for line in report.warnings():
        print_warning(f"Warning: {line}")

    print_summary_table(
        {
            "Crate": f"{request.project_name} ({request.kind.value})",
            "Location": str(report.project_root),
            "License": report.license,
            "Files": ", ".join(f.relative_path for f in report.files if f.ok) or "-",
        },
        title="cargo setup",
    )
    if report.ok:
        print_success(
            f"✅ Scaffolded project `{request.project_name}` with license "
            f"`{report.license}` and extras."
        )
    else:
        print_warning(
            f"Scaffolded project `{request.project_name}` with "
            f"{len(report.warnings())} warning(s)."
        )


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
