"""CLI entrypoint for podweave."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

from .errors import ConfigMissingError, LicenseResolutionError
from .licenses import resolve_license
from .logging import configure_logging
from .models import WeaveMetadata
from .orchestrator import Orchestrator


def _add_verbose_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="podweave",
        description=(
            "Extract POD from Perl files, weave it with the plugins configured in "
            "weaver.yml and print the result."
        ),
        epilog="A weaver.yml configuration file must exist in the current directory.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--license",
        metavar="NAME",
        help="License to declare, e.g. Perl_5, GPL_3, Artistic_2_0 or a module:Class path.",
    )
    parser.add_argument(
        "--version",
        metavar="VERSION",
        nargs="?",
        const="",
        help="Version of the input file, used in the VERSION section.",
    )
    parser.add_argument(
        "--author",
        dest="authors",
        metavar="AUTHOR",
        action="append",
        default=[],
        help="Author of the file; repeat for several. The first one holds the license.",
    )
    parser.add_argument(
        "files",
        nargs="+",
        metavar="FILE",
        help="Perl files to weave.",
    )
    return parser


def build_metadata(
    license_name: Optional[str],
    version: Optional[str],
    authors: list[str],
) -> WeaveMetadata:
    """Turn command-line values into the metadata shared by every file."""
    license = None
    if license_name:
        license = resolve_license(license_name, authors[0] if authors else None)
    return WeaveMetadata(license=license, version=version or None, authors=tuple(authors))


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for podweave."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    orchestrator = Orchestrator(Path.cwd())
    try:
        orchestrator.check_config()
    except ConfigMissingError as exc:
        parser.exit(1, f"{exc}\n")

    try:
        metadata = build_metadata(args.license, args.version, list(args.authors))
    except LicenseResolutionError as exc:
        parser.exit(1, f"{exc}\n")

    for result in orchestrator.run(args.files, metadata):
        if result.is_fatal:
            parser.exit(1, f"{result.error}\n")
        print(result.text)


if __name__ == "__main__":
    main(sys.argv[1:])
