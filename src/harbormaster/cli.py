"""Argparse tree with subparsers, dispatcher, and main() entry point."""

from __future__ import annotations

import argparse
import sys

from harbormaster import __version__
from harbormaster.errors import HarbormasterError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="harbormaster",
        description="Inspect compose projects and check running services for image updates.",
        epilog=(
            "common switches:\n"
            "  -v, --verbose       show debug output (compose calls, registry requests)\n"
            "  --version           print the version and exit\n"
            "\n"
            "run 'harbormaster COMMAND --help' for subcommand-specific options"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # Import and register all subcommand parsers.
    from harbormaster.commands.check import add_parser as add_check_parser
    from harbormaster.commands.config_cmd import add_parser as add_config_parser
    from harbormaster.commands.list_cmd import add_parser as add_list_parser

    add_check_parser(subparsers)
    add_list_parser(subparsers)
    add_config_parser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()

    import argcomplete
    argcomplete.autocomplete(parser)

    effective = list(argv if argv is not None else sys.argv[1:])

    # Extract -v/--verbose before subcommand dispatch.
    verbose = "-v" in effective or "--verbose" in effective
    effective = [a for a in effective if a not in ("-v", "--verbose")]

    from harbormaster.log import setup_logging
    setup_logging(verbose=verbose)

    if effective and effective[0] == "--version":
        print(f"harbormaster {__version__}")
        sys.exit(0)

    args = parser.parse_args(effective)

    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        sys.exit(0)

    try:
        rc = func(args)
    except HarbormasterError as e:
        print(f"Error: {e}", file=sys.stderr)
        rc = 1
    except KeyboardInterrupt:
        print()
        rc = 130

    sys.exit(rc)
