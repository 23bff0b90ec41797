"""harbormaster check: report whether running services have newer images."""

from __future__ import annotations

import argparse
import sys

from harbormaster.compose import ComposeRuntime
from harbormaster.config import load_merged_config
from harbormaster.errors import ComposeError
from harbormaster.freshness import check_freshness
from harbormaster.projects import parse_target, resolve_project
from harbormaster.registry import RegistryClient


def add_parser(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser(
        "check",
        help="Check running services for newer registry images",
        description=(
            "Compare the image behind each running service with the latest\n"
            "manifest in the registry. TARGET is PROJECT or PROJECT.SERVICE;\n"
            "a whole project checks only its running services."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("target", metavar="TARGET", help="PROJECT or PROJECT.SERVICE")
    p.add_argument(
        "--timeout", type=float, default=None,
        help="Registry request timeout in seconds (default: from config)",
    )
    p.add_argument(
        "--retries", type=int, default=None,
        help="Retries for failed registry requests (default: from config)",
    )
    p.set_defaults(func=run)


def run(args: argparse.Namespace) -> int:
    config = load_merged_config(cli_overrides={
        "registry_timeout": args.timeout,
        "registry_retries": args.retries,
    })

    ref = parse_target(args.target)
    project = resolve_project(config, ref.project)

    try:
        runtime = ComposeRuntime(config.compose_command or None)
    except ComposeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    registry = RegistryClient.from_config(config)
    results = check_freshness(runtime, registry, project, ref.service)

    if not results:
        print(f"No running services in project {project.name}.")
        return 0

    failed = 0
    for result in results:
        if result.failed:
            print(result.message(), file=sys.stderr)
            failed += 1
        else:
            print(result.message())

    return 1 if failed else 0
