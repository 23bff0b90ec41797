"""harbormaster list: show compose projects under the projects root."""

from __future__ import annotations

import argparse

from harbormaster.config import load_merged_config
from harbormaster.projects import list_projects


def add_parser(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser(
        "list",
        help="List compose projects",
        description="List projects (directories with a compose file) under the projects root.",
    )
    p.set_defaults(func=run)


def run(args: argparse.Namespace) -> int:
    config = load_merged_config()
    projects = list_projects(config)
    if not projects:
        print(f"No projects found in {config.projects_dir}")
        return 0

    width = max(len(p.name) for p in projects)
    for proj in projects:
        print(f"  {proj.name:<{width}}  {proj.compose_file}")
    return 0
