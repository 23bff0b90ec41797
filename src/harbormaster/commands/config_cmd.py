"""harbormaster config: show or initialize the configuration file."""

from __future__ import annotations

import argparse

from harbormaster.config import (
    config_file_path,
    config_items,
    load_merged_config,
    write_global_config,
)


def add_parser(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser(
        "config",
        help="Show effective configuration",
        description="Show the effective configuration, or write a default config file.",
    )
    p.add_argument(
        "--init", action="store_true",
        help="Write a default harbormaster.toml if none exists",
    )
    p.set_defaults(func=run)


def run(args: argparse.Namespace) -> int:
    path = config_file_path()

    if args.init:
        if path.exists():
            print(f"Config already exists: {path}")
            return 0
        write_global_config(path)
        print(f"Wrote {path}")
        return 0

    config = load_merged_config(path)
    source = path if path.exists() else "defaults"
    print(f"# {source}")
    for key, value in config_items(config):
        print(f"{key} = {value}")
    return 0
