"""Implementation of `stormstats config`."""

from __future__ import annotations

import argparse

from stormstats.core.config import dump_yaml_text, resolve_config


def register(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("config", help="Print the resolved configuration as YAML")
    parser.set_defaults(func=cmd_config)


def cmd_config(args: argparse.Namespace) -> int:
    print(dump_yaml_text(resolve_config(config_path=args.config)), end="")
    return 0
