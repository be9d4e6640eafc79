"""Main CLI entrypoint."""

from __future__ import annotations

import argparse
import logging
import sys

from stormstats.analysis.queries import QueryError
from stormstats.cli import config, season, seasons, validate
from stormstats.core.config import ConfigError
from stormstats.core.logging import setup_logging
from stormstats.data.cleaner import CleanError
from stormstats.data.loader import LoadError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="stormstats", description="Storm-season statistics from track CSVs")
    parser.add_argument("--config", default=None, help="Config YAML")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    validate.register(subparsers)
    season.register(subparsers)
    seasons.register(subparsers)
    config.register(subparsers)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(verbose=getattr(args, "verbose", False))

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return int(args.func(args))
    except (ConfigError, LoadError, CleanError, QueryError, FileNotFoundError) as exc:
        logger.error("%s", exc)
        return 2
    except KeyboardInterrupt:
        print("Interrupted")
        return 130


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
