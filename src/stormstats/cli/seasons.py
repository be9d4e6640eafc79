"""Implementation of `stormstats seasons`."""

from __future__ import annotations

import argparse
import json

from stormstats.analysis.queries import average, season_summary
from stormstats.core.config import resolve_config, thresholds_from_config
from stormstats.core.pipeline import load_clean_table


def register(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("seasons", help="Per-season counts at each wind threshold")
    parser.add_argument("csv", help="Storm track CSV")
    parser.add_argument("--start", type=int, default=None, help="First season (inclusive)")
    parser.add_argument("--end", type=int, default=None, help="Last season (inclusive)")
    parser.add_argument("--by", choices=["name", "sid"], default=None, help="Storm grouping key")
    parser.add_argument("--json", action="store_true", help="Print table as JSON")
    parser.set_defaults(func=cmd_seasons)


def cmd_seasons(args: argparse.Namespace) -> int:
    overrides = {"queries": {"group_by": args.by}} if args.by else None
    cfg = resolve_config(config_path=args.config, overrides=overrides)
    table = load_clean_table(args.csv, cfg)

    summary = season_summary(table, thresholds_from_config(cfg), by=str(cfg["queries"]["group_by"]))
    if args.start is not None:
        summary = summary.loc[summary.index >= args.start]
    if args.end is not None:
        summary = summary.loc[summary.index <= args.end]
    averages = {col: average(summary[col]) for col in summary.columns}

    if args.json:
        payload = {
            "seasons": {str(k): {c: int(v) for c, v in row.items()} for k, row in summary.iterrows()},
            "averages": {k: (v if v == v else None) for k, v in averages.items()},
        }
        print(json.dumps(payload, indent=2, sort_keys=True))
        return 0

    if summary.empty:
        print("No seasons in range")
        return 0
    print(summary.to_string())
    print("")
    print("Average per season: " + ", ".join(f"{k}={v:.2f}" for k, v in averages.items()))
    return 0
