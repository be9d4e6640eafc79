"""Implementation of `stormstats season`."""

from __future__ import annotations

import argparse
import json
from typing import Any

from stormstats.analysis.summary import build_season_payload
from stormstats.core.config import resolve_config, thresholds_from_config
from stormstats.core.pipeline import load_clean_table


def register(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("season", help="Summarize one season")
    parser.add_argument("csv", help="Storm track CSV")
    parser.add_argument("--year", type=int, required=True, help="Season year")
    parser.add_argument("--by", choices=["name", "sid"], default=None, help="Storm grouping key")
    parser.add_argument("--json", action="store_true", help="Print summary as JSON")
    parser.set_defaults(func=cmd_season)


def cmd_season(args: argparse.Namespace) -> int:
    overrides = {"queries": {"group_by": args.by}} if args.by else None
    cfg = resolve_config(config_path=args.config, overrides=overrides)
    table = load_clean_table(args.csv, cfg)
    payload = build_season_payload(
        table,
        args.year,
        thresholds_from_config(cfg),
        by=str(cfg["queries"]["group_by"]),
    )

    if args.json:
        print(json.dumps(payload, indent=2, sort_keys=True))
    else:
        print(_format_text(payload))
    return 0


def _format_text(payload: dict[str, Any]) -> str:
    counts = payload["counts"]
    span = payload["date_range"]
    lines = [
        f"Season {payload['season']}: {payload['storms']} storms, {payload['observations']} observations",
        f"  named storms:     {counts['named_storms']}",
        f"  hurricanes:       {counts['hurricanes']}",
        f"  major hurricanes: {counts['major_hurricanes']} {payload['major_hurricane_names']}",
        f"  date range:       {span['start']} .. {span['end']}",
    ]
    for label, rows in (("strongest", payload["strongest"]), ("deepest", payload["deepest"])):
        shown = ", ".join(" ".join(str(v) for v in row.values()) for row in rows) or "n/a"
        lines.append(f"  {label + ':':<18}{shown}")
    first, last = payload["first_observation"], payload["last_observation"]
    if first is not None and last is not None:
        lines.append(f"  first fix:        {first['name']} {first['iso_time']}")
        lines.append(f"  last fix:         {last['name']} {last['iso_time']}")
    months = ", ".join(f"{m}:{n}" for m, n in payload["storms_by_month"].items())
    lines.append(f"  storms by month:  {months or 'n/a'}")
    return "\n".join(lines)
