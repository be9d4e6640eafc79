"""Implementation of `stormstats validate`."""

from __future__ import annotations

import argparse
import json

from stormstats.core.config import resolve_config
from stormstats.data.validators import report_to_dict, validate_storm_file


def register(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("validate", help="Check that a track CSV loads and cleans")
    parser.add_argument("csv", help="Storm track CSV")
    parser.add_argument("--json", action="store_true", help="Print report as JSON")
    parser.set_defaults(func=cmd_validate)


def cmd_validate(args: argparse.Namespace) -> int:
    cfg = resolve_config(config_path=args.config)
    report = validate_storm_file(args.csv, cfg)
    payload = report_to_dict(report)

    if args.json:
        print(json.dumps(payload, indent=2, sort_keys=True))
    else:
        status = "PASS" if report.valid else "FAIL"
        print(f"Validation: {status}")
        print(f"Observations: {report.n_rows} ({report.n_storms} storms)")
        if not report.issues:
            print("No issues found")
        for issue in report.issues:
            print(f"- {issue.level.upper()} [{issue.code}] {issue.message}")

    return 0 if report.valid else 2
