"""Validation of storm-track files for the `validate` command."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd

from stormstats.core.config import DEFAULT_CONFIG
from stormstats.core.types import ValidationIssue, ValidationReport
from stormstats.data.cleaner import CleanError, clean_storms
from stormstats.data.loader import LoadError, load_storms


def validate_storm_file(csv_path: str | Path, cfg: dict[str, Any] | None = None) -> ValidationReport:
    cfg = cfg or DEFAULT_CONFIG
    issues: list[ValidationIssue] = []

    try:
        loaded = load_storms(csv_path, skip_units_row=bool(cfg["loader"]["skip_units_row"]))
    except FileNotFoundError as exc:
        return _failed("io_error", str(exc))
    except LoadError as exc:
        return _failed("load_error", str(exc))

    try:
        cleaned = clean_storms(
            loaded,
            min_season=int(cfg["cleaner"]["min_season"]),
            time_format=str(cfg["cleaner"]["time_format"]),
        )
    except CleanError as exc:
        return _failed("clean_error", str(exc), n_rows=int(loaded.shape[0]), n_storms=int(loaded["sid"].nunique()))

    issues.extend(_coverage_warnings(loaded, cleaned, min_season=int(cfg["cleaner"]["min_season"])))
    has_error = any(issue.level == "error" for issue in issues)
    return ValidationReport(
        valid=not has_error,
        issues=issues,
        n_rows=int(cleaned.shape[0]),
        n_storms=int(cleaned["sid"].nunique()),
    )


def _coverage_warnings(loaded: pd.DataFrame, cleaned: pd.DataFrame, *, min_season: int) -> list[ValidationIssue]:
    issues: list[ValidationIssue] = []

    dropped = int(loaded.shape[0] - cleaned.shape[0])
    if dropped:
        issues.append(
            ValidationIssue(
                level="warning",
                code="season_cutoff",
                message=f"{dropped} observation(s) before season {min_season} were dropped",
                context={"dropped": dropped, "min_season": min_season},
            )
        )
    if cleaned.empty:
        issues.append(
            ValidationIssue(
                level="warning",
                code="empty_table",
                message="No observations remain after cleaning",
                context={},
            )
        )
        return issues

    for col in ("wind", "pressure", "name"):
        n_missing = int(cleaned[col].isna().sum())
        if n_missing:
            issues.append(
                ValidationIssue(
                    level="warning",
                    code=f"missing_{col}",
                    message=f"Column '{col}' is empty in {n_missing} of {cleaned.shape[0]} observations",
                    context={"column": col, "missing": n_missing},
                )
            )
    return issues


def _failed(code: str, message: str, *, n_rows: int = 0, n_storms: int = 0) -> ValidationReport:
    return ValidationReport(
        valid=False,
        issues=[ValidationIssue(level="error", code=code, message=message, context={})],
        n_rows=n_rows,
        n_storms=n_storms,
    )


def report_to_dict(report: ValidationReport) -> dict[str, Any]:
    return {
        "valid": report.valid,
        "n_rows": report.n_rows,
        "n_storms": report.n_storms,
        "issues": [
            {
                "level": issue.level,
                "code": issue.code,
                "message": issue.message,
                "context": dict(issue.context),
            }
            for issue in report.issues
        ],
    }
