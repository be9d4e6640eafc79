"""Structured season payload for the command line."""

from __future__ import annotations

from typing import Any

import pandas as pd

from stormstats.analysis.queries import (
    category_totals,
    classify_by_wind_threshold,
    count_storms_reaching,
    date_range,
    extremum,
    filter_by_season,
    first_or_last,
    storms_by_month,
    wind_at_least,
)
from stormstats.core.types import WindThresholds
from stormstats.core.versioning import package_versions

OBSERVATION_FIELDS = ["sid", "name", "iso_time", "lat", "lon", "wind", "pressure"]


def build_season_payload(
    rows: pd.DataFrame,
    year: int,
    thresholds: WindThresholds | None = None,
    *,
    by: str = "name",
) -> dict[str, Any]:
    th = thresholds or WindThresholds()
    season = filter_by_season(rows, year)
    start, end = date_range(season)
    first = first_or_last(season, "iso_time")
    last = first_or_last(season, "iso_time", last=True)

    return {
        "season": int(year),
        "thresholds": th.as_dict(),
        "group_by": by,
        "observations": int(season.shape[0]),
        "storms": int(season[by].nunique(dropna=False)),
        "counts": {
            "named_storms": count_storms_reaching(season, th.named_storm, by=by),
            "hurricanes": count_storms_reaching(season, th.hurricane, by=by),
            "major_hurricanes": count_storms_reaching(season, th.major_hurricane, by=by),
        },
        "category_storms": _coerce_mapping(category_totals(classify_by_wind_threshold(season, th, by=by))),
        "major_hurricane_names": sorted(
            str(v) for v in season.loc[wind_at_least(th.major_hurricane)(season), by].dropna().unique()
        ),
        "strongest": _records(extremum(season, "wind", "max", by=by)),
        "deepest": _records(extremum(season, "pressure", "min", by=by)),
        "first_observation": _first_record(first),
        "last_observation": _first_record(last),
        "date_range": {"start": _scalar(start), "end": _scalar(end)},
        "storms_by_month": _coerce_mapping(storms_by_month(season, by=by)),
        "meta": {"package_versions": package_versions()},
    }


def _records(frame: pd.DataFrame) -> list[dict[str, Any]]:
    return [{str(k): _scalar(v) for k, v in row.items()} for row in frame.to_dict(orient="records")]


def _first_record(frame: pd.DataFrame) -> dict[str, Any] | None:
    if frame.empty:
        return None
    cols = [c for c in OBSERVATION_FIELDS if c in frame.columns]
    return _records(frame[cols])[0]


def _coerce_mapping(series: pd.Series) -> dict[str, Any]:
    return {str(k): _scalar(v) for k, v in series.items()}


def _scalar(value: Any) -> Any:
    if value is None or value is pd.NA or value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        return value.isoformat()
    if isinstance(value, (str, bool)):
        return value
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        return str(value)
    if hasattr(value, "item"):
        value = value.item()
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value
