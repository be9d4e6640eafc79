"""Season filters and per-storm aggregates over a cleaned storm table.

Every query copies its input and returns a new frame or scalar. Null wind and
pressure values never satisfy a comparison, so they drop out of thresholds and
extrema instead of raising. Empty inputs give empty results.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

import pandas as pd

from stormstats.core.types import BUCKET_LABELS, WindThresholds

logger = logging.getLogger(__name__)

Predicate = Callable[[pd.DataFrame], Any]

TRACK_COLUMNS = [
    "sid",
    "name",
    "season",
    "n_obs",
    "first_time",
    "last_time",
    "duration_hours",
    "first_lat",
    "first_lon",
    "last_lat",
    "last_lon",
    "max_wind",
    "min_pressure",
]
SEASON_COLUMNS = ["storms", "named_storms", "hurricanes", "major_hurricanes"]


class QueryError(ValueError):
    """Raised when a query is asked of a column that cannot answer it."""


def filter_by_season(rows: pd.DataFrame, year: int) -> pd.DataFrame:
    season = _numeric(rows, "season")
    out = rows.loc[_mask(season == int(year))].copy()
    logger.debug("Season %d: %d of %d observations", int(year), out.shape[0], rows.shape[0])
    return out


def filter_by_date_range(
    rows: pd.DataFrame,
    start: Any = None,
    end: Any = None,
) -> pd.DataFrame:
    """Rows whose `iso_time` lies within `[start, end]`; either bound may be omitted."""

    times = _datetimes(rows)
    keep = pd.Series(True, index=rows.index)
    if start is not None:
        keep &= _mask(times >= pd.Timestamp(start))
    if end is not None:
        keep &= _mask(times <= pd.Timestamp(end))
    return rows.loc[keep].copy()


def classify_by_wind_threshold(
    rows: pd.DataFrame,
    thresholds: WindThresholds | None = None,
    *,
    by: str = "name",
) -> pd.DataFrame:
    """Count each storm's observations per wind category.

    One row per `(season, by)` storm, one column per category of
    `WindThresholds.buckets()`. Names repeat across years, so grouping always
    includes the season. A storm that strengthened through several categories
    has non-zero counts in each of them, so category membership overlaps across
    its lifetime.
    """

    th = thresholds or WindThresholds()
    _require(rows, by)
    _require(rows, "season")
    if rows.empty:
        index = pd.MultiIndex.from_arrays([[], []], names=["season", by])
        return pd.DataFrame({label: pd.Series(dtype="int64") for label in BUCKET_LABELS}, index=index)

    wind = _numeric(rows, "wind")
    flags = pd.DataFrame(index=rows.index)
    for label, lo, hi in th.buckets():
        flags[label] = ((wind >= lo) & (wind < hi)).astype("int64")
    keys = [rows["season"], rows[by]]
    return flags.groupby(keys, sort=True, dropna=False)[list(BUCKET_LABELS)].sum()


def category_totals(classified: pd.DataFrame) -> pd.Series:
    """Number of storms that reached each category at least once."""

    out = (classified > 0).sum().astype("int64")
    out.name = "storms"
    return out


def count_storms_reaching(rows: pd.DataFrame, threshold: float, *, by: str = "name") -> int:
    """Distinct `(season, by)` storms with an observation at or above `threshold` knots."""

    _require(rows, by)
    _require(rows, "season")
    wind = _numeric(rows, "wind")
    hits = rows.loc[_mask(wind >= float(threshold)), ["season", by]]
    return int(hits.drop_duplicates().shape[0])


def wind_at_least(threshold: float) -> Predicate:
    def predicate(frame: pd.DataFrame) -> pd.Series:
        return _numeric(frame, "wind") >= float(threshold)

    return predicate


def extremum(
    rows: pd.DataFrame,
    column: str,
    kind: str = "max",
    *,
    by: str | None = None,
) -> pd.DataFrame:
    """All rows (or, with `by`, all groups) sharing the extreme value of `column`.

    Without `by` the matching observations are returned whole. With `by` the
    column is reduced per group first and the result has columns `[by, column]`.
    """

    if kind not in {"max", "min"}:
        raise QueryError(f"Unsupported extremum kind '{kind}'. Supported: max|min")
    values = _numeric(rows, column)

    if by is None:
        valid = values.dropna()
        if valid.empty:
            return rows.iloc[0:0].copy()
        target = valid.max() if kind == "max" else valid.min()
        return rows.loc[_mask(values == target)].copy()

    _require(rows, by)
    reduced = values.groupby(rows[by], sort=True, dropna=False).agg(kind).dropna()
    if reduced.empty:
        return pd.DataFrame({by: pd.Series(dtype=rows[by].dtype), column: pd.Series(dtype=float)})
    target = reduced.max() if kind == "max" else reduced.min()
    hits = reduced.loc[reduced == target].rename(column)
    hits.index.name = by
    return hits.reset_index()


def first_or_last(rows: pd.DataFrame, order_column: str, *, last: bool = False) -> pd.DataFrame:
    """The single earliest (or latest, with `last=True`) row by `order_column`."""

    _require(rows, order_column)
    valid = rows.loc[rows[order_column].notna()]
    if valid.empty:
        return rows.iloc[0:0].copy()
    ordered = valid.sort_values(order_column, ascending=not last, kind="mergesort")
    return ordered.head(1).copy()


def per_year_count(
    rows: pd.DataFrame,
    predicate: Predicate | None = None,
    *,
    by: str = "name",
) -> pd.Series:
    """Season -> number of distinct storms with a row satisfying `predicate`.

    Seasons present in `rows` with no qualifying storm report zero.
    """

    _require(rows, by)
    season = _numeric(rows, "season")
    seasons = sorted(int(v) for v in season.dropna().unique())

    if predicate is None:
        keep = pd.Series(True, index=rows.index)
    else:
        result = predicate(rows)
        if isinstance(result, pd.Series) and not result.index.equals(rows.index):
            raise QueryError("Predicate returned a mask whose index does not match the rows")
        keep = _mask(pd.Series(result, index=rows.index))

    hits = rows.loc[keep]
    keys = season.loc[keep].astype("Int64")
    counts = hits[by].groupby(keys, sort=True).nunique(dropna=False) if not hits.empty else pd.Series(dtype="int64")
    out = counts.reindex(seasons, fill_value=0).astype("int64")
    out.index = pd.Index(seasons, dtype="int64", name="season")
    out.name = "storms"
    return out


def average(mapping: Mapping[Any, float] | pd.Series) -> float:
    values = mapping.astype(float) if isinstance(mapping, pd.Series) else pd.Series(dict(mapping), dtype=float)
    if values.empty:
        return float("nan")
    return float(values.mean())


def date_range(rows: pd.DataFrame) -> tuple[pd.Timestamp | None, pd.Timestamp | None]:
    times = _datetimes(rows).dropna()
    if times.empty:
        return None, None
    return pd.Timestamp(times.min()), pd.Timestamp(times.max())


def storm_tracks(rows: pd.DataFrame, *, by: str = "sid") -> pd.DataFrame:
    """One summary row per storm: first/last fix, duration, peak wind, lowest pressure."""

    _require(rows, by)
    for column in ("sid", "name", "season", "lat", "lon", "wind", "pressure"):
        _require(rows, column)
    columns = [by, *[c for c in TRACK_COLUMNS if c != by]]
    if rows.empty:
        return pd.DataFrame(columns=columns)

    times = _datetimes(rows)
    frame = rows.assign(
        iso_time=times,
        _wind=_numeric(rows, "wind"),
        _pres=_numeric(rows, "pressure"),
    ).sort_values([by, "iso_time"], kind="mergesort")

    agg: dict[str, tuple[str, str]] = {
        "sid": ("sid", "first"),
        "name": ("name", "first"),
        "season": ("season", "first"),
        "n_obs": ("iso_time", "size"),
        "first_time": ("iso_time", "first"),
        "last_time": ("iso_time", "last"),
        "max_wind": ("_wind", "max"),
        "min_pressure": ("_pres", "min"),
    }
    agg.pop(by, None)
    summary = frame.groupby(by, sort=True, dropna=False).agg(**agg).reset_index()
    # Positions come from the same fix as first_time/last_time, even when null.
    first_fix = frame.drop_duplicates(by, keep="first")
    last_fix = frame.drop_duplicates(by, keep="last")
    for edge, fixes in (("first", first_fix), ("last", last_fix)):
        summary[f"{edge}_lat"] = fixes["lat"].to_numpy()
        summary[f"{edge}_lon"] = fixes["lon"].to_numpy()
    summary["duration_hours"] = (summary["last_time"] - summary["first_time"]).dt.total_seconds() / 3600.0
    return summary[columns]


def season_summary(
    rows: pd.DataFrame,
    thresholds: WindThresholds | None = None,
    *,
    by: str = "name",
) -> pd.DataFrame:
    """Per-season storm counts at each wind threshold (cumulative, not exclusive)."""

    th = thresholds or WindThresholds()
    out = pd.DataFrame(
        {
            "storms": per_year_count(rows, by=by),
            "named_storms": per_year_count(rows, wind_at_least(th.named_storm), by=by),
            "hurricanes": per_year_count(rows, wind_at_least(th.hurricane), by=by),
            "major_hurricanes": per_year_count(rows, wind_at_least(th.major_hurricane), by=by),
        },
        columns=SEASON_COLUMNS,
    )
    out.index.name = "season"
    return out


def storms_by_month(rows: pd.DataFrame, *, by: str = "name") -> pd.Series:
    """Month -> distinct storms with at least one observation in that month."""

    _require(rows, by)
    if "month" in rows.columns:
        month = _numeric(rows, "month")
    else:
        month = _datetimes(rows).dt.month.astype(float)
    keys = month.astype("Int64")
    if rows.empty:
        out = pd.Series(dtype="int64")
    else:
        out = rows[by].groupby(keys, sort=True).nunique(dropna=False).astype("int64")
    out.index = pd.Index(out.index, dtype="int64", name="month")
    out.name = "storms"
    return out


def _require(rows: pd.DataFrame, column: str) -> None:
    if column not in rows.columns:
        raise QueryError(f"Column '{column}' not found; available: {list(rows.columns)}")


def _numeric(rows: pd.DataFrame, column: str) -> pd.Series:
    """Float view of `column` with nulls as NaN; non-numeric content is an error."""

    _require(rows, column)
    values = rows[column]
    if pd.api.types.is_bool_dtype(values):
        raise QueryError(f"Column '{column}' is boolean, expected numeric")
    if pd.api.types.is_numeric_dtype(values):
        return values.astype(float)

    num = pd.to_numeric(values, errors="coerce")
    bad = values.notna() & num.isna()
    if bad.any():
        sample = values.loc[bad].astype(str).head(3).tolist()
        raise QueryError(f"Column '{column}' has non-numeric values, e.g. {sample}")
    return num.astype(float)


def _datetimes(rows: pd.DataFrame, column: str = "iso_time") -> pd.Series:
    _require(rows, column)
    values = rows[column]
    if not pd.api.types.is_datetime64_any_dtype(values):
        raise QueryError(f"Column '{column}' is {values.dtype}, expected parsed timestamps; clean the table first")
    return values


def _mask(values: pd.Series) -> pd.Series:
    return values.fillna(False).astype(bool)
