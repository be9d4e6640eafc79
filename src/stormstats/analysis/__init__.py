"""Season filters, wind-threshold classification, and storm aggregates."""

from stormstats.analysis.queries import (
    QueryError,
    average,
    category_totals,
    classify_by_wind_threshold,
    count_storms_reaching,
    date_range,
    extremum,
    filter_by_date_range,
    filter_by_season,
    first_or_last,
    per_year_count,
    season_summary,
    storm_tracks,
    storms_by_month,
    wind_at_least,
)
from stormstats.analysis.summary import build_season_payload

__all__ = [
    "QueryError",
    "filter_by_season",
    "filter_by_date_range",
    "classify_by_wind_threshold",
    "category_totals",
    "count_storms_reaching",
    "wind_at_least",
    "extremum",
    "first_or_last",
    "per_year_count",
    "average",
    "date_range",
    "storm_tracks",
    "season_summary",
    "storms_by_month",
    "build_season_payload",
]
