"""Type cleanup and season cutoff for loaded storm tables."""

from __future__ import annotations

import logging

import pandas as pd

from stormstats.data.schema import ISO_TIME_FORMAT

logger = logging.getLogger(__name__)

MAX_REPORTED_ROWS = 10


class CleanError(ValueError):
    """Raised when a loaded table cannot be cleaned without losing rows silently."""


def clean_storms(
    frame: pd.DataFrame,
    *,
    min_season: int = 1970,
    time_format: str = ISO_TIME_FORMAT,
) -> pd.DataFrame:
    """Parse timestamps, derive `month`, and drop seasons before `min_season`.

    Cleaning an already-clean table returns an equal table.
    """

    missing = sorted({"sid", "season", "iso_time"} - set(frame.columns))
    if missing:
        raise CleanError(f"Storm table missing required columns: {missing}")

    out = frame.copy()
    out["iso_time"] = parse_iso_time(out["iso_time"], sids=out["sid"], time_format=time_format)
    out["month"] = out["iso_time"].dt.month.astype("Int64")

    season = pd.to_numeric(out["season"], errors="coerce")
    keep = (season >= int(min_season)).fillna(False).astype(bool)
    dropped = int((~keep).sum())
    out = out.loc[keep]
    if dropped:
        logger.info("Dropped %d observations with season before %d", dropped, int(min_season))

    _check_unique_fixes(out)
    return out.sort_values(["sid", "iso_time"], kind="mergesort").reset_index(drop=True)


def parse_iso_time(
    values: pd.Series,
    *,
    sids: pd.Series | None = None,
    time_format: str = ISO_TIME_FORMAT,
) -> pd.Series:
    if pd.api.types.is_datetime64_any_dtype(values):
        if values.isna().any():
            raise CleanError(f"{int(values.isna().sum())} observation(s) have no timestamp")
        return values

    text = values.astype("string").str.strip()
    parsed = pd.to_datetime(text, format=time_format, errors="coerce")
    bad = parsed.isna().to_numpy(dtype=bool)
    if bad.any():
        rows = []
        for pos in bad.nonzero()[0][:MAX_REPORTED_ROWS]:
            sid = sids.iloc[pos] if sids is not None else None
            rows.append(f"sid={sid} iso_time={text.iloc[pos]!r}")
        raise CleanError(
            f"{int(bad.sum())} timestamp(s) do not match '{time_format}': " + "; ".join(rows)
        )
    return parsed


def _check_unique_fixes(frame: pd.DataFrame) -> None:
    dup = frame.duplicated(subset=["sid", "iso_time"], keep=False)
    if dup.any():
        pairs = frame.loc[dup, ["sid", "iso_time"]].drop_duplicates().head(MAX_REPORTED_ROWS)
        shown = "; ".join(f"{r.sid} @ {r.iso_time}" for r in pairs.itertuples(index=False))
        raise CleanError(f"{int(dup.sum())} observations share a storm id and timestamp: {shown}")
