"""Storm-track CSV loader.

The file carries a header row followed by a units row (``Year,,,...,kts,mb``)
before the first observation. Both are discarded and the fixed names of
``STORM_COLUMNS`` are assigned by position.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Sequence

import numpy as np
import pandas as pd

from stormstats.data.schema import FLOAT_COLUMNS, INT_COLUMNS, NON_NEGATIVE_COLUMNS, STORM_COLUMNS

logger = logging.getLogger(__name__)

MAX_REPORTED_PROBLEMS = 10


class LoadError(ValueError):
    """Raised when a storm-track file cannot be loaded as a whole."""


def load_storms(
    csv_path: str | Path,
    *,
    columns: Sequence[str] | None = None,
    skip_units_row: bool = True,
) -> pd.DataFrame:
    """Read a storm-track CSV into a typed table.

    Only empty cells become missing; tokens such as ``NA`` (the North Atlantic
    basin code) are kept as text. Any row with the wrong number of fields, or a
    numeric column holding a non-numeric token, fails the whole load.
    """

    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(f"Storm track file not found: {path}")

    names = list(columns or STORM_COLUMNS)
    header_rows = 2 if skip_units_row else 1
    line_numbers = _check_field_counts(path, expected=len(names), header_rows=header_rows)

    if not line_numbers:
        logger.info("No observations in %s", path)
        return _coerce_types(pd.DataFrame({c: pd.Series(dtype=str) for c in names}), [], path)

    try:
        raw = pd.read_csv(
            path,
            header=None,
            names=names,
            skiprows=header_rows,
            dtype=str,
            encoding="utf-8",
            keep_default_na=False,
            na_filter=False,
        )
    except (UnicodeDecodeError, pd.errors.ParserError) as exc:
        raise LoadError(f"{path}: cannot parse as CSV: {exc}") from exc
    if raw.shape[0] != len(line_numbers):
        raise LoadError(f"{path}: parsed {raw.shape[0]} rows but found {len(line_numbers)} data records")

    out = _coerce_types(raw, line_numbers, path)
    logger.info("Loaded %d observations (%d storms) from %s", out.shape[0], out["sid"].nunique(), path)
    return out


def _check_field_counts(path: Path, *, expected: int, header_rows: int) -> list[int]:
    """Return the line number of every data record, failing on any ragged row."""

    bad: list[tuple[int, int]] = []
    records: list[int] = []
    try:
        with path.open("r", encoding="utf-8", newline="") as f:
            reader = csv.reader(f)
            for fields in reader:
                if not fields:
                    continue
                if len(fields) != expected:
                    bad.append((reader.line_num, len(fields)))
                records.append(reader.line_num)
    except UnicodeDecodeError as exc:
        raise LoadError(f"{path}: not valid UTF-8 text (byte offset {exc.start}): {exc.reason}") from exc
    except csv.Error as exc:
        raise LoadError(f"{path}: malformed CSV near line {reader.line_num}: {exc}") from exc

    if len(records) < header_rows:
        raise LoadError(f"{path}: expected {header_rows} header row(s), found {len(records)}")
    if bad:
        shown = ", ".join(f"line {line} has {n}" for line, n in bad[:MAX_REPORTED_PROBLEMS])
        more = f" (+{len(bad) - MAX_REPORTED_PROBLEMS} more)" if len(bad) > MAX_REPORTED_PROBLEMS else ""
        raise LoadError(f"{path}: {len(bad)} row(s) do not have {expected} fields: {shown}{more}")
    return records[header_rows:]


def _coerce_types(raw: pd.DataFrame, line_numbers: list[int], path: Path) -> pd.DataFrame:
    problems: list[str] = []
    out: dict[str, pd.Series] = {}

    for col in raw.columns:
        values = raw[col].astype(str).str.strip()
        present = values != ""
        if col not in INT_COLUMNS and col not in FLOAT_COLUMNS:
            text = values.astype("string")
            text[~present] = pd.NA
            out[col] = text
            continue

        num = pd.to_numeric(values, errors="coerce").astype(float)
        invalid = present & ~np.isfinite(num)
        problems.extend(_describe(values, invalid, line_numbers, col, "is not numeric"))
        if col in INT_COLUMNS:
            fractional = present & ~invalid & (num != np.floor(num))
            problems.extend(_describe(values, fractional, line_numbers, col, "is not an integer"))
        if col in NON_NEGATIVE_COLUMNS:
            problems.extend(_describe(values, num < 0, line_numbers, col, "is negative"))

        if problems:
            continue
        out[col] = num.astype("Int64") if col in INT_COLUMNS else num

    if problems:
        shown = "; ".join(problems[:MAX_REPORTED_PROBLEMS])
        more = f" (+{len(problems) - MAX_REPORTED_PROBLEMS} more)" if len(problems) > MAX_REPORTED_PROBLEMS else ""
        raise LoadError(f"{path}: {len(problems)} invalid value(s): {shown}{more}")

    return pd.DataFrame(out, index=raw.index)


def _describe(values: pd.Series, mask: pd.Series, line_numbers: list[int], col: str, what: str) -> list[str]:
    out: list[str] = []
    for pos in np.flatnonzero(mask.to_numpy(dtype=bool)):
        line = line_numbers[pos] if pos < len(line_numbers) else None
        out.append(f"line {line} column '{col}': {values.iloc[pos]!r} {what}")
    return out
