"""Load-and-clean orchestration shared by the CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd

from stormstats.data.cleaner import clean_storms
from stormstats.data.loader import load_storms


def load_clean_table(csv_path: str | Path, cfg: dict[str, Any]) -> pd.DataFrame:
    loaded = load_storms(csv_path, skip_units_row=bool(cfg["loader"]["skip_units_row"]))
    return clean_storms(
        loaded,
        min_season=int(cfg["cleaner"]["min_season"]),
        time_format=str(cfg["cleaner"]["time_format"]),
    )
