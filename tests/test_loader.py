from __future__ import annotations

import pandas as pd
import pytest

from conftest import HEADER, UNITS, track_lines, write_track_csv
from stormstats.data.loader import LoadError, load_storms
from stormstats.data.schema import STORM_COLUMNS


def test_load_storms_keeps_every_data_row(atlantic_csv, atlantic_row_count) -> None:
    out = load_storms(atlantic_csv)
    assert int(out.shape[0]) == atlantic_row_count
    assert list(out.columns) == STORM_COLUMNS
    assert "Year" not in set(out["season"].astype(str))


def test_load_storms_assigns_declared_types(atlantic_csv) -> None:
    out = load_storms(atlantic_csv)
    assert str(out["season"].dtype) == "Int64"
    assert str(out["wind"].dtype) == "Int64"
    assert str(out["pressure"].dtype) == "Int64"
    assert pd.api.types.is_float_dtype(out["lat"])
    assert pd.api.types.is_float_dtype(out["lon"])
    assert pd.api.types.is_string_dtype(out["name"])
    # Timestamps stay text until the cleaner parses them.
    assert not pd.api.types.is_datetime64_any_dtype(out["iso_time"])


def test_north_atlantic_basin_code_is_not_missing(atlantic_csv) -> None:
    out = load_storms(atlantic_csv)
    assert out["basin"].notna().all()
    assert set(out["basin"]) == {"NA"}


def test_empty_cells_become_null(tmp_path) -> None:
    csv = write_track_csv(
        tmp_path / "tracks.csv",
        track_lines("2012298N25306", 2012, 19, "TONY", "2012-10-24 00:00:00", [25, None, 45]),
    )
    out = load_storms(csv)
    assert int(out["wind"].isna().sum()) == 1
    assert int(out["pressure"].isna().sum()) == 1
    assert out["wind"].dropna().tolist() == [25, 45]


def test_whitespace_only_cells_become_null(tmp_path) -> None:
    line = "2012298N25306,2012,19,NA,MM,TONY,2012-10-24 00:00:00,TS,15.0,-45.0,  ,1000,hurdat_atl,main, ,500"
    out = load_storms(write_track_csv(tmp_path / "tracks.csv", [line]))
    assert pd.isna(out.loc[0, "wind"])
    assert pd.isna(out.loc[0, "dist2land"])
    assert int(out.loc[0, "pressure"]) == 1000


def test_ragged_row_fails_the_whole_load(tmp_path) -> None:
    good = track_lines("2012247N29318", 2012, 13, "MICHAEL", "2012-09-03 00:00:00", [25, 60])
    short = "2012247N29318,2012,13,NA,MM,MICHAEL,2012-09-03 12:00:00,TS,16.0"
    csv = write_track_csv(tmp_path / "tracks.csv", [*good, short])
    with pytest.raises(LoadError, match="line 5 has 9"):
        load_storms(csv)


def test_row_with_extra_fields_fails(tmp_path) -> None:
    line = track_lines("2012247N29318", 2012, 13, "MICHAEL", "2012-09-03 00:00:00", [25])[0] + ",extra"
    with pytest.raises(LoadError, match="do not have 16 fields"):
        load_storms(write_track_csv(tmp_path / "tracks.csv", [line]))


def test_non_numeric_wind_fails(tmp_path) -> None:
    line = "2012247N29318,2012,13,NA,MM,MICHAEL,2012-09-03 00:00:00,TS,15.0,-45.0,strong,990,hurdat_atl,main,500,500"
    with pytest.raises(LoadError, match="column 'wind'"):
        load_storms(write_track_csv(tmp_path / "tracks.csv", [line]))


def test_na_token_in_numeric_column_is_not_treated_as_missing(tmp_path) -> None:
    line = "2012247N29318,2012,13,NA,MM,MICHAEL,2012-09-03 00:00:00,TS,15.0,-45.0,NA,990,hurdat_atl,main,500,500"
    with pytest.raises(LoadError, match="'NA' is not numeric"):
        load_storms(write_track_csv(tmp_path / "tracks.csv", [line]))


def test_negative_wind_fails(tmp_path) -> None:
    line = "2012247N29318,2012,13,NA,MM,MICHAEL,2012-09-03 00:00:00,TS,15.0,-45.0,-5,990,hurdat_atl,main,500,500"
    with pytest.raises(LoadError, match="is negative"):
        load_storms(write_track_csv(tmp_path / "tracks.csv", [line]))


def test_fractional_integer_column_fails(tmp_path) -> None:
    line = "2012247N29318,2012.5,13,NA,MM,MICHAEL,2012-09-03 00:00:00,TS,15.0,-45.0,40,990,hurdat_atl,main,500,500"
    with pytest.raises(LoadError, match="is not an integer"):
        load_storms(write_track_csv(tmp_path / "tracks.csv", [line]))


def test_header_and_units_only_gives_empty_table(tmp_path) -> None:
    csv = tmp_path / "empty.csv"
    csv.write_text(f"{HEADER}\n{UNITS}\n", encoding="utf-8")
    out = load_storms(csv)
    assert out.empty
    assert list(out.columns) == STORM_COLUMNS


def test_missing_units_row_is_reported(tmp_path) -> None:
    csv = tmp_path / "header_only.csv"
    csv.write_text(f"{HEADER}\n", encoding="utf-8")
    with pytest.raises(LoadError, match="header row"):
        load_storms(csv)


def test_without_units_row_first_line_after_header_is_data(tmp_path) -> None:
    lines = track_lines("2012247N29318", 2012, 13, "MICHAEL", "2012-09-03 00:00:00", [25, 60])
    csv = tmp_path / "no_units.csv"
    csv.write_text("\n".join([HEADER, *lines]) + "\n", encoding="utf-8")
    out = load_storms(csv, skip_units_row=False)
    assert int(out.shape[0]) == 2


def test_missing_file_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_storms(tmp_path / "nope.csv")


def test_invalid_utf8_fails_with_load_error(tmp_path) -> None:
    lines = track_lines("2012247N29318", 2012, 13, "MICHAEL", "2012-09-03 00:00:00", [25])
    csv = tmp_path / "latin1.csv"
    csv.write_bytes("\n".join([HEADER, UNITS, *lines]).encode("utf-8") + b"\n\xff\xfe,2012\n")
    with pytest.raises(LoadError, match="not valid UTF-8"):
        load_storms(csv)
