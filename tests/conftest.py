from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

HEADER = "SID,SEASON,NUMBER,BASIN,SUBBASIN,NAME,ISO_TIME,NATURE,LAT,LON,WMO_WIND,WMO_PRES,WMO_AGENCY,TRACK_TYPE,DIST2LAND,LANDFALL"
UNITS = ",Year,,,,,,,degrees_north,degrees_east,kts,mb,,,km,km"

# (sid, season, number, name, start, peak wind in kt)
ATLANTIC_2012 = [
    ("2012139N33282", 2012, 1, "ALBERTO", "2012-05-19 00:00:00", 50),
    ("2012147N30284", 2012, 2, "BERYL", "2012-05-26 00:00:00", 60),
    ("2012171N37318", 2012, 3, "CHRIS", "2012-06-19 00:00:00", 75),
    ("2012176N26272", 2012, 4, "DEBBY", "2012-06-23 00:00:00", 55),
    ("2012215N12313", 2012, 5, "ERNESTO", "2012-08-01 00:00:00", 85),
    ("2012216N15329", 2012, 6, "FLORENCE", "2012-08-03 00:00:00", 50),
    ("2012228N29305", 2012, 7, "GORDON", "2012-08-15 00:00:00", 95),
    ("2012222N13306", 2012, 8, "HELENE", "2012-08-09 00:00:00", 40),
    ("2012234N16314", 2012, 9, "ISAAC", "2012-08-21 00:00:00", 70),
    ("2012235N12322", 2012, 10, "JOYCE", "2012-08-22 00:00:00", 35),
    ("2012241N26312", 2012, 11, "KIRK", "2012-08-28 00:00:00", 90),
    ("2012243N14327", 2012, 12, "LESLIE", "2012-08-30 00:00:00", 70),
    ("2012247N29318", 2012, 13, "MICHAEL", "2012-09-03 00:00:00", 100),
    ("2012254N15324", 2012, 14, "NADINE", "2012-09-10 00:00:00", 80),
    ("2012277N14324", 2012, 15, "OSCAR", "2012-10-03 00:00:00", 45),
    ("2012285N26289", 2012, 16, "PATTY", "2012-10-11 00:00:00", 40),
    ("2012286N15297", 2012, 17, "RAFAEL", "2012-10-12 00:00:00", 80),
    ("2012296N14283", 2012, 18, "SANDY", "2012-10-22 00:00:00", 100),
    ("2012298N25306", 2012, 19, "TONY", "2012-10-24 00:00:00", 45),
]


def track_lines(sid: str, season: int, number: int, name: str, start: str, winds: list[int | None]) -> list[str]:
    t0 = pd.Timestamp(start)
    lines = []
    for i, w in enumerate(winds):
        t = t0 + pd.Timedelta(hours=6 * i)
        wind = "" if w is None else str(w)
        pres = "" if w is None else str(1012 - w)
        lat = 15.0 + 0.5 * i
        lon = -45.0 - 0.7 * i
        lines.append(
            f"{sid},{season},{number},NA,MM,{name},{t:%Y-%m-%d %H:%M:%S},TS,"
            f"{lat:.1f},{lon:.1f},{wind},{pres},hurdat_atl,main,500,500"
        )
    return lines


def ramp(peak: int) -> list[int]:
    return [25, (25 + peak) // 2, peak, max(peak - 15, 20)]


def write_track_csv(path: Path, lines: list[str]) -> Path:
    path.write_text("\n".join([HEADER, UNITS, *lines]) + "\n", encoding="utf-8")
    return path


def atlantic_lines() -> list[str]:
    lines: list[str] = []
    for sid, season, number, name, start, peak in ATLANTIC_2012:
        winds: list[int | None] = ramp(peak)
        if name == "TONY":
            winds = [*winds, None]
        lines.extend(track_lines(sid, season, number, name, start, winds))
    lines.extend(track_lines("2012183N30280", 2012, 20, "NOT_NAMED", "2012-07-01 00:00:00", [25, 30, 30]))
    lines.extend(track_lines("2011233N15301", 2011, 9, "IRENE", "2011-08-20 00:00:00", [30, 70, 105, 60]))
    lines.extend(track_lines("1969226N18280", 1969, 9, "CAMILLE", "1969-08-14 00:00:00", [50, 150]))
    return lines


@pytest.fixture
def atlantic_csv(tmp_path: Path) -> Path:
    return write_track_csv(tmp_path / "ibtracs_na.csv", atlantic_lines())


@pytest.fixture
def atlantic_row_count() -> int:
    return len(atlantic_lines())
