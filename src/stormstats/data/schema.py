"""Storm-track table schema constants."""

from __future__ import annotations

STORM_COLUMNS = [
    "sid",
    "season",
    "number",
    "basin",
    "subbasin",
    "name",
    "iso_time",
    "nature",
    "lat",
    "lon",
    "wind",
    "pressure",
    "agency",
    "track_type",
    "dist2land",
    "landfall",
]

INT_COLUMNS = {"season", "number", "wind", "pressure", "dist2land", "landfall"}
FLOAT_COLUMNS = {"lat", "lon"}
NON_NEGATIVE_COLUMNS = {"wind"}

ISO_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
