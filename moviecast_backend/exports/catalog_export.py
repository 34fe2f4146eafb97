"""
CSV and Excel exports of the local movie catalog.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from moviecast_backend.models.movies import MovieRecord

EXPORT_COLUMNS = [
    "id",
    "tmdb_id",
    "title",
    "synopsis",
    "release_date",
    "original_language",
    "rating",
    "poster_path",
    "latitude",
    "longitude",
]

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
MAX_COLUMN_WIDTH = 80


def _export_row(movie: MovieRecord) -> list[Any]:
    return [
        movie.id,
        movie.tmdb_id,
        movie.title,
        movie.synopsis,
        movie.release_date.isoformat(),
        movie.original_language,
        movie.rating,
        movie.poster_path,
        movie.latitude,
        movie.longitude,
    ]


def export_filename(extension: str, *, now: datetime | None = None) -> str:
    stamp = (now or datetime.now(timezone.utc)).strftime("%Y%m%d%H%M%S")
    return f"movie_catalog_{stamp}.{extension}"


def export_to_csv_bytes(movies: Iterable[MovieRecord]) -> bytes:
    buffer = io.StringIO(newline="")
    writer = csv.writer(buffer)
    writer.writerow(EXPORT_COLUMNS)
    for movie in movies:
        writer.writerow(_export_row(movie))
    return buffer.getvalue().encode("utf-8")


def export_to_xlsx_bytes(movies: Iterable[MovieRecord]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Movies"
    ws.append(EXPORT_COLUMNS)
    for movie in movies:
        ws.append(_export_row(movie))

    # openpyxl has no autofit; size columns to their longest cell.
    for idx, column in enumerate(ws.iter_cols(values_only=True), start=1):
        width = max(len(str(value)) if value is not None else 0 for value in column)
        ws.column_dimensions[get_column_letter(idx)].width = min(width + 2, MAX_COLUMN_WIDTH)

    out = io.BytesIO()
    wb.save(out)
    return out.getvalue()
