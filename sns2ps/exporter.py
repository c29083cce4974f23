"""PractiScore registration CSV export.

The column set and order are the import contract with PractiScore. Any
change to HEADER must bump SCHEMA_VERSION.
"""

import bisect
import csv
import io
from collections.abc import Iterable

import structlog

from sns2ps.exceptions import ExportError
from sns2ps.models import ResolvedCompetitor

logger = structlog.get_logger(__name__)

SCHEMA_VERSION = "1"

HEADER: tuple[str, ...] = (
    "Member Number",
    "First Name",
    "Last Name",
    "Email",
    "Division",
    "Class",
    "Power Factor",
    "Category",
    "Region",
    "Squad",
)


def competitor_row(competitor: ResolvedCompetitor) -> list[str]:
    """Returns the CSV fields for one competitor, in HEADER order."""
    values = (
        competitor.member_number,
        competitor.first_name,
        competitor.last_name,
        competitor.email,
        competitor.division_name,
        competitor.classification,
        competitor.power_factor,
        competitor.category_name,
        competitor.region_name,
        competitor.squad_name,
    )
    return ["" if v is None else str(v) for v in values]


def csv_rows(competitors: Iterable[ResolvedCompetitor]) -> list[list[str]]:
    """Builds the header row followed by one row per competitor."""
    rows = [list(HEADER)]
    rows.extend(competitor_row(c) for c in competitors)
    return rows


def render_csv(rows: Iterable[list[str]]) -> bytes:
    """Renders rows as UTF-8 CSV.

    The whole document is rendered into memory before encoding, so a failure
    never hands a partial file to the caller.

    Raises:
        ExportError: If a field cannot be encoded.
    """
    buffer = io.StringIO()
    # CRLF terminator so that fields holding a bare "\r" are quoted too.
    writer = csv.writer(buffer, lineterminator="\r\n")
    row_ends: list[int] = []
    offset = 0
    for row in rows:
        offset += writer.writerow(row)
        row_ends.append(offset)
    count = len(row_ends)

    try:
        content = buffer.getvalue().encode("utf-8")
    except UnicodeEncodeError as e:
        row_number = bisect.bisect_right(row_ends, e.start) + 1
        logger.error("csv_encode_failed", row=row_number, error=str(e))
        raise ExportError(
            f"Failed to encode CSV row {row_number}: {e.reason}", row=row_number
        ) from e

    logger.debug("csv_rendered", rows=count, size=len(content))
    return content


def export_filename(match_name: str) -> str:
    """File name for a match export, e.g. "Spring Classic" -> "Spring_Classic.csv"."""
    return f"{match_name}.csv".replace(" ", "_")
