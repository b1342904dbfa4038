"""
Import pipeline: cell grid -> shots.

The decision between the header-mapped reading and the club-column
fallback is made in two explicit stages:

1. ``parse_header_mapped`` resolves the header row and normalizes every
   data row beneath it.
2. When that mapping is weak (too few recognized columns or too few rows
   with a carry value) and the source is CSV, ``parse_fallback`` is tried
   and whichever yields more carry-valued rows is kept. Ties favour the
   header-mapped result.
"""
import logging
from typing import Any, List, Optional, Sequence

from .config import settings
from .exceptions import NoUsableRowsError
from .fallback_parser import parse_club_column_csv, rows_to_shots
from .headers import resolve_header
from .models import FallbackImport, HeaderMappedImport, ParsedImport, Shot
from .normalizer import normalize_row

logger = logging.getLogger(__name__)

EXPECTED_COLUMNS = (
    "Club", "Club Speed", "Ball Speed", "Smash Factor", "Launch Angle",
    "Spin Rate", "Carry Distance", "Total Distance", "Timestamp",
)


def _carry_rows(shots: Sequence[Shot]) -> int:
    return sum(1 for shot in shots if shot.carry_distance_yds is not None)


def parse_header_mapped(grid: Sequence[Sequence[Any]], session_id: str) -> HeaderMappedImport:
    """Shots from the rows under the best header row"""
    header = resolve_header(grid, settings.header_scan_rows)
    if header.score <= 0:
        return HeaderMappedImport(shots=[], rows_considered=0, carry_rows=0, matched_columns=0)

    first_data_row = header.index + (2 if header.used_two_rows else 1)
    data_rows = grid[first_data_row:]
    shots: List[Shot] = []
    for row in data_rows:
        shot = normalize_row(row, header.mapping, session_id)
        if shot is not None:
            shots.append(shot)

    return HeaderMappedImport(
        shots=shots,
        rows_considered=len(data_rows),
        carry_rows=_carry_rows(shots),
        matched_columns=header.matched_columns,
    )


def parse_fallback(csv_text: Optional[str], session_id: str) -> Optional[FallbackImport]:
    """Shots from the club-column CSV dialect, None when it does not apply"""
    if not csv_text:
        return None
    parsed = parse_club_column_csv(csv_text)
    if parsed is None:
        return None
    header, rows = parsed
    shots = rows_to_shots(header, rows, session_id)
    return FallbackImport(shots=shots, rows_considered=len(rows), carry_rows=_carry_rows(shots))


def is_weak(result: HeaderMappedImport) -> bool:
    """Too few mapped columns, or too few rows carrying a carry distance"""
    if result.matched_columns < settings.min_matched_columns:
        return True
    needed = max(settings.min_carry_rows, settings.min_carry_row_fraction * result.rows_considered)
    return result.carry_rows < needed


def choose_import(grid: Sequence[Sequence[Any]], csv_text: Optional[str], session_id: str) -> ParsedImport:
    """Run both stages and return the better reading.

    Raises:
        NoUsableRowsError: neither reading produced a shot
    """
    result: ParsedImport = parse_header_mapped(grid, session_id)
    if is_weak(result):
        logger.info("Weak header mapping (%d columns, %d carry rows of %d)",
                    result.matched_columns, result.carry_rows, result.rows_considered)
        fallback = parse_fallback(csv_text, session_id)
        if fallback is not None and fallback.carry_rows > result.carry_rows:
            logger.info("Using club-column fallback parser (%d carry rows)", fallback.carry_rows)
            result = fallback

    if not result.shots:
        raise NoUsableRowsError(EXPECTED_COLUMNS)
    return result
