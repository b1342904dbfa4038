"""
Parser for the club-column CSV dialect.

Some launch monitors write a CSV with quoted, tab-padded cells, a units row
right under the header (``[mph]``, ``[deg]``) and the club split into
"Club Name" and "Club Type" columns. The header resolver does not cope
with that layout well, so it is read here line by line.
"""
import logging
import re
from typing import Dict, List, Optional, Sequence, Tuple

from .coercion import parse_number, parse_text, parse_timestamp
from .headers import NUMERIC_FIELDS, ShotField, normalize_header
from .models import Shot
from .normalizer import build_shot

logger = logging.getLogger(__name__)

_UNITS_RE = re.compile(r"\[[^\]]*\]")

# Header words accepted per field, tried in column order
FIELD_ALIASES: Dict[ShotField, Tuple[str, ...]] = {
    ShotField.TIMESTAMP: ("date", "timestamp", "datetime"),
    ShotField.CLUB_SPEED: ("club speed",),
    ShotField.ATTACK_ANGLE: ("attack angle",),
    ShotField.CLUB_PATH: ("club path",),
    ShotField.CLUB_FACE: ("club face",),
    ShotField.FACE_TO_PATH: ("face to path",),
    ShotField.BALL_SPEED: ("ball speed",),
    ShotField.SMASH_FACTOR: ("smash factor", "smash"),
    ShotField.LAUNCH_ANGLE: ("launch angle",),
    ShotField.LAUNCH_DIRECTION: ("launch direction",),
    ShotField.BACKSPIN: ("backspin",),
    ShotField.SIDESPIN: ("sidespin",),
    ShotField.SPIN_RATE: ("spin rate",),
    ShotField.SPIN_RATE_TYPE: ("spin rate type",),
    ShotField.SPIN_AXIS: ("spin axis",),
    ShotField.APEX_HEIGHT: ("apex height",),
    ShotField.CARRY: ("carry distance", "carry"),
    ShotField.CARRY_DEVIATION_ANGLE: ("carry deviation angle",),
    ShotField.CARRY_DEVIATION_DISTANCE: ("carry deviation distance",),
    ShotField.TOTAL: ("total distance", "total"),
    ShotField.TOTAL_DEVIATION_ANGLE: ("total deviation angle",),
    ShotField.TOTAL_DEVIATION_DISTANCE: ("total deviation distance",),
}

CLUB_NAME_ALIASES = ("club name", "clubname")
CLUB_TYPE_ALIASES = ("club type", "club")


def _split(line: str) -> List[str]:
    return line.replace("\t", "").replace('"', "").strip().split(",")


def parse_club_column_csv(text: str) -> Optional[Tuple[List[str], List[List[str]]]]:
    """Split CSV text into (header, data rows), or None without a club column"""
    lines = [line for line in re.split(r"\r?\n", text or "") if line.strip()]
    if not lines:
        return None

    header = [cell.strip() for cell in _split(lines[0])]
    if not any("club" in cell.lower() for cell in header):
        return None

    has_units = len(lines) > 1 and any(_UNITS_RE.search(cell) for cell in _split(lines[1]))
    rows = [_split(line) for line in lines[2 if has_units else 1:]]
    return header, rows


def _find_column(header: Sequence[str], aliases: Sequence[str]) -> int:
    wanted = {normalize_header(alias) for alias in aliases}
    for col, cell in enumerate(header):
        if normalize_header(cell) in wanted:
            return col
    return -1


def _cell(row: Sequence[str], col: int) -> Optional[str]:
    if col < 0 or col >= len(row):
        return None
    return row[col]


def _club_label(club_type: Optional[str], club_name: Optional[str]) -> Optional[str]:
    kind = (club_type or "").strip()
    name = (club_name or "").strip()
    if not kind:
        return name or None
    if name and name.lower() not in kind.lower():
        return f"{name} {kind}"
    return kind


def rows_to_shots(header: Sequence[str], rows: Sequence[Sequence[str]], session_id: str) -> List[Shot]:
    """Map club-column rows to shots; rows without a club are skipped"""
    columns = {field: _find_column(header, aliases) for field, aliases in FIELD_ALIASES.items()}
    name_col = _find_column(header, CLUB_NAME_ALIASES)
    type_col = _find_column(header, CLUB_TYPE_ALIASES)

    shots = []
    for row in rows:
        club = _club_label(_cell(row, type_col), _cell(row, name_col))
        if not club:
            continue

        values = {ShotField.CLUB.value: club}
        for field, col in columns.items():
            raw = _cell(row, col)
            if field is ShotField.TIMESTAMP:
                values[field.value] = parse_timestamp(raw)
            elif field in NUMERIC_FIELDS:
                values[field.value] = parse_number(raw)
            else:
                values[field.value] = parse_text(raw)

        shot = build_shot(values, session_id)
        if shot is not None:
            shots.append(shot)

    logger.debug("Fallback parser produced %d shots from %d rows", len(shots), len(rows))
    return shots
