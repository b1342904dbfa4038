"""
Header resolution for launch-monitor exports.

Exports differ in wording, units and layout: some put the header on row 3
under a title block, some split it over two rows ("Club" / "Speed"). Every
header cell is normalized and looked up in a static alias table mapping to
a canonical ``ShotField``.
"""
import logging
import re
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from global_config import HEADER_CLUB_BONUS, HEADER_SCAN_ROWS
from .models import HeaderResolution

logger = logging.getLogger(__name__)


class ShotField(str, Enum):
    """Canonical shot fields; values are the ``Shot`` attribute names"""
    SESSION_ID = "session_id"
    TIMESTAMP = "timestamp"
    CLUB = "club"
    SWINGS = "swings"
    CLUB_SPEED = "club_speed_mph"
    ATTACK_ANGLE = "attack_angle_deg"
    CLUB_PATH = "club_path_deg"
    CLUB_FACE = "club_face_deg"
    FACE_TO_PATH = "face_to_path_deg"
    BALL_SPEED = "ball_speed_mph"
    SMASH_FACTOR = "smash_factor"
    LAUNCH_ANGLE = "launch_angle_deg"
    LAUNCH_DIRECTION = "launch_direction_deg"
    BACKSPIN = "backspin_rpm"
    SIDESPIN = "sidespin_rpm"
    SPIN_RATE = "spin_rate_rpm"
    SPIN_RATE_TYPE = "spin_rate_type"
    SPIN_AXIS = "spin_axis_deg"
    APEX_HEIGHT = "apex_height_yds"
    CARRY = "carry_distance_yds"
    CARRY_DEVIATION_ANGLE = "carry_deviation_angle_deg"
    CARRY_DEVIATION_DISTANCE = "carry_deviation_distance_yds"
    TOTAL = "total_distance_yds"
    TOTAL_DEVIATION_ANGLE = "total_deviation_angle_deg"
    TOTAL_DEVIATION_DISTANCE = "total_deviation_distance_yds"


NUMERIC_FIELDS = frozenset(
    field for field in ShotField
    if field not in (ShotField.SESSION_ID, ShotField.TIMESTAMP, ShotField.CLUB,
                     ShotField.SWINGS, ShotField.SPIN_RATE_TYPE)
)

_CAMEL_RE = re.compile(r"([a-z])([A-Z])")
_BRACKETS_RE = re.compile(r"\[[^\]]*\]")
_PARENS_RE = re.compile(r"\([^)]*\)")
_SEPARATORS_RE = re.compile(r"[_\-]+")
_SPACES_RE = re.compile(r"\s+")


def normalize_header(raw: Any) -> str:
    """'ClubSpeed [mph]' -> 'club speed', 'Carry_Distance:' -> 'carry distance'"""
    text = "" if raw is None else str(raw).strip()
    text = _CAMEL_RE.sub(r"\1 \2", text).lower()
    text = _BRACKETS_RE.sub("", text)
    text = _PARENS_RE.sub("", text)
    text = _SEPARATORS_RE.sub(" ", text)
    text = _SPACES_RE.sub(" ", text).strip()
    if text.endswith(":"):
        text = text[:-1].rstrip()
    return text


_ALIASES: Dict[str, ShotField] = {
    # Identity
    "sessionid": ShotField.SESSION_ID,
    "session id": ShotField.SESSION_ID,
    "session": ShotField.SESSION_ID,
    "timestamp": ShotField.TIMESTAMP,
    "date": ShotField.TIMESTAMP,
    "datetime": ShotField.TIMESTAMP,
    "date time": ShotField.TIMESTAMP,
    "time": ShotField.TIMESTAMP,
    # Club
    "club": ShotField.CLUB,
    "club type": ShotField.CLUB,
    "clubname": ShotField.CLUB,
    "club name": ShotField.CLUB,
    "swings": ShotField.SWINGS,
    # Swing
    "club speed": ShotField.CLUB_SPEED,
    "club head speed": ShotField.CLUB_SPEED,
    "clubhead speed": ShotField.CLUB_SPEED,
    "attack angle": ShotField.ATTACK_ANGLE,
    "angle of attack": ShotField.ATTACK_ANGLE,
    "aoa": ShotField.ATTACK_ANGLE,
    "club path": ShotField.CLUB_PATH,
    "club face": ShotField.CLUB_FACE,
    "face angle": ShotField.CLUB_FACE,
    "face to path": ShotField.FACE_TO_PATH,
    "f2p": ShotField.FACE_TO_PATH,
    # Ball
    "ball speed": ShotField.BALL_SPEED,
    "smash factor": ShotField.SMASH_FACTOR,
    "smash": ShotField.SMASH_FACTOR,
    # Launch
    "launch angle": ShotField.LAUNCH_ANGLE,
    "launch direction": ShotField.LAUNCH_DIRECTION,
    "backspin": ShotField.BACKSPIN,
    "back spin": ShotField.BACKSPIN,
    "sidespin": ShotField.SIDESPIN,
    "side spin": ShotField.SIDESPIN,
    "spin rate": ShotField.SPIN_RATE,
    "total spin": ShotField.SPIN_RATE,
    "spin": ShotField.SPIN_RATE,
    "spin rate type": ShotField.SPIN_RATE_TYPE,
    "spin axis": ShotField.SPIN_AXIS,
    "apex height": ShotField.APEX_HEIGHT,
    "apex": ShotField.APEX_HEIGHT,
    "peak height": ShotField.APEX_HEIGHT,
    # Distance
    "carry distance": ShotField.CARRY,
    "carry": ShotField.CARRY,
    "carry yds": ShotField.CARRY,
    "carry deviation angle": ShotField.CARRY_DEVIATION_ANGLE,
    "carry deviation distance": ShotField.CARRY_DEVIATION_DISTANCE,
    "offline": ShotField.CARRY_DEVIATION_DISTANCE,
    "total distance": ShotField.TOTAL,
    "total": ShotField.TOTAL,
    "total yds": ShotField.TOTAL,
    "total deviation angle": ShotField.TOTAL_DEVIATION_ANGLE,
    "total deviation distance": ShotField.TOTAL_DEVIATION_DISTANCE,
}

# Our own snake_case column names ("carry_distance_yds") map back to themselves
for _field in ShotField:
    _ALIASES.setdefault(normalize_header(_field.value), _field)

ALIASES: Dict[str, ShotField] = dict(_ALIASES)


def map_header_cell(raw: Any) -> Optional[ShotField]:
    """Canonical field for one header cell, None when unrecognized"""
    return ALIASES.get(normalize_header(raw))


def _score(cells: Sequence[Any]) -> tuple:
    mapping = [map_header_cell(cell) for cell in cells]
    score = sum(1 for field in mapping if field is not None)
    if ShotField.CLUB in mapping:
        score += HEADER_CLUB_BONUS
    return mapping, score


def _join_rows(first: Sequence[Any], second: Sequence[Any]) -> List[str]:
    joined = []
    for col, top in enumerate(first):
        bottom = second[col] if col < len(second) else None
        parts = [str(part).strip() for part in (top, bottom)
                 if part is not None and str(part).strip()]
        joined.append(" ".join(parts))
    return joined


def resolve_header(grid: Sequence[Sequence[Any]], max_rows: int = HEADER_SCAN_ROWS) -> HeaderResolution:
    """Find the most plausible header row in the first ``max_rows`` rows.

    Each row is scored alone and joined with the row beneath it. A
    candidate replaces the current best only with a strictly greater score,
    so ties keep the earliest row and the single-row reading. A joined
    reading must also beat the lower row on its own, otherwise a blank
    title row above the real header would win.
    """
    best = HeaderResolution()
    limit = min(max_rows, len(grid))
    for index in range(limit):
        row = grid[index] or []
        mapping, score = _score(row)
        if score > best.score:
            best = HeaderResolution(index=index, mapping=[f.value if f else None for f in mapping],
                                    score=score, used_two_rows=False)
        if index + 1 < len(grid):
            below = grid[index + 1] or []
            combined = _join_rows(row, below)
            mapping, score = _score(combined)
            # A join only counts when the upper row adds something to the lower one
            if score > best.score and score > _score(below)[1]:
                best = HeaderResolution(index=index, mapping=[f.value if f else None for f in mapping],
                                        score=score, used_two_rows=True)

    logger.debug("Header resolved at row %d (score %d, two rows: %s)",
                 best.index, best.score, best.used_two_rows)
    return best
