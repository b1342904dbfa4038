"""
Raw row -> typed Shot conversion and derived metrics
"""
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError

from global_config import SMASH_FACTOR_MAX, SMASH_FACTOR_MIN
from .coercion import clamp, parse_int, parse_number, parse_text, parse_timestamp
from .headers import NUMERIC_FIELDS, ShotField
from .models import Shot

logger = logging.getLogger(__name__)


def synthesize_session_id(filename: str, imported_at: Optional[datetime] = None) -> str:
    """Batch session id shared by every row of one import lacking its own"""
    moment = imported_at or datetime.now(timezone.utc)
    stem = os.path.splitext(os.path.basename(filename or "import"))[0] or "import"
    return f"{stem}-{moment.strftime('%Y%m%d-%H%M%S')}"


def _coerce(field: ShotField, value: Any) -> Any:
    if field is ShotField.TIMESTAMP:
        return parse_timestamp(value)
    if field is ShotField.SWINGS:
        return parse_int(value)
    if field in NUMERIC_FIELDS:
        return parse_number(value)
    return parse_text(value)


def apply_derived(values: Dict[str, Any]) -> Dict[str, Any]:
    """Fill smash factor and face-to-path when the export omits them.

    Smash is clamped to its physical range whether it was exported or
    derived from ball speed / club speed.
    """
    smash = values.get(ShotField.SMASH_FACTOR.value)
    if smash is None:
        ball = values.get(ShotField.BALL_SPEED.value)
        club = values.get(ShotField.CLUB_SPEED.value)
        if ball is not None and club is not None and club > 0:
            smash = ball / club
    if smash is not None:
        values[ShotField.SMASH_FACTOR.value] = clamp(smash, SMASH_FACTOR_MIN, SMASH_FACTOR_MAX)

    if values.get(ShotField.FACE_TO_PATH.value) is None:
        face = values.get(ShotField.CLUB_FACE.value)
        path = values.get(ShotField.CLUB_PATH.value)
        if face is not None and path is not None:
            values[ShotField.FACE_TO_PATH.value] = face - path
    return values


def build_shot(values: Dict[str, Any], session_id: str) -> Optional[Shot]:
    """Typed Shot from coerced values, None when the row has no club"""
    if not values.get(ShotField.CLUB.value):
        return None
    if not values.get(ShotField.SESSION_ID.value):
        values[ShotField.SESSION_ID.value] = session_id
    apply_derived(values)
    try:
        return Shot(**values)
    except ValidationError as e:
        logger.warning("Skipping row that failed validation: %s", e)
        return None


def normalize_row(row: Sequence[Any], mapping: List[Optional[str]], session_id: str) -> Optional[Shot]:
    """Convert one raw grid row using the resolved column mapping.

    When several columns map to the same field, the first non-missing value
    wins.
    """
    values: Dict[str, Any] = {}
    for col, name in enumerate(mapping):
        if not name or col >= len(row):
            continue
        if values.get(name) is not None:
            continue
        values[name] = _coerce(ShotField(name), row[col])
    return build_shot(values, session_id)
