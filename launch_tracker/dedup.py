"""
Duplicate detection across imports
"""
from typing import Iterable, Optional, Sequence

from global_config import (
    FINGERPRINT_DISTANCE_DECIMALS,
    FINGERPRINT_SEPARATOR,
    FINGERPRINT_SPIN_DECIMALS,
)
from .coercion import epoch_millis
from .models import DedupResult, Shot


def _fixed(value: Optional[float], decimals: int) -> str:
    if value is None:
        return ""
    return f"{value:.{decimals}f}"


def fingerprint(shot: Shot) -> str:
    """Deterministic key over club, the main ball-flight numbers and time"""
    millis = epoch_millis(shot.timestamp)
    parts = [
        shot.club.strip().lower(),
        _fixed(shot.carry_distance_yds, FINGERPRINT_DISTANCE_DECIMALS),
        _fixed(shot.total_distance_yds, FINGERPRINT_DISTANCE_DECIMALS),
        _fixed(shot.ball_speed_mph, FINGERPRINT_DISTANCE_DECIMALS),
        _fixed(shot.club_speed_mph, FINGERPRINT_DISTANCE_DECIMALS),
        _fixed(shot.launch_angle_deg, FINGERPRINT_DISTANCE_DECIMALS),
        _fixed(shot.spin_rate_rpm, FINGERPRINT_SPIN_DECIMALS),
        _fixed(shot.launch_direction_deg, FINGERPRINT_DISTANCE_DECIMALS),
        _fixed(shot.apex_height_yds, FINGERPRINT_DISTANCE_DECIMALS),
        "" if millis is None else str(millis),
    ]
    return FINGERPRINT_SEPARATOR.join(parts)


def deduplicate(batch: Sequence[Shot], existing: Iterable[Shot]) -> DedupResult:
    """Shots of ``batch`` not already in ``existing`` nor earlier in the batch"""
    seen = {fingerprint(shot) for shot in existing}
    accepted = []
    duplicates = 0
    for shot in batch:
        key = fingerprint(shot)
        if key in seen:
            duplicates += 1
            continue
        seen.add(key)
        accepted.append(shot)
    return DedupResult(accepted=accepted, duplicates=duplicates)
