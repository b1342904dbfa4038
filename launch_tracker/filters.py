"""
Filter engine over the shot collection.

All predicates are AND-combined and pure: the input list is never modified.
"""
import logging
import math
from datetime import datetime, time, timedelta, timezone
from typing import List, Optional, Sequence

from global_config import ALL_SESSIONS
from .config import settings
from .models import FilterCriteria, Shot
from .stats import defined, sigma_bounds

logger = logging.getLogger(__name__)

OUTLIER_METRICS = ("carry_distance_yds", "smash_factor")


def _day_start(day) -> datetime:
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def _carry_key(shot: Shot) -> float:
    # Missing carry compares as -inf against carry bounds
    return shot.carry_distance_yds if shot.carry_distance_yds is not None else -math.inf


def _matches(shot: Shot, criteria: FilterCriteria) -> bool:
    if criteria.session != ALL_SESSIONS and shot.session_id != criteria.session:
        return False
    if criteria.clubs and shot.club not in criteria.clubs:
        return False

    if shot.timestamp is not None:
        if criteria.date_from is not None and shot.timestamp < _day_start(criteria.date_from):
            return False
        if criteria.date_to is not None and shot.timestamp >= _day_start(criteria.date_to + timedelta(days=1)):
            return False

    carry = _carry_key(shot)
    if criteria.carry_min is not None and carry < criteria.carry_min:
        return False
    if criteria.carry_max is not None and carry > criteria.carry_max:
        return False
    return True


def outlier_bounds(shots: Sequence[Shot], sigma: Optional[float] = None,
                   min_points: Optional[int] = None) -> dict:
    """Inclusive (low, high) per metric; metrics with too few values are absent"""
    sigma = settings.outlier_sigma if sigma is None else sigma
    min_points = settings.outlier_min_points if min_points is None else min_points
    bounds = {}
    for metric in OUTLIER_METRICS:
        values = defined(getattr(shot, metric) for shot in shots)
        limits = sigma_bounds(values, sigma, min_points)
        if limits is not None:
            bounds[metric] = limits
    return bounds


def exclude_outliers(shots: Sequence[Shot], sigma: Optional[float] = None,
                     min_points: Optional[int] = None) -> List[Shot]:
    """Drop shots outside the sigma bounds of any metric; missing values stay"""
    bounds = outlier_bounds(shots, sigma, min_points)
    if not bounds:
        return list(shots)

    kept = []
    for shot in shots:
        inside = True
        for metric, (low, high) in bounds.items():
            value = getattr(shot, metric)
            if value is not None and not (low <= value <= high):
                inside = False
                break
        if inside:
            kept.append(shot)
    logger.debug("Outlier exclusion kept %d of %d shots", len(kept), len(shots))
    return kept


def filter_shots(shots: Sequence[Shot], criteria: FilterCriteria) -> List[Shot]:
    """Shots matching every criterion, outliers removed when toggled on"""
    pool = [shot for shot in shots if _matches(shot, criteria)]
    if criteria.exclude_outliers:
        pool = exclude_outliers(pool)
    return pool


def gapping_pool(shots: Sequence[Shot], criteria: FilterCriteria) -> List[Shot]:
    """Same filter without the club restriction, so gaps cover the whole bag"""
    return filter_shots(shots, criteria.model_copy(update={"clubs": set()}))
