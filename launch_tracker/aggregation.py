"""
Aggregation engine: per-club tables, distributions, shot shape, gapping,
dispersion and the summary cards built on top of a filtered shot list.

Every function is pure and tolerant of missing fields; a metric with no
defined values yields ``None`` rather than zero.
"""
import math
from collections import OrderedDict
from typing import Dict, List, Optional, Sequence

from global_config import ALL_SESSIONS, CONSISTENCY_MIN_SHOTS
from .clubs import order_index, sort_clubs
from .config import settings
from .models import (
    CarryBounds,
    ClubCarry,
    ClubDistribution,
    ClubGap,
    ClubRow,
    ConsistencyLeader,
    DispersionPoint,
    GapReport,
    MetricSummary,
    PersonalRecords,
    ProficiencyScore,
    ProgressPoint,
    Shot,
    ShotShapeSummary,
    SwingMetricAverages,
)
from .stats import defined, five_number_summary, mean, stddev

# Carry/total yardage by skill level: Beginner, Average, Good, Advanced, Tour
BENCHMARKS: Dict[str, Dict[str, float]] = {
    "Driver": {"Beginner": 170, "Average": 200, "Good": 230, "Advanced": 260, "Tour": 295},
    "3 Wood": {"Beginner": 155, "Average": 180, "Good": 205, "Advanced": 230, "Tour": 260},
    "4 Hybrid": {"Beginner": 145, "Average": 170, "Good": 190, "Advanced": 210, "Tour": 230},
    "5 Hybrid": {"Beginner": 135, "Average": 160, "Good": 180, "Advanced": 200, "Tour": 220},
    "6 Iron": {"Beginner": 125, "Average": 150, "Good": 170, "Advanced": 185, "Tour": 205},
    "7 Iron": {"Beginner": 115, "Average": 140, "Good": 160, "Advanced": 175, "Tour": 195},
    "8 Iron": {"Beginner": 105, "Average": 130, "Good": 150, "Advanced": 165, "Tour": 180},
    "9 Iron": {"Beginner": 95, "Average": 120, "Good": 140, "Advanced": 155, "Tour": 170},
    "Pitching Wedge": {"Beginner": 85, "Average": 110, "Good": 130, "Advanced": 145, "Tour": 160},
    "Lob Wedge": {"Beginner": 65, "Average": 85, "Good": 100, "Advanced": 110, "Tour": 120},
}

_BENCHMARK_BY_INDEX = {order_index(club): levels for club, levels in BENCHMARKS.items()}

PROFICIENCY_LABELS = (
    (20, "Beginner"),
    (40, "Average"),
    (60, "Good"),
    (80, "Advanced"),
)


def group_by_club(shots: Sequence[Shot]) -> "OrderedDict[str, List[Shot]]":
    """Shots per club label, in bag order"""
    groups: Dict[str, List[Shot]] = {}
    for shot in shots:
        groups.setdefault(shot.club, []).append(shot)
    return OrderedDict((club, groups[club]) for club in sort_clubs(groups))


def _avg(shots: Sequence[Shot], attr: str) -> Optional[float]:
    return mean(defined(getattr(shot, attr) for shot in shots))


def club_rows(shots: Sequence[Shot]) -> List[ClubRow]:
    rows = []
    for club, group in group_by_club(shots).items():
        carries = defined(shot.carry_distance_yds for shot in group)
        rows.append(ClubRow(
            club=club,
            count=len(group),
            avg_carry=mean(carries),
            sd_carry=stddev(carries) if carries else None,
            avg_total=_avg(group, "total_distance_yds"),
            avg_smash=_avg(group, "smash_factor"),
            avg_spin=_avg(group, "spin_rate_rpm"),
            avg_club_speed=_avg(group, "club_speed_mph"),
            avg_ball_speed=_avg(group, "ball_speed_mph"),
            avg_launch_angle=_avg(group, "launch_angle_deg"),
            avg_face_to_path=_avg(group, "face_to_path_deg"),
        ))
    return rows


def club_distributions(shots: Sequence[Shot]) -> List[ClubDistribution]:
    """Box-and-whisker summaries of carry and total per club"""
    return [
        ClubDistribution(
            club=club,
            carry=five_number_summary(defined(s.carry_distance_yds for s in group)),
            total=five_number_summary(defined(s.total_distance_yds for s in group)),
        )
        for club, group in group_by_club(shots).items()
    ]


def _direction(shot: Shot) -> Optional[float]:
    for value in (shot.launch_direction_deg, shot.spin_axis_deg, shot.club_face_deg):
        if value is not None:
            return value
    return None


def shot_shape(shots: Sequence[Shot], straight_deg: Optional[float] = None) -> ShotShapeSummary:
    """Draw / straight / fade split.

    The directional signal is launch direction, else spin axis, else club
    face. Negative beyond the straight band is a draw, positive a fade.
    """
    band = settings.shape_straight_deg if straight_deg is None else straight_deg
    counts = {"draw": 0, "straight": 0, "fade": 0, "unclassified": 0}
    for shot in shots:
        signal = _direction(shot)
        if signal is None:
            counts["unclassified"] += 1
        elif signal < -band:
            counts["draw"] += 1
        elif signal > band:
            counts["fade"] += 1
        else:
            counts["straight"] += 1

    total = len(shots)
    percentages = {
        key: (100.0 * count / total if total else 0.0) for key, count in counts.items()
    }
    return ShotShapeSummary(total=total, percentages=percentages, **counts)


def gap_report(shots: Sequence[Shot], tight_yds: Optional[float] = None,
               wide_yds: Optional[float] = None) -> GapReport:
    """Carry gaps between adjacent clubs in bag order.

    Pass the gapping pool (club filter removed) so the whole bag is covered.
    """
    tight_yds = settings.gap_tight_yds if tight_yds is None else tight_yds
    wide_yds = settings.gap_wide_yds if wide_yds is None else wide_yds

    carries = []
    for club, group in group_by_club(shots).items():
        values = defined(s.carry_distance_yds for s in group)
        if values:
            carries.append(ClubCarry(club=club, avg_carry=mean(values), count=len(values)))

    gaps = []
    for longer, shorter in zip(carries, carries[1:]):
        gap = abs(longer.avg_carry - shorter.avg_carry)
        gaps.append(ClubGap(
            longer=longer.club,
            shorter=shorter.club,
            gap=gap,
            tight=gap < tight_yds,
            wide=gap > wide_yds,
        ))
    return GapReport(clubs=carries, gaps=gaps)


def dispersion_points(shots: Sequence[Shot]) -> List[DispersionPoint]:
    """(carry, lateral) per shot; lateral derived from launch direction if absent"""
    points = []
    for shot in shots:
        carry = shot.carry_distance_yds
        if carry is None:
            continue
        if shot.carry_deviation_distance_yds is not None:
            points.append(DispersionPoint(club=shot.club, carry=carry,
                                          lateral=shot.carry_deviation_distance_yds))
        elif shot.launch_direction_deg is not None:
            lateral = carry * math.sin(math.radians(shot.launch_direction_deg))
            points.append(DispersionPoint(club=shot.club, carry=carry, lateral=lateral, derived=True))
    return points


def _summary(values: List[float]) -> MetricSummary:
    return MetricSummary(mean=mean(values), n=len(values), std=stddev(values))


def kpis(shots: Sequence[Shot]) -> Dict[str, MetricSummary]:
    return {
        "carry": _summary(defined(s.carry_distance_yds for s in shots)),
        "ball_speed": _summary(defined(s.ball_speed_mph for s in shots)),
        "club_speed": _summary(defined(s.club_speed_mph for s in shots)),
        "smash": _summary(defined(s.smash_factor for s in shots)),
    }


def personal_records(shots: Sequence[Shot]) -> PersonalRecords:
    """Longest carry and longest total; the first shot wins a tie"""
    best_carry = None
    best_total = None
    for shot in shots:
        if shot.carry_distance_yds is not None and (
                best_carry is None or shot.carry_distance_yds > best_carry.carry_distance_yds):
            best_carry = shot
        if shot.total_distance_yds is not None and (
                best_total is None or shot.total_distance_yds > best_total.total_distance_yds):
            best_total = shot
    return PersonalRecords(best_carry=best_carry, best_total=best_total)


def consistency_leader(shots: Sequence[Shot], min_shots: int = CONSISTENCY_MIN_SHOTS) -> Optional[ConsistencyLeader]:
    """Club with the lowest carry std-dev among clubs with enough carries"""
    leader = None
    for club, group in group_by_club(shots).items():
        carries = defined(s.carry_distance_yds for s in group)
        if len(carries) < min_shots:
            continue
        sd = stddev(carries)
        if leader is None or sd < leader.sd_carry:
            leader = ConsistencyLeader(club=club, sd_carry=sd, avg_carry=mean(carries))
    return leader


def progress_series(shots: Sequence[Shot]) -> List[ProgressPoint]:
    """Carry over time when the pool holds exactly one club.

    Timed shots come first in time order, untimed ones follow in input
    order. ``index`` is the 1-based position in the input.
    """
    if len({shot.club for shot in shots}) != 1:
        return []
    points = [
        ProgressPoint(index=i, timestamp=shot.timestamp, carry=shot.carry_distance_yds)
        for i, shot in enumerate(shots, start=1)
        if shot.carry_distance_yds is not None
    ]
    timed = sorted((p for p in points if p.timestamp is not None), key=lambda p: p.timestamp)
    untimed = [p for p in points if p.timestamp is None]
    return timed + untimed


def swing_metric_averages(shots: Sequence[Shot]) -> SwingMetricAverages:
    return SwingMetricAverages(
        club_path=_avg(shots, "club_path_deg"),
        attack_angle=_avg(shots, "attack_angle_deg"),
        club_face=_avg(shots, "club_face_deg"),
    )


def benchmark_for(club: str) -> Optional[Dict[str, float]]:
    """Benchmark levels for a club label in any spelling ("7i", "7 Iron")"""
    return _BENCHMARK_BY_INDEX.get(order_index(club))


def proficiency_score(shots: Sequence[Shot]) -> ProficiencyScore:
    """0-100 placement of each club's average distance between Beginner and Tour.

    Uses total distance, else carry. Clubs without a benchmark are ignored.
    """
    distances: Dict[str, List[float]] = {}
    for shot in shots:
        value = shot.total_distance_yds if shot.total_distance_yds is not None else shot.carry_distance_yds
        if value is not None:
            distances.setdefault(shot.club, []).append(value)

    scores = []
    for club, values in distances.items():
        levels = benchmark_for(club)
        if levels is None:
            continue
        low, high = levels["Beginner"], levels["Tour"]
        scores.append(max(0.0, min(100.0, (mean(values) - low) / (high - low) * 100)))

    if not scores:
        return ProficiencyScore(score=0.0, label="Beginner")
    overall = sum(scores) / len(scores)
    label = next((name for limit, name in PROFICIENCY_LABELS if overall < limit), "Tour")
    return ProficiencyScore(score=overall, label=label)


def carry_bounds(shots: Sequence[Shot]) -> CarryBounds:
    carries = defined(s.carry_distance_yds for s in shots)
    if not carries:
        return CarryBounds()
    return CarryBounds(min=math.floor(min(carries)), max=math.ceil(max(carries)))


def sessions(shots: Sequence[Shot]) -> List[str]:
    """Session choices, 'ALL' first"""
    ids = sorted({shot.session_id for shot in shots if shot.session_id})
    return [ALL_SESSIONS] + ids


def clubs(shots: Sequence[Shot]) -> List[str]:
    return sort_clubs({shot.club for shot in shots})
