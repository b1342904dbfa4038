"""
Data models for the Launch Tracker backend
"""
from datetime import date, datetime
from typing import Annotated, Dict, List, Literal, Optional, Set, Union
from pydantic import BaseModel, ConfigDict, Field

from global_config import ALL_SESSIONS


class Shot(BaseModel):
    """One recorded swing / ball-flight measurement.

    Every numeric field is optional: ``None`` means the launch monitor did not
    report it (or reported something unparsable) and the value is left out of
    aggregates.
    """
    model_config = ConfigDict(frozen=True)

    # Identity
    session_id: Optional[str] = Field(None, description="Import / practice session identifier")
    timestamp: Optional[datetime] = Field(None, description="Shot time (UTC)")

    # Club
    club: str = Field(..., min_length=1, description="Club label as exported")
    swings: Optional[int] = Field(None, description="Swing count")

    # Swing metrics
    club_speed_mph: Optional[float] = None
    attack_angle_deg: Optional[float] = None
    club_path_deg: Optional[float] = None
    club_face_deg: Optional[float] = None
    face_to_path_deg: Optional[float] = None

    # Ball metrics
    ball_speed_mph: Optional[float] = None
    smash_factor: Optional[float] = None

    # Launch metrics
    launch_angle_deg: Optional[float] = None
    launch_direction_deg: Optional[float] = None
    backspin_rpm: Optional[float] = None
    sidespin_rpm: Optional[float] = None
    spin_rate_rpm: Optional[float] = None
    spin_rate_type: Optional[str] = None
    spin_axis_deg: Optional[float] = None
    apex_height_yds: Optional[float] = None

    # Distance metrics
    carry_distance_yds: Optional[float] = None
    carry_deviation_angle_deg: Optional[float] = None
    carry_deviation_distance_yds: Optional[float] = None
    total_distance_yds: Optional[float] = None
    total_deviation_angle_deg: Optional[float] = None
    total_deviation_distance_yds: Optional[float] = None


class ClubRow(BaseModel):
    """Per-club aggregate over a filtered shot set"""
    club: str
    count: int
    avg_carry: Optional[float] = None
    sd_carry: Optional[float] = None
    avg_total: Optional[float] = None
    avg_smash: Optional[float] = None
    avg_spin: Optional[float] = None
    avg_club_speed: Optional[float] = None
    avg_ball_speed: Optional[float] = None
    avg_launch_angle: Optional[float] = None
    avg_face_to_path: Optional[float] = None


class FilterCriteria(BaseModel):
    """Filter state applied to the shot collection"""
    session: str = Field(default=ALL_SESSIONS, description="Session id or 'ALL'")
    clubs: Set[str] = Field(default_factory=set, description="Empty set means every club")
    date_from: Optional[date] = Field(None, description="Inclusive lower bound")
    date_to: Optional[date] = Field(None, description="Upper bound, whole day included")
    carry_min: Optional[float] = None
    carry_max: Optional[float] = None
    exclude_outliers: bool = False


class HeaderResolution(BaseModel):
    """Result of scanning a cell grid for its header row"""
    index: int = 0
    mapping: List[Optional[str]] = Field(default_factory=list, description="Canonical field per column")
    score: int = 0
    used_two_rows: bool = False

    @property
    def matched_columns(self) -> int:
        return sum(1 for field in self.mapping if field)


class HeaderMappedImport(BaseModel):
    """Shots produced from the resolved header row"""
    kind: Literal["header-mapped"] = "header-mapped"
    shots: List[Shot]
    rows_considered: int
    carry_rows: int
    matched_columns: int


class FallbackImport(BaseModel):
    """Shots produced by the club-column CSV fallback parser"""
    kind: Literal["fallback"] = "fallback"
    shots: List[Shot]
    rows_considered: int
    carry_rows: int


ParsedImport = Annotated[Union[HeaderMappedImport, FallbackImport], Field(discriminator="kind")]


class DedupResult(BaseModel):
    """Shots accepted from a batch plus duplicate count"""
    accepted: List[Shot]
    duplicates: int

    @property
    def accepted_count(self) -> int:
        return len(self.accepted)


class ImportSummary(BaseModel):
    """User-facing summary of one import action"""
    filename: str
    source: Literal["header-mapped", "fallback"]
    session_id: str
    imported: int
    duplicates_skipped: int
    total_rows_considered: int


class MetricSummary(BaseModel):
    mean: Optional[float] = None
    n: int = 0
    std: float = 0.0


class FiveNumberSummary(BaseModel):
    min: float
    q1: float
    median: float
    q3: float
    max: float


class ClubDistribution(BaseModel):
    """Box-and-whisker inputs for one club"""
    club: str
    carry: Optional[FiveNumberSummary] = None
    total: Optional[FiveNumberSummary] = None


class ShotShapeSummary(BaseModel):
    draw: int = 0
    straight: int = 0
    fade: int = 0
    unclassified: int = 0
    total: int = 0
    percentages: Dict[str, float] = Field(default_factory=dict)


class ClubCarry(BaseModel):
    club: str
    avg_carry: float
    count: int


class ClubGap(BaseModel):
    longer: str
    shorter: str
    gap: float
    tight: bool
    wide: bool


class GapReport(BaseModel):
    clubs: List[ClubCarry] = Field(default_factory=list)
    gaps: List[ClubGap] = Field(default_factory=list)

    @property
    def tight(self) -> List[ClubGap]:
        return [gap for gap in self.gaps if gap.tight]

    @property
    def wide(self) -> List[ClubGap]:
        return [gap for gap in self.gaps if gap.wide]


class DispersionPoint(BaseModel):
    club: str
    carry: float
    lateral: float
    derived: bool = Field(False, description="Lateral computed from launch direction")


class PersonalRecords(BaseModel):
    best_carry: Optional[Shot] = None
    best_total: Optional[Shot] = None


class ConsistencyLeader(BaseModel):
    club: str
    sd_carry: float
    avg_carry: float


class ProgressPoint(BaseModel):
    index: int
    timestamp: Optional[datetime] = None
    carry: float


class SwingMetricAverages(BaseModel):
    club_path: Optional[float] = None
    attack_angle: Optional[float] = None
    club_face: Optional[float] = None


class ProficiencyScore(BaseModel):
    score: float
    label: str


class CarryBounds(BaseModel):
    min: int = 0
    max: int = 0
