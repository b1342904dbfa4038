"""
Tests for launch_tracker.models module
"""
import pytest
from datetime import datetime, timezone
from pydantic import TypeAdapter, ValidationError
from launch_tracker.models import (
    FallbackImport,
    FilterCriteria,
    GapReport,
    ClubGap,
    HeaderMappedImport,
    HeaderResolution,
    ParsedImport,
    Shot,
)


class TestShot:
    """Test Shot model"""

    def test_shot_creation_with_club_only(self):
        """Test that every field but club is optional"""
        shot = Shot(club="Driver")

        assert shot.club == "Driver"
        assert shot.session_id is None
        assert shot.timestamp is None
        assert shot.carry_distance_yds is None
        assert shot.smash_factor is None

    def test_shot_requires_club(self):
        """Test that an empty club label is rejected"""
        with pytest.raises(ValidationError):
            Shot(club="")

        with pytest.raises(ValidationError):
            Shot()

    def test_shot_is_immutable(self):
        """Test that shots cannot be modified after creation"""
        shot = Shot(club="7 Iron", carry_distance_yds=160.0)

        with pytest.raises(ValidationError):
            shot.carry_distance_yds = 170.0

    def test_shot_json_round_trip(self, shot_factory):
        """Test that a shot survives JSON serialization unchanged"""
        shot = shot_factory(launch_direction_deg=-1.25, spin_rate_type="Measured")

        restored = Shot.model_validate_json(shot.model_dump_json(exclude_none=True))

        assert restored == shot
        assert restored.timestamp == datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)
        assert restored.attack_angle_deg is None


class TestFilterCriteria:
    """Test FilterCriteria model"""

    def test_defaults_select_everything(self):
        """Test that default criteria apply no restriction"""
        criteria = FilterCriteria()

        assert criteria.session == "ALL"
        assert criteria.clubs == set()
        assert criteria.date_from is None
        assert criteria.date_to is None
        assert criteria.carry_min is None
        assert criteria.carry_max is None
        assert criteria.exclude_outliers is False


class TestImportResults:
    """Test the discriminated import result models"""

    def test_header_resolution_matched_columns(self):
        """Test matched column count ignores unmapped columns"""
        resolution = HeaderResolution(index=3, mapping=["club", None, "carry_distance_yds"], score=4)
        assert resolution.matched_columns == 2

    def test_parsed_import_discriminator(self):
        """Test that the kind field selects the result type"""
        adapter = TypeAdapter(ParsedImport)

        header = adapter.validate_python(
            {"kind": "header-mapped", "shots": [], "rows_considered": 0, "carry_rows": 0, "matched_columns": 0}
        )
        fallback = adapter.validate_python(
            {"kind": "fallback", "shots": [], "rows_considered": 2, "carry_rows": 1}
        )

        assert isinstance(header, HeaderMappedImport)
        assert isinstance(fallback, FallbackImport)


class TestGapReport:
    """Test GapReport helpers"""

    def test_tight_and_wide_views(self):
        """Test that tight and wide properties select flagged gaps"""
        report = GapReport(gaps=[
            ClubGap(longer="Driver", shorter="3 Wood", gap=10.0, tight=True, wide=False),
            ClubGap(longer="3 Wood", shorter="7 Iron", gap=50.0, tight=False, wide=True),
            ClubGap(longer="7 Iron", shorter="8 Iron", gap=14.0, tight=False, wide=False),
        ])

        assert [gap.shorter for gap in report.tight] == ["3 Wood"]
        assert [gap.shorter for gap in report.wide] == ["7 Iron"]
