"""
Tests for launch_tracker.headers module
"""
import pytest
from launch_tracker.headers import ShotField, map_header_cell, normalize_header, resolve_header


class TestNormalizeHeader:
    """Test header text normalization"""

    @pytest.mark.parametrize("raw,expected", [
        ("ClubSpeed", "club speed"),
        ("Club Speed [mph]", "club speed"),
        ("Carry (yds)", "carry"),
        ("carry_distance", "carry distance"),
        ("Launch-Angle", "launch angle"),
        ("  Ball   Speed: ", "ball speed"),
        ("Spin Rate:", "spin rate"),
        (None, ""),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_header(raw) == expected


class TestMapHeaderCell:
    """Test alias table lookups"""

    @pytest.mark.parametrize("raw,field", [
        ("Club", ShotField.CLUB),
        ("Club Name", ShotField.CLUB),
        ("Club Type", ShotField.CLUB),
        ("Carry", ShotField.CARRY),
        ("Carry Distance [yds]", ShotField.CARRY),
        ("TotalDistance", ShotField.TOTAL),
        ("Smash Factor", ShotField.SMASH_FACTOR),
        ("AOA", ShotField.ATTACK_ANGLE),
        ("Date", ShotField.TIMESTAMP),
        ("Session ID", ShotField.SESSION_ID),
        ("carry_distance_yds", ShotField.CARRY),
        ("club_speed_mph", ShotField.CLUB_SPEED),
    ])
    def test_known_aliases(self, raw, field):
        assert map_header_cell(raw) == field

    def test_unknown_header(self):
        assert map_header_cell("Notes") is None
        assert map_header_cell("") is None

    def test_field_values_match_shot_attributes(self):
        """Test every canonical field names a Shot attribute"""
        from launch_tracker.models import Shot
        for field in ShotField:
            assert field.value in Shot.model_fields


class TestResolveHeader:
    """Test best header row detection"""

    def test_header_below_title_block(self, header_grid):
        """Test the header on row 3 is found and mapped"""
        result = resolve_header(header_grid)

        assert result.index == 3
        assert result.used_two_rows is False
        assert result.mapping == [
            "club", "club_speed_mph", "ball_speed_mph", "carry_distance_yds", "total_distance_yds",
        ]
        assert result.score == 7

    def test_two_row_header(self):
        """Test a header split over two rows is joined"""
        grid = [
            ["Session export"],
            [],
            [],
            ["Club", "Club", "Ball"],
            ["", "Speed", "Speed"],
            ["7 Iron", "85", "114"],
        ]

        result = resolve_header(grid)

        assert result.index == 3
        assert result.used_two_rows is True
        assert result.mapping == ["club", "club_speed_mph", "ball_speed_mph"]

    def test_misaligned_two_row_header_is_not_joined(self):
        """Test that joins producing nonsense do not beat the single row"""
        grid = [
            ["Club", "Speed", "Speed"],
            ["", "Club", "Ball"],
            ["7 Iron", "85", "114"],
        ]

        result = resolve_header(grid)

        assert result.index == 0
        assert result.used_two_rows is False
        assert result.mapping == ["club", None, None]

    def test_blank_row_above_header_not_joined(self):
        """Test an empty row above the header does not claim it"""
        grid = [
            [""],
            ["", "", ""],
            ["Club", "Carry", "Total"],
            ["Driver", "230", "250"],
        ]

        result = resolve_header(grid)

        assert result.index == 2
        assert result.used_two_rows is False

    def test_tie_keeps_first_row(self):
        """Test equal scores keep the earliest row"""
        grid = [
            ["Club", "Carry"],
            ["Club", "Total"],
        ]

        result = resolve_header(grid)

        assert result.index == 0
        assert result.mapping == ["club", "carry_distance_yds"]

    def test_no_header(self):
        """Test a grid without recognizable headers"""
        result = resolve_header([["a", "b"], ["1", "2"]])

        assert result.index == 0
        assert result.mapping == []
        assert result.score == 0

    def test_scan_limited_to_max_rows(self):
        """Test headers below the scan window are ignored"""
        grid = [["filler"]] * 25 + [["Club", "Carry", "Total"]]

        assert resolve_header(grid).score == 0
        assert resolve_header(grid, max_rows=30).index == 25
