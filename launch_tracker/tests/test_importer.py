"""
Tests for launch_tracker.importer module
"""
import pytest
from unittest.mock import patch
from launch_tracker.exceptions import NoUsableRowsError
from launch_tracker.importer import choose_import, is_weak, parse_fallback, parse_header_mapped
from launch_tracker.models import FallbackImport, HeaderMappedImport
from launch_tracker.workbook import read_grid


STRONG_GRID = [
    ["Club", "Club Speed", "Ball Speed", "Launch Angle", "Spin Rate", "Carry", "Total"],
    ["Driver", "104", "152", "12.5", "2600", "236", "258"],
    ["Driver", "105", "154", "13.0", "2500", "241", "262"],
    ["7 Iron", "85", "114", "18.0", "6400", "160", "170"],
    ["7 Iron", "84", "113", "17.5", "6500", "", "168"],
]


class TestParseHeaderMapped:
    """Test the header-mapped stage"""

    def test_rows_below_header(self, header_grid):
        result = parse_header_mapped(header_grid, "batch")

        assert result.kind == "header-mapped"
        assert result.rows_considered == 3
        assert result.carry_rows == 3
        assert result.matched_columns == 5
        assert [shot.club for shot in result.shots] == ["7 Iron", "7 Iron", "Driver"]
        assert result.shots[0].club_speed_mph == 85.1

    def test_two_row_header_skips_both_rows(self):
        grid = [
            ["Club", "Club", "Ball", "Carry"],
            ["", "Speed", "Speed", ""],
            ["7 Iron", "85", "114", "160"],
        ]

        result = parse_header_mapped(grid, "batch")

        assert result.rows_considered == 1
        assert result.shots[0].club == "7 Iron"
        assert result.shots[0].ball_speed_mph == 114.0

    def test_no_header(self):
        result = parse_header_mapped([["x", "y"], ["1", "2"]], "batch")

        assert result.shots == []
        assert result.matched_columns == 0


class TestIsWeak:
    """Test the weak mapping rule"""

    def _result(self, matched, carry, rows):
        return HeaderMappedImport(shots=[], rows_considered=rows, carry_rows=carry, matched_columns=matched)

    def test_too_few_columns(self):
        assert is_weak(self._result(matched=5, carry=100, rows=100)) is True

    def test_too_few_carry_rows(self):
        """Test at least max(3, 25% of rows) carry values are needed"""
        assert is_weak(self._result(matched=7, carry=4, rows=20)) is True
        assert is_weak(self._result(matched=7, carry=5, rows=20)) is False
        assert is_weak(self._result(matched=7, carry=2, rows=4)) is True
        assert is_weak(self._result(matched=7, carry=3, rows=4)) is False


class TestChooseImport:
    """Test the header-mapped vs fallback decision"""

    def test_strong_mapping_skips_fallback(self):
        with patch("launch_tracker.importer.parse_fallback") as fallback:
            result = choose_import(STRONG_GRID, "ignored", "batch")

        assert isinstance(result, HeaderMappedImport)
        assert len(result.shots) == 4
        assert result.carry_rows == 3
        fallback.assert_not_called()

    def test_weak_mapping_uses_better_fallback(self, shot_factory):
        header = HeaderMappedImport(shots=[shot_factory()], rows_considered=10, carry_rows=1, matched_columns=3)
        fallback = FallbackImport(shots=[shot_factory(carry_distance_yds=150.0 + i) for i in range(4)],
                                  rows_considered=10, carry_rows=4)

        with patch("launch_tracker.importer.parse_header_mapped", return_value=header), \
                patch("launch_tracker.importer.parse_fallback", return_value=fallback):
            result = choose_import([], "csv text", "batch")

        assert result.kind == "fallback"
        assert len(result.shots) == 4

    def test_tie_favours_header(self, shot_factory):
        header = HeaderMappedImport(shots=[shot_factory()], rows_considered=10, carry_rows=1, matched_columns=3)
        fallback = FallbackImport(shots=[shot_factory()], rows_considered=10, carry_rows=1)

        with patch("launch_tracker.importer.parse_header_mapped", return_value=header), \
                patch("launch_tracker.importer.parse_fallback", return_value=fallback):
            result = choose_import([], "csv text", "batch")

        assert result.kind == "header-mapped"

    def test_weak_mapping_without_csv_keeps_header(self, header_grid):
        result = choose_import(header_grid, None, "batch")

        assert result.kind == "header-mapped"
        assert len(result.shots) == 3

    def test_no_usable_rows(self):
        with pytest.raises(NoUsableRowsError) as exc_info:
            choose_import([["x", "y"], ["1", "2"]], "x,y\n1,2\n", "batch")

        assert "Carry Distance" in str(exc_info.value)
        assert "Club" in exc_info.value.expected_columns

    def test_club_column_csv_end_to_end(self):
        """Test a quoted export with a units row imports through the pipeline"""
        text = (
            '"Date","Club Name","Club Type","Club Speed","Ball Speed","Launch Angle","Carry Distance","Total Distance"\n'
            '"","","","[mph]","[mph]","[deg]","[yds]","[yds]"\n'
            '"03/02/2024 10:05:30AM","","Driver","104.2","152.1","12.8","236.4","258.9"\n'
            '"03/02/2024 10:07:02AM","","Driver","105.0","154.3","13.4","241.7","262.0"\n'
            '"03/02/2024 10:09:40AM","","7 Iron","84.6","113.9","17.8","162.4","170.8"\n'
        )
        grid, csv_text = read_grid(text.encode("utf-8"), "export.csv")

        result = choose_import(grid, csv_text, "batch")

        assert result.rows_considered == 4
        assert [shot.club for shot in result.shots] == ["Driver", "Driver", "7 Iron"]
        assert result.carry_rows == 3


class TestParseFallback:
    """Test the fallback stage"""

    def test_not_applicable(self):
        assert parse_fallback(None, "batch") is None
        assert parse_fallback("Date,Carry\n2024-01-01,230\n", "batch") is None

    def test_counts(self):
        result = parse_fallback("Club,Carry\nDriver,230\n7 Iron,\n,150\n", "batch")

        assert result.kind == "fallback"
        assert result.rows_considered == 3
        assert result.carry_rows == 1
        assert len(result.shots) == 2
