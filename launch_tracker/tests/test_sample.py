"""
Tests for launch_tracker.sample module
"""
import pytest
import requests
from unittest.mock import Mock, patch
from launch_tracker.sample import SAMPLE_CSV, fetch_sample


class TestFetchSample:
    """Test fetching the sample session"""

    def test_remote_sample(self):
        response = Mock()
        response.content = b"Club,Carry\nDriver,230\n"

        with patch("launch_tracker.sample.requests.get", return_value=response) as mock_get:
            data, filename = fetch_sample("http://example.test/sample.csv", timeout=1.0)

        assert data == b"Club,Carry\nDriver,230\n"
        assert filename == "sample.csv"
        mock_get.assert_called_once_with("http://example.test/sample.csv", timeout=1.0)

    def test_network_error_uses_builtin(self):
        with patch("launch_tracker.sample.requests.get",
                   side_effect=requests.ConnectionError("offline")):
            data, filename = fetch_sample("http://example.test/sample.csv")

        assert data == SAMPLE_CSV.encode("utf-8")
        assert filename == "sample.csv"

    def test_http_error_uses_builtin(self):
        response = Mock()
        response.raise_for_status.side_effect = requests.HTTPError("404")

        with patch("launch_tracker.sample.requests.get", return_value=response):
            data, _ = fetch_sample("http://example.test/sample.csv")

        assert data == SAMPLE_CSV.encode("utf-8")

    def test_empty_body_uses_builtin(self):
        response = Mock()
        response.content = b"  \n"

        with patch("launch_tracker.sample.requests.get", return_value=response):
            data, _ = fetch_sample("http://example.test/sample.csv")

        assert data == SAMPLE_CSV.encode("utf-8")


class TestBuiltinSample:
    """Test the built-in sample imports cleanly"""

    def test_rows(self):
        lines = SAMPLE_CSV.strip().splitlines()

        assert lines[0].startswith("Date,Club Name,Club Type")
        assert len(lines) == 21
