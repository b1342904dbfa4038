"""
Pytest configuration and fixtures for Launch Tracker tests
"""
import pytest
import redis
from unittest.mock import Mock
from datetime import datetime, timezone
import sys
import os

# Add the project root to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

from global_config import *
from launch_tracker.config import Settings
from launch_tracker.models import Shot
from launch_tracker.shot_store import RedisShotStore
from launch_tracker.session_manager import SessionManager
from launch_tracker.main import LaunchTrackerBackend


class MockRedisClient:
    """Mock Redis client that maintains state to simulate persistence"""

    def __init__(self):
        self.data = {}  # Simulate Redis key-value store

    def set(self, key, value):
        """Mock Redis SET operation"""
        self.data[key] = value
        return True

    def get(self, key):
        """Mock Redis GET operation"""
        return self.data.get(key)

    def delete(self, *keys):
        """Mock Redis DELETE operation"""
        deleted_count = 0
        for key in keys:
            if key in self.data:
                del self.data[key]
                deleted_count += 1
        return deleted_count

    def ping(self):
        """Mock Redis PING operation"""
        return True


def make_shot(**overrides):
    """Shot with sensible 7 iron defaults"""
    values = {
        "session_id": "s1",
        "timestamp": datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc),
        "club": "7 Iron",
        "club_speed_mph": 85.0,
        "ball_speed_mph": 114.0,
        "smash_factor": 1.34,
        "launch_angle_deg": 18.0,
        "spin_rate_rpm": 6400.0,
        "carry_distance_yds": 160.0,
        "total_distance_yds": 170.0,
    }
    values.update(overrides)
    return Shot(**values)


@pytest.fixture
def shot_factory():
    """Factory building shots from keyword overrides"""
    return make_shot


@pytest.fixture
def mock_redis_client():
    """Mock Redis client for testing"""
    mock_client = Mock(spec=redis.Redis)
    mock_client.set.return_value = True
    mock_client.get.return_value = None
    mock_client.delete.return_value = 1
    mock_client.ping.return_value = True
    return mock_client


@pytest.fixture
def persistent_redis_client():
    """Mock Redis client that maintains state for persistence testing"""
    return MockRedisClient()


@pytest.fixture
def shot_store(persistent_redis_client):
    """Redis shot store backed by the stateful mock client"""
    return RedisShotStore(redis_client=persistent_redis_client, key=TEST_REDIS_SHOTS_KEY)


@pytest.fixture
def session_manager_with_store(shot_store):
    """Session manager over an empty mock store"""
    return SessionManager(shot_store)


@pytest.fixture
def backend_with_mocks(shot_store):
    """LaunchTrackerBackend over the mock store"""
    return LaunchTrackerBackend(store=shot_store)


@pytest.fixture
def test_settings():
    """Test settings configuration"""
    return Settings(
        redis_host=REDIS_HOST,
        redis_port=REDIS_PORT,
        redis_db=TEST_REDIS_DB,  # Use different DB for testing
        redis_shots_key=TEST_REDIS_SHOTS_KEY,
        store_backend="file",
    )


@pytest.fixture
def sample_shots():
    """A small mixed bag across two sessions"""
    return [
        make_shot(club="Driver", club_speed_mph=104.0, ball_speed_mph=152.0, smash_factor=1.46,
                  carry_distance_yds=235.0, total_distance_yds=258.0, launch_direction_deg=-3.0),
        make_shot(club="Driver", club_speed_mph=105.0, ball_speed_mph=154.0, smash_factor=1.47,
                  carry_distance_yds=241.0, total_distance_yds=262.0, launch_direction_deg=1.0,
                  timestamp=datetime(2024, 1, 15, 10, 5, tzinfo=timezone.utc)),
        make_shot(club="3 Wood", carry_distance_yds=212.0, total_distance_yds=230.0,
                  launch_direction_deg=4.5),
        make_shot(club="7 Iron", carry_distance_yds=160.0, spin_axis_deg=-0.5),
        make_shot(club="Pitching Wedge", session_id="s2", carry_distance_yds=128.0,
                  total_distance_yds=None, timestamp=datetime(2024, 2, 3, 9, 0, tzinfo=timezone.utc)),
    ]


@pytest.fixture
def header_grid():
    """Export with a title block above the header on row 3"""
    return [
        ["Launch Monitor Export"],
        ["Player", "Test Golfer"],
        ["Range Session"],
        ["Club Name", "Club Speed", "Ball Speed", "Carry", "Total"],
        ["7 Iron", "85.1", "114.2", "160.4", "170.2"],
        ["7 Iron", "84.7", "113.0", "158.9", "168.8"],
        ["Driver", "104.0", "152.3", "236.5", "258.0"],
    ]
