"""
Global configuration constants for the Launch Tracker system
This file contains all configurable constants that can be changed in one place
"""

# =============================================================================
# IMPORT / HEADER DETECTION
# =============================================================================

# Header Resolver
HEADER_SCAN_ROWS = 20          # Only the first N rows are considered as header candidates
HEADER_CLUB_BONUS = 2          # Extra score when a club column is identified

# Weak mapping detection (triggers the fallback CSV parser)
MIN_MATCHED_COLUMNS = 6        # Fewer matched columns than this is a weak mapping
MIN_CARRY_ROWS = 3             # Absolute floor of rows that must yield a carry value
MIN_CARRY_ROW_FRACTION = 0.25  # Fraction of data rows that must yield a carry value

# Spreadsheet date serials (days since 1899-12-30)
SPREADSHEET_EPOCH = (1899, 12, 30)
MS_PER_DAY = 86_400_000

# Cell values treated as missing (compared upper-cased)
MISSING_SENTINELS = ("", "#DIV/0!", "NAN")

# =============================================================================
# DERIVED METRICS
# =============================================================================

SMASH_FACTOR_MIN = 0.5
SMASH_FACTOR_MAX = 1.95

# =============================================================================
# FINGERPRINT
# =============================================================================

FINGERPRINT_DISTANCE_DECIMALS = 1  # carry, total, speeds, angles, apex
FINGERPRINT_SPIN_DECIMALS = 0      # spin rate
FINGERPRINT_SEPARATOR = "|"

# =============================================================================
# STATISTICS / FILTERS
# =============================================================================

OUTLIER_SIGMA = 2.5            # Bound = mean +/- OUTLIER_SIGMA * std-dev
OUTLIER_MIN_POINTS = 5         # Minimum data points before a bound is enforced
CONSISTENCY_MIN_SHOTS = 5      # Minimum carry values for the consistency leader
ALL_SESSIONS = "ALL"

# =============================================================================
# GAPPING / SHOT SHAPE
# =============================================================================

GAP_TIGHT_YDS = 12.0           # Adjacent clubs closer than this are a tight gap
GAP_WIDE_YDS = 30.0            # Adjacent clubs further apart than this are a wide gap
SHAPE_STRAIGHT_DEG = 2.0       # |direction| <= this is straight; below is draw, above is fade

# =============================================================================
# REDIS CONFIGURATION
# =============================================================================

# Redis Connection
REDIS_HOST = "localhost"
REDIS_PORT = 6379
REDIS_DB = 0
REDIS_PASSWORD = None

# Shot collection key
REDIS_SHOTS_KEY = "launch-tracker:shots"

# Redis Data Directory
REDIS_DATA_DIR = "./redis"
REDIS_STARTUP_WAIT_SECONDS = 3  # Wait after launching redis-server before pinging it
WORKER_JOIN_TIMEOUT_SECONDS = 2  # Wait for the import worker to finish its current command on shutdown

# =============================================================================
# LOCAL STORAGE
# =============================================================================

DATA_DIR = "./data"
SHOTS_FILE_NAME = "shots.json"

# =============================================================================
# SAMPLE DATA
# =============================================================================

SAMPLE_URL = "https://raw.githubusercontent.com/mcgonzalez79/launch-tracker/main/public/sample.csv"
SAMPLE_TIMEOUT_SECONDS = 5.0
SAMPLE_FILE_NAME = "sample.csv"

# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

# Log Levels
LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "launch_tracker.log"

# =============================================================================
# TESTING CONFIGURATION
# =============================================================================

# Test Settings
TEST_REDIS_DB = 1              # Redis DB for testing (separate from production)
TEST_REDIS_SHOTS_KEY = "launch-tracker:test:shots"
