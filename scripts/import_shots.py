#!/usr/bin/env python3
"""
Launch Tracker batch import
Imports every launch-monitor export given on the command line into the
configured shot store and prints one summary line per file.

Usage: import_shots.py <export.xlsx|export.xls|export.csv> [...]
"""

import sys
from pathlib import Path
from typing import List
import logging

# Add scripts directory to path for imports
script_dir = Path(__file__).parent
sys.path.insert(0, str(script_dir))

from utils import setup_project_paths

project_root = setup_project_paths()

from global_config import *

from launch_tracker.exceptions import ShotImportError
from launch_tracker.session_manager import SessionManager
from launch_tracker.shot_store import ShotStore, create_store

logger = logging.getLogger(__name__)


def import_files(paths: List[str], store: ShotStore) -> int:
    """Import each file in turn.

    :param paths: Export files
    :param store: Store receiving the shots
    :return: Number of files that failed
    """
    manager = SessionManager(store)
    failed = 0
    for path in paths:
        try:
            summary = manager.import_file(path)
        except (ShotImportError, OSError) as e:
            logger.error(f"Import of {path} failed: {e}")
            print(f"❌ {path}: {e}")
            failed += 1
            continue
        print(f"✅ {summary.filename}: {summary.imported} imported, "
              f"{summary.duplicates_skipped} duplicates skipped "
              f"({summary.total_rows_considered} rows, {summary.source}) -> {summary.session_id}")

    print(f"\n{len(manager.get_shots())} shots stored in {len(manager.get_sessions()) - 1} sessions")
    return failed


def main():
    """Main entry point"""
    logging.basicConfig(level=getattr(logging, LOG_LEVEL), format=LOG_FORMAT)

    if len(sys.argv) < 2:
        print("Usage: import_shots.py <export.xlsx|export.xls|export.csv> [...]")
        sys.exit(2)

    failed = import_files(sys.argv[1:], create_store())
    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
