#!/usr/bin/env python3
"""
Common utilities for Launch Tracker scripts
"""

import sys
from pathlib import Path


def find_project_root() -> Path:
    """Find the Launch Tracker project root by looking for the package and global_config.py"""
    current_path = Path(__file__).resolve()

    # Walk up the directory tree looking for the Launch Tracker project structure
    for parent in [current_path] + list(current_path.parents):
        package_dir = parent / "launch_tracker"

        if package_dir.exists() and (parent / "global_config.py").exists():
            # Additional check: look for the backend entry point
            if (package_dir / "main.py").exists():
                return parent

    # If not found, fall back to the scripts directory's parent
    return current_path.parent.parent


def setup_project_paths():
    """Setup project paths and add to Python path"""
    project_root = find_project_root()
    sys.path.insert(0, str(project_root))
    return project_root


def verify_project_structure(project_root: Path) -> bool:
    """Verify that the project has the expected structure"""
    required_files = [
        "global_config.py",
        "launch_tracker/main.py",
        "launch_tracker/config.py",
    ]

    if not (project_root / "launch_tracker").is_dir():
        print("❌ Required directory not found: launch_tracker")
        return False

    for file_path in required_files:
        if not (project_root / file_path).exists():
            print(f"❌ Required file not found: {file_path}")
            return False

    return True
