#!/usr/bin/env python3
"""
Tests for scripts.utils module
"""

import pytest
import tempfile
import shutil
import subprocess
from pathlib import Path
import sys

# Add scripts directory to path for imports
scripts_dir = Path(__file__).parent.parent
sys.path.insert(0, str(scripts_dir))

from utils import find_project_root, setup_project_paths, verify_project_structure


class TestUtils:
    """Test utility functions"""

    def test_find_project_root_from_scripts(self):
        """Test finding project root from scripts directory"""
        project_root = find_project_root()

        assert project_root.exists()
        assert (project_root / "launch_tracker").exists()
        assert (project_root / "launch_tracker" / "main.py").exists()
        assert (project_root / "global_config.py").exists()

    def test_setup_project_paths(self):
        """Test setting up project paths"""
        project_root = setup_project_paths()

        assert project_root.exists()
        assert (project_root / "launch_tracker").exists()

        # Should add project root to Python path
        assert str(project_root) in sys.path

    def test_verify_project_structure_valid(self):
        """Test project structure verification with valid structure"""
        assert verify_project_structure(find_project_root()) is True

    def test_verify_project_structure_invalid(self):
        """Test project structure verification with invalid structure"""
        with tempfile.TemporaryDirectory() as temp_dir:
            assert verify_project_structure(Path(temp_dir)) is False

    def test_verify_project_structure_partial(self):
        """Test project structure verification with partial structure"""
        with tempfile.TemporaryDirectory() as temp_dir:
            temp_path = Path(temp_dir)

            # Package present but no global_config.py
            package_dir = temp_path / "launch_tracker"
            package_dir.mkdir()
            (package_dir / "main.py").touch()
            (package_dir / "config.py").touch()

            assert verify_project_structure(temp_path) is False

    def test_find_project_root_from_nested_location(self):
        """Test the fallback when utils.py lives outside any project"""
        with tempfile.TemporaryDirectory() as temp_dir:
            nested_dir = Path(temp_dir) / "deeply" / "nested" / "directory"
            nested_dir.mkdir(parents=True)
            shutil.copy2(scripts_dir / "utils.py", nested_dir / "utils.py")

            test_script = nested_dir / "test_script.py"
            test_script.write_text("""
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent))
from utils import find_project_root

print(find_project_root())
""")

            result = subprocess.run([sys.executable, str(test_script)],
                                    capture_output=True, text=True, cwd=nested_dir)

            assert result.returncode == 0
            assert Path(result.stdout.strip()) == (Path(temp_dir) / "deeply" / "nested").resolve()


if __name__ == "__main__":
    pytest.main([__file__])
