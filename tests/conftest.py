"""
Pytest configuration for pynbind tests.
Adds src/ and the repository root to sys.path so tests run without an install
and can import the shared fixtures as `tests.test_fixtures`.
"""
import sys
from pathlib import Path

repo_root = Path(__file__).parent.parent
for path in (repo_root / "src", repo_root):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))
