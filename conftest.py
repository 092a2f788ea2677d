"""
Root conftest: puts src/ on the import path for in-tree test runs.
"""

import sys
from pathlib import Path

# Ensure src on path
sys.path.insert(0, str(Path(__file__).parent / "src"))
