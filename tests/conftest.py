"""Root test conftest — shared fixtures for all test suites.

Unit test fixtures live in tests/unit/conftest.py and are automatically
available to tests/unit/ via pytest's conftest discovery chain.
"""

import sys
from pathlib import Path

# src/ holds the slstest package; make it importable without an install
_SRC = Path(__file__).parent.parent / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))
