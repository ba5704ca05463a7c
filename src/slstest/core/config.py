"""
core/config.py — Centralised naming conventions and defaults.

All other modules import names from here rather than hard-coding them.  The
test-file naming convention lives here so the scaffolder, the runner and the
path helpers can never disagree about where a function's tests are.

Usage::

    from slstest.core.config import TEST_DIR_NAME, TEMPLATE_FILENAME
"""

from pathlib import Path

# ── Package layout ─────────────────────────────────────────────────────────────

PACKAGE_DIR: Path = Path(__file__).parent.parent  # …/src/slstest/

# Default template shipped with the unit_tests plugin
BUNDLED_TEMPLATES_DIR: Path = PACKAGE_DIR / "plugins" / "unit_tests" / "templates"

# ── Service layout ─────────────────────────────────────────────────────────────

SERVICE_FILES: tuple[str, ...] = ("serverless.yml", "serverless.yaml")

# Tests live in <service>/tests/test_<function>.py
TEST_DIR_NAME: str = "tests"
TEST_FILE_PREFIX: str = "test_"
TEST_FILE_SUFFIX: str = ".py"

# Project-local override looked up inside the tests directory first
TEMPLATE_FILENAME: str = "sls-test-template.py.tmpl"
BUNDLED_TEMPLATE: Path = BUNDLED_TEMPLATES_DIR / TEMPLATE_FILENAME

# Appended to the module portion of a handler reference
HANDLER_EXTENSION: str = ".py"

# ── Defaults (overridable via CLI options / env) ──────────────────────────────

DEFAULT_STAGE: str = "dev"
DEFAULT_REGION: str = "us-east-1"
DEFAULT_REPORTER: str = "progress"
DEFAULT_JUNIT_OUTPUT: str = "test-results.xml"

# Per-test timeout handed to the engine, in milliseconds
DEFAULT_TIMEOUT_MS: int = 6000

# Process exit statuses wrap at 256, so failure counts are capped
MAX_EXIT_CODE: int = 255

ENV_PREFIX: str = "SLSTEST_"
