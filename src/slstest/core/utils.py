"""
core/utils.py — File helpers shared by the scaffolder and the runner.

Handles:
  - the test-file naming convention  (tests/test_<function>.py) and its inverse
  - creating the tests directory
  - reading template files
  - flattening variable scopes into an environment
  - discovering which functions already have a test file

Nothing here keeps state between calls.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from slstest.core.config import TEST_DIR_NAME, TEST_FILE_PREFIX, TEST_FILE_SUFFIX
from slstest.core.environment import EnvironmentScope
from slstest.core.exceptions import TemplateError
from slstest.core.service import FunctionDeclaration

log = logging.getLogger(__name__)

__all__ = [
    "TestTarget",
    "get_test_file_path", "func_name_from_path",
    "create_test_folder", "get_template_from_file",
    "set_env", "apply_scopes", "get_test_files",
]


@dataclass(frozen=True)
class TestTarget:
    """A declared function together with its discovered test file."""

    __test__ = False  # tell pytest not to collect this class

    function: FunctionDeclaration
    test_path: Path

    @property
    def name(self) -> str:
        return self.function.name


# ── Naming convention ─────────────────────────────────────────────────────────


def get_test_file_path(function_name: str, test_dir: Path | str = TEST_DIR_NAME) -> Path:
    """``hello`` → ``<test_dir>/test_hello.py``"""
    return Path(test_dir) / f"{TEST_FILE_PREFIX}{function_name}{TEST_FILE_SUFFIX}"


def func_name_from_path(path: Path | str) -> str:
    """Inverse of :func:`get_test_file_path`; returns "" for non-matching files."""
    filename = Path(str(path).replace("\\", "/")).name
    if not (filename.startswith(TEST_FILE_PREFIX) and filename.endswith(TEST_FILE_SUFFIX)):
        return ""
    return filename[len(TEST_FILE_PREFIX) : -len(TEST_FILE_SUFFIX)]


# ── Filesystem ────────────────────────────────────────────────────────────────


def create_test_folder(service_path: Path | str) -> Path:
    """Ensure ``<service>/tests`` exists and return it."""
    test_dir = Path(service_path) / TEST_DIR_NAME
    if not test_dir.is_dir():
        test_dir.mkdir(parents=True, exist_ok=True)
        log.debug("Created test folder %s", test_dir)
    return test_dir


def get_template_from_file(path: Path | str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise TemplateError(f"Could not read template {path}: {exc}") from exc


# ── Environment ───────────────────────────────────────────────────────────────


def set_env(values: Mapping[str, str] | None, environment: EnvironmentScope) -> None:
    """Write every entry of *values*, overwriting existing keys."""
    if values:
        environment.set_many({str(k): str(v) for k, v in values.items()})


def apply_scopes(scopes: Iterable[Mapping[str, str]], environment: EnvironmentScope) -> None:
    """Apply scopes in order so later (more specific) ones win."""
    for scope in scopes:
        set_env(scope, environment)


# ── Discovery ─────────────────────────────────────────────────────────────────


def get_test_files(functions: Mapping[str, FunctionDeclaration], test_dir: Path | str) -> dict[str, TestTarget]:
    """Keep only the functions whose conventional test file exists."""
    found: dict[str, TestTarget] = {}
    for name, func in functions.items():
        test_path = get_test_file_path(name, test_dir)
        if test_path.is_file():
            found[name] = TestTarget(function=func, test_path=test_path)
    return found
