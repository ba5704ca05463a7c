"""
runner.py — Resolve functions to test files and run them under pytest.

Flow for one ``invoke test``:
  1. parse --reporter-options (fatal if malformed, before anything runs)
  2. resolve requested function names (unknown names are skipped with a warning)
  3. keep the functions that have a tests/test_<name>.py file
  4. hand the files to the engine together with a suite listener
  5. the listener resets other functions' own variables, then re-applies
     global → stage → region → function variables
     right before each suite is imported and before its first test runs

Public API
----------
run_tests(service, function_names, ...) → RunResult
PytestEngine().run(files, args, listener) → EngineResult
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

import pytest

from slstest.core.config import DEFAULT_TIMEOUT_MS
from slstest.core.environment import EnvironmentScope, ProcessEnvironment
from slstest.core.exceptions import Error
from slstest.core.service import FunctionDeclaration, ServiceConfig
from slstest.core.utils import TestTarget, apply_scopes, func_name_from_path, get_test_files, set_env
from slstest.plugins.unit_tests.reporters import parse_reporter_options, reporter_args

log = logging.getLogger(__name__)

# ── Data classes ───────────────────────────────────────────────────────────────


@dataclass
class EngineResult:
    failures: int = 0
    passed: int = 0
    exit_code: int = 0


@dataclass
class RunResult:
    failures: int = 0
    passed: int = 0
    files: list[Path] = field(default_factory=list)
    ran: bool = False

    @property
    def success(self) -> bool:
        return self.failures == 0


# ── Suite notifications ────────────────────────────────────────────────────────


class SuiteListener(Protocol):
    def suite_started(self, path: Path) -> None: ...


class EnvironmentListener:
    """Applies the owning function's variable scopes when its suite starts.

    Keys declared by a function's own ``environment:`` belong to that suite
    only. Before another suite's scopes are applied they go back to the value
    they had when the listener was built, or are removed if they had none.
    """

    def __init__(
        self,
        service: ServiceConfig,
        targets: dict[str, TestTarget],
        environment: EnvironmentScope,
        stage: str | None = None,
        region: str | None = None,
    ) -> None:
        self._service = service
        self._targets = targets
        self._environment = environment
        self._stage = stage
        self._region = region
        function_keys = {key for target in targets.values() for key in target.function.environment}
        self._baseline = {key: environment.get(key) for key in function_keys}

    def suite_started(self, path: Path) -> None:
        name = func_name_from_path(path)
        if name not in self._targets:
            log.debug("No function owns suite %s", path)
            return
        log.debug("Applying environment for %s (stage=%s, region=%s)", name, self._stage, self._region)
        self._restore_baseline(self._targets[name].function.environment)
        apply_scopes(self._service.env_scopes(name, self._stage, self._region), self._environment)

    def _restore_baseline(self, keep: Mapping[str, str]) -> None:
        stale = [key for key in self._baseline if key not in keep]
        self._environment.unset_many(key for key in stale if self._baseline[key] is None)
        set_env({key: self._baseline[key] for key in stale if self._baseline[key] is not None}, self._environment)


class Engine(Protocol):
    def run(self, files: Sequence[Path], args: Sequence[str], listener: SuiteListener) -> EngineResult: ...


# ── pytest engine ──────────────────────────────────────────────────────────────


class _SuiteHooks:
    """pytest plugin that forwards suite starts and tallies outcomes."""

    def __init__(self, listener: SuiteListener, timeout_ms: int) -> None:
        self._listener = listener
        self._timeout_ms = timeout_ms
        self._current: Path | None = None
        self.failed: set[str] = set()
        self.passed: set[str] = set()
        self.collection_errors = 0

    def _enter(self, path: Path) -> None:
        path = Path(path)
        if path != self._current:
            self._current = path
            self._listener.suite_started(path)

    def pytest_addoption(self, parser: pytest.Parser) -> None:
        parser.addini("slstest_timeout_ms", "Per-test timeout in milliseconds", default=str(self._timeout_ms))

    @pytest.hookimpl(tryfirst=True)
    def pytest_collectstart(self, collector: pytest.Collector) -> None:
        # Module code reads the environment at import time
        if isinstance(collector, pytest.Module):
            self._enter(collector.path)

    @pytest.hookimpl(tryfirst=True)
    def pytest_runtest_setup(self, item: pytest.Item) -> None:
        self._enter(item.path)

    def pytest_runtest_logreport(self, report: pytest.TestReport) -> None:
        if report.failed:
            self.failed.add(report.nodeid)
        elif report.when == "call" and report.passed:
            self.passed.add(report.nodeid)

    def pytest_collectreport(self, report: pytest.CollectReport) -> None:
        if report.failed:
            self.collection_errors += 1


class PytestEngine:
    """Runs suites in-process with ``pytest.main``.

    Usage::

        engine = PytestEngine()
        result = engine.run([Path("tests/test_hello.py")], ["-q"], listener)
    """

    def __init__(self, timeout_ms: int = DEFAULT_TIMEOUT_MS, extra_args: Iterable[str] = ()) -> None:
        self.timeout_ms = timeout_ms
        self.extra_args = list(extra_args)

    def run(self, files: Sequence[Path], args: Sequence[str], listener: SuiteListener) -> EngineResult:
        hooks = _SuiteHooks(listener, self.timeout_ms)
        cmd = [
            *(str(f) for f in files),
            "-p",
            "no:cacheprovider",
            "-o",
            f"slstest_timeout_ms={self.timeout_ms}",
            *args,
            *self.extra_args,
        ]
        log.debug("pytest %s", " ".join(cmd))
        try:
            exit_code = int(pytest.main(cmd, plugins=[hooks]))
        finally:
            _forget_modules(files)

        if exit_code in (pytest.ExitCode.INTERNAL_ERROR, pytest.ExitCode.USAGE_ERROR):
            raise Error(f"pytest could not run the suites (exit code {exit_code})")

        failures = len(hooks.failed) + hooks.collection_errors
        return EngineResult(failures=failures, passed=len(hooks.passed - hooks.failed), exit_code=exit_code)


def _forget_modules(files: Iterable[Path]) -> None:
    """Drop imported suite modules so the next run imports them afresh."""
    targets = {Path(f).resolve() for f in files}
    for name, module in list(sys.modules.items()):
        module_file = getattr(module, "__file__", None)
        if module_file and Path(module_file).resolve() in targets:
            del sys.modules[name]


# ── Resolution ─────────────────────────────────────────────────────────────────


def resolve_functions(service: ServiceConfig, names: Iterable[str] | str | None) -> dict[str, FunctionDeclaration]:
    """Requested names → declarations; no names means every declared function."""
    if isinstance(names, str):
        names = [names]
    names = list(names or [])
    if not names:
        return dict(service.functions)

    found: dict[str, FunctionDeclaration] = {}
    for name in names:
        func = service.functions.get(name)
        if func is None:
            log.warning("Could not find function '%s'.", name)
            continue
        found[name] = func
    return found


def run_tests(
    service: ServiceConfig,
    function_names: Iterable[str] | str | None = None,
    stage: str | None = None,
    region: str | None = None,
    reporter: str | None = None,
    reporter_options: str | None = None,
    environment: EnvironmentScope | None = None,
    engine: Engine | None = None,
) -> RunResult:
    """Run the test suites of the requested functions.

    Raises:
        ReporterOptionsError: *reporter_options* is malformed.
        ConfigurationError: *reporter* is not a known reporter.
    """
    options = parse_reporter_options(reporter_options)
    args = reporter_args(reporter, options, service.service_path)

    funcs = resolve_functions(service, function_names)
    targets = get_test_files(funcs, service.test_dir) if funcs else {}
    if not targets:
        log.info("No tests to run")
        return RunResult()

    stage = stage or service.stage
    region = region or service.region
    listener = EnvironmentListener(service, targets, environment or ProcessEnvironment(), stage, region)
    files = [target.test_path for target in targets.values()]
    log.debug("Running %d suite(s): %s", len(files), ", ".join(targets))

    outcome = (engine or PytestEngine()).run(files, args, listener)
    return RunResult(failures=outcome.failures, passed=outcome.passed, files=files, ran=True)
