"""Reporter selection — maps a reporter name and its options to pytest arguments."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from slstest.core.config import DEFAULT_JUNIT_OUTPUT, DEFAULT_REPORTER
from slstest.core.exceptions import ConfigurationError, ReporterOptionsError

ReporterOptions = dict[str, str | bool]


def parse_reporter_options(raw: str | None) -> ReporterOptions:
    """``"dot,timeout=5000"`` → ``{"dot": True, "timeout": "5000"}``.

    A token that is empty, has an empty key, or holds more than one ``=``
    raises :class:`ReporterOptionsError`.
    """
    if raw is None:
        return {}

    options: ReporterOptions = {}
    for token in raw.split(","):
        parts = token.split("=")
        if len(parts) > 2 or not parts[0]:
            raise ReporterOptionsError(token)
        if len(parts) == 2:
            options[parts[0]] = parts[1]
        else:
            options[parts[0]] = True
    return options


def _traceback_args(options: ReporterOptions) -> list[str]:
    tb = options.get("tb")
    if isinstance(tb, str) and tb:
        return [f"--tb={tb}"]
    return []


def _progress(options: ReporterOptions, service_path: Path) -> list[str]:
    return _traceback_args(options)


def _spec(options: ReporterOptions, service_path: Path) -> list[str]:
    return ["-v", *_traceback_args(options)]


def _dot(options: ReporterOptions, service_path: Path) -> list[str]:
    return ["-q", *_traceback_args(options)]


def _min(options: ReporterOptions, service_path: Path) -> list[str]:
    return ["-qq", *(_traceback_args(options) or ["--tb=line"])]


def _junit(options: ReporterOptions, service_path: Path) -> list[str]:
    output = options.get("output")
    path = Path(output) if isinstance(output, str) and output else Path(DEFAULT_JUNIT_OUTPUT)
    if not path.is_absolute():
        path = service_path / path
    args = [f"--junit-xml={path}", *_traceback_args(options)]
    suite_name = options.get("suite_name")
    if isinstance(suite_name, str) and suite_name:
        args += ["-o", f"junit_suite_name={suite_name}"]
    return args


REPORTERS: dict[str, Callable[[ReporterOptions, Path], list[str]]] = {
    "progress": _progress,
    "spec": _spec,
    "dot": _dot,
    "min": _min,
    "junit": _junit,
}


def reporter_args(name: str | None, options: ReporterOptions, service_path: Path) -> list[str]:
    """pytest command-line arguments for the named reporter."""
    reporter = name or DEFAULT_REPORTER
    try:
        build = REPORTERS[reporter]
    except KeyError:
        raise ConfigurationError(
            f"Unknown reporter '{reporter}' (choose from: {', '.join(sorted(REPORTERS))})"
        ) from None
    return build(options, service_path)
