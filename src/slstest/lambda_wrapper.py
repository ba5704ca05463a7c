"""
lambda_wrapper.py — Load a function handler from its file and invoke it locally.

Generated test files use this to call the handler under test the same way the
Lambda runtime would::

    from slstest import lambda_wrapper

    wrapped = lambda_wrapper.wrap("handler.py", "hello")
    response = wrapped.run({"body": "{}"})
"""

from __future__ import annotations

import importlib.util
import sys
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from slstest.core.config import DEFAULT_REGION
from slstest.core.exceptions import HandlerLoadError


@dataclass
class FakeLambdaContext:
    function_name: str = "test-function"
    function_version: str = "$LATEST"
    invoked_function_arn: str = ""
    memory_limit_in_mb: int = 128
    aws_request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    log_group_name: str = ""
    log_stream_name: str = "test-stream"
    remaining_time_ms: int = 6000

    def __post_init__(self) -> None:
        if not self.invoked_function_arn:
            self.invoked_function_arn = f"arn:aws:lambda:{DEFAULT_REGION}:123456789012:function:{self.function_name}"
        if not self.log_group_name:
            self.log_group_name = f"/aws/lambda/{self.function_name}"

    def get_remaining_time_in_millis(self) -> int:
        return self.remaining_time_ms


def load_module(module_path: Path | str, name: str | None = None):
    """Import a module from a file path; its directory is importable while it loads."""
    path = Path(module_path).resolve()
    if not path.is_file():
        raise HandlerLoadError(f"Handler module {path} not found")

    module_name = name or f"slstest_handler_{path.stem}_{uuid.uuid4().hex[:8]}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise HandlerLoadError(f"Cannot import {path}")
    module = importlib.util.module_from_spec(spec)

    parent = str(path.parent)
    added = parent not in sys.path
    if added:
        sys.path.insert(0, parent)
    try:
        sys.modules[module_name] = module
        spec.loader.exec_module(module)
    except Exception as exc:
        sys.modules.pop(module_name, None)
        raise HandlerLoadError(f"Importing {path} failed: {exc}") from exc
    finally:
        if added:
            sys.path.remove(parent)
    return module


class LambdaWrapper:
    """A loaded handler ready to be invoked with events."""

    def __init__(self, module, handler_name: str, function_name: str = "") -> None:
        handler = getattr(module, handler_name, None)
        if not callable(handler):
            raise HandlerLoadError(f"{module.__file__} has no callable {handler_name!r}")
        self.module = module
        self.handler = handler
        self.function_name = function_name or handler_name

    def run(self, event: Any = None, context: Any = None) -> Any:
        if context is None:
            context = FakeLambdaContext(function_name=self.function_name)
        return self.handler({} if event is None else event, context)

    def __repr__(self) -> str:
        return f"LambdaWrapper({self.module.__name__}.{self.handler.__name__})"


def wrap(module_path: Path | str, handler_name: str, function_name: str = "") -> LambdaWrapper:
    return LambdaWrapper(load_module(module_path), handler_name, function_name)
