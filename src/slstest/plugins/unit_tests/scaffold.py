"""Create a new test file for one function from a template."""

from __future__ import annotations

import logging
from pathlib import Path
from string import Template

from slstest.core.config import BUNDLED_TEMPLATE, HANDLER_EXTENSION, TEMPLATE_FILENAME
from slstest.core.exceptions import TemplateError, TestFileExistsError, TestWriteError
from slstest.core.service import FunctionDeclaration, ServiceConfig
from slstest.core.utils import create_test_folder, get_template_from_file, get_test_file_path

log = logging.getLogger(__name__)


def template_context(func: FunctionDeclaration) -> dict[str, str]:
    """The three values substituted into a test template."""
    module, method = func.handler_parts()
    return {
        "functionName": func.name,
        "functionPath": f"{module}{HANDLER_EXTENSION}",
        "handlerName": method,
    }


def resolve_template(test_dir: Path) -> Path:
    """Project-local override first, then the bundled default."""
    local = test_dir / TEMPLATE_FILENAME
    if local.is_file():
        return local
    return BUNDLED_TEMPLATE


def render(template_text: str, context: dict[str, str]) -> str:
    try:
        return Template(template_text).substitute(context)
    except (KeyError, ValueError) as exc:
        raise TemplateError(f"Could not render template: bad placeholder {exc}") from exc


def create_test(service: ServiceConfig, function_name: str) -> Path:
    """Write ``tests/test_<function_name>.py``; never overwrites an existing file.

    Raises:
        FunctionNotFoundError: the function is not declared.
        TestFileExistsError: the target file is already there.
        TemplateError: the template is unreadable or has unknown placeholders.
        TestWriteError: the file could not be written.
    """
    func = service.get_function(function_name)
    context = template_context(func)

    test_dir = create_test_folder(service.service_path)
    test_path = get_test_file_path(function_name, test_dir)

    if test_path.exists():
        log.error("Test file %s already exists", test_path)
        raise TestFileExistsError(test_path)

    template_path = resolve_template(test_dir)
    log.debug("Rendering %s with %s", template_path, context)
    content = render(get_template_from_file(template_path), context)

    try:
        # "x" fails instead of overwriting
        with open(test_path, "x", encoding="utf-8") as fh:
            fh.write(content)
    except FileExistsError:
        log.error("Test file %s already exists", test_path)
        raise TestFileExistsError(test_path) from None
    except OSError as exc:
        log.error("Creating file %s failed: %s", test_path, exc)
        raise TestWriteError(test_path, exc) from exc

    log.debug("Created %s", test_path)
    return test_path
