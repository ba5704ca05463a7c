"""
conftest.py — Shared pytest fixtures for the slstest unit tests.
"""

import textwrap

import pytest

from slstest.core.service import ServiceConfig

SERVERLESS_YML = """\
service: greeter

provider:
  name: aws
  runtime: python3.12
  stage: dev
  region: us-east-1
  environment:
    SHARED: provider

functions:
  hello:
    handler: handler.hello
  goodbye:
    handler: src/handlers/goodbye.main
    environment:
      FAREWELL: bye

environment:
  vars:
    LEVEL: global
    SHARED: global
  stages:
    dev:
      vars:
        LEVEL: stage
        TABLE: greeter-dev
      regions:
        us-east-1:
          vars:
            LEVEL: region
        eu-west-1:
          vars:
            LEVEL: region-eu
    prod:
      vars:
        TABLE: greeter-prod
"""

HANDLER_PY = """\
import os


def hello(event, context):
    return {
        "statusCode": 200,
        "function": context.function_name,
        "level": os.environ.get("LEVEL"),
        "event": event,
    }
"""


@pytest.fixture
def service_dir(tmp_path):
    """A service directory with serverless.yml and handler.py."""
    d = tmp_path / "greeter"
    d.mkdir()
    (d / "serverless.yml").write_text(SERVERLESS_YML)
    (d / "handler.py").write_text(HANDLER_PY)
    return d


@pytest.fixture
def service(service_dir):
    """The loaded greeter ServiceConfig."""
    return ServiceConfig.load(service_dir)


@pytest.fixture
def write_suite():
    """Write tests/test_<name>.py inside a service directory."""

    def _write(service_dir, name, body):
        test_dir = service_dir / "tests"
        test_dir.mkdir(exist_ok=True)
        path = test_dir / f"test_{name}.py"
        path.write_text(textwrap.dedent(body))
        return path

    return _write
