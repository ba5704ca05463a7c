"""Exceptions raised by slstest commands."""


class Error(Exception):
    """Base class for exceptions raised by this package."""

    pass


class ConfigurationError(Error):
    """Raised when a command is invoked with settings it cannot work with."""

    pass


class ServiceConfigError(ConfigurationError):
    """Raised when serverless.yml is missing or malformed."""

    pass


class FunctionNotFoundError(ConfigurationError):
    """Raised when a function name is not declared by the service."""

    def __init__(self, name):
        self.name = name
        super().__init__(f"Function '{name}' is not declared in the service")


class ReporterOptionsError(ConfigurationError):
    """Raised when a --reporter-options string cannot be parsed."""

    def __init__(self, option):
        self.option = option
        super().__init__(f"invalid reporter option '{option}'")


class TestFileExistsError(Error):
    """Raised when scaffolding would overwrite an existing test file."""

    __test__ = False  # tell pytest not to collect this class

    def __init__(self, path):
        self.path = path
        super().__init__(f"File {path} already exists")


class TestWriteError(Error):
    """Raised when a generated test file cannot be written."""

    __test__ = False

    def __init__(self, path, reason):
        self.path = path
        super().__init__(f"Creating file {path} failed: {reason}")


class TemplateError(Error):
    """Raise when a test template cannot be read or rendered"""

    pass


class HandlerLoadError(Error):
    """Raise when a function handler cannot be imported from its file"""

    pass
