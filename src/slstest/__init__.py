"""slstest — scaffold and run unit tests for serverless functions."""

__version__ = "0.3.0"
