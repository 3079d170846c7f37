"""Building blocks for running and checking compiler test suites."""

__version__ = "0.1.0"