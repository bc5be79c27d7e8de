"""qunitlint - structural hygiene checks for QUnit test suites."""

__version__ = "0.3.0"
