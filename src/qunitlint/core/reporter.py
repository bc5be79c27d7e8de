"""Diagnostic Reporter - Collects diagnostics for one source file."""

import logging

from qunitlint.config import RulesConfig
from qunitlint.models import Diagnostic

logger = logging.getLogger(__name__)


class DiagnosticReporter:
    """Records diagnostics in the order they are reported."""

    def __init__(self, rules: RulesConfig | None = None, path: str | None = None):
        self._rules = rules or RulesConfig()
        self._path = path or "<source>"
        self.diagnostics: list[Diagnostic] = []

    def report(self, diagnostic: Diagnostic) -> None:
        """Record a diagnostic unless its rule is disabled."""
        if not self._rules.is_enabled(diagnostic.rule):
            return
        logger.debug(
            "%s:%d:%d %s (%s)",
            self._path,
            diagnostic.line,
            diagnostic.column,
            diagnostic.message,
            diagnostic.rule,
        )
        self.diagnostics.append(diagnostic)
