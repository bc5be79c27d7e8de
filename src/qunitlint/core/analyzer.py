"""Suite Analyzer - Runs the single-pass structural checks on a file."""

import logging
from pathlib import Path

from qunitlint.config import QunitLintConfig
from qunitlint.core.call_classifier import CallClassifier
from qunitlint.core.comment_scanner import CommentTestScanner
from qunitlint.core.reporter import DiagnosticReporter
from qunitlint.core.scope_stack import ScopeStack
from qunitlint.core.source_traversal import EventKind, SourceTraversal
from qunitlint.models import (
    AnalysisResult,
    CallNode,
    Declaration,
    DeclarationKind,
    DeclarationRecord,
    Diagnostic,
    HookProperty,
    MessageId,
    SourceLocation,
)

logger = logging.getLogger(__name__)


class SuiteAnalyzer:
    """Detects commented-out tests and duplicate module/test names."""

    def __init__(self, config: QunitLintConfig | None = None):
        """Initialize with optional configuration.

        Args:
            config: qunitlint config; defaults are used when omitted
        """
        self._config = config or QunitLintConfig()
        self._traversal = SourceTraversal()
        self._scanner = CommentTestScanner(self._config.comments)
        self._classifier = CallClassifier(self._config.identifiers)

    def analyze_file(self, path: Path) -> AnalysisResult:
        """Analyze a test file on disk."""
        return self.analyze(path.read_bytes(), path=str(path))

    def analyze(self, source: str | bytes, path: str | None = None) -> AnalysisResult:
        """Analyze JavaScript source in one pass.

        Args:
            source: File contents
            path: Optional path used for reporting

        Returns:
            AnalysisResult with diagnostics in source order and a declaration outline
        """
        parsed = self._traversal.parse(source)
        reporter = DiagnosticReporter(self._config.rules, path)
        scopes = ScopeStack()
        result = AnalysisResult(path=path, parse_errors=parsed.error_count)
        # calls whose exit closes a module body
        body_calls: set[int] = set()

        for event in self._traversal.walk(parsed):
            if event.kind == EventKind.COMMENT and event.comment is not None:
                for match in self._scanner.scan(event.comment):
                    reporter.report(
                        Diagnostic(
                            message_id=MessageId.NO_COMMENTED_TEST,
                            line=match.line,
                            column=match.column,
                            data={"matched_text": match.matched_text},
                        )
                    )
            elif event.kind == EventKind.CALL_ENTER and event.call is not None:
                if self._enter_call(event.call, scopes, reporter, result):
                    body_calls.add(id(event.call))
            elif event.kind == EventKind.CALL_EXIT and id(event.call) in body_calls:
                body_calls.discard(id(event.call))
                scopes.exit_module_body()

        result.diagnostics = reporter.diagnostics
        logger.debug(
            "Analyzed %s: %d diagnostics, %d declarations",
            path or "<source>",
            len(result.diagnostics),
            len(result.declarations),
        )
        return result

    def _enter_call(
        self,
        call: CallNode,
        scopes: ScopeStack,
        reporter: DiagnosticReporter,
        result: AnalysisResult,
    ) -> bool:
        """Handle a call; returns True when it opened a module body scope."""
        classified = self._classifier.classify(call)
        if classified is None:
            return False

        if isinstance(classified, HookProperty):
            if classified.owner is not None and classified.owner == scopes.hooks_param:
                _record(result, DeclarationKind.HOOK, classified.name, classified.location, scopes)
            return False

        location = classified.name_location or classified.location
        if classified.kind == DeclarationKind.TEST:
            _record(result, DeclarationKind.TEST, classified.name, location, scopes)
            diagnostic = scopes.register_test(classified.name, location)
            if diagnostic is not None:
                reporter.report(diagnostic)
            return False

        return self._enter_module(classified, location, scopes, reporter, result)

    def _enter_module(
        self,
        declaration: Declaration,
        location: SourceLocation,
        scopes: ScopeStack,
        reporter: DiagnosticReporter,
        result: AnalysisResult,
    ) -> bool:
        hooks_param = declaration.body.first_param if declaration.body else None
        diagnostic = scopes.register_module(
            declaration.name, location, has_body=declaration.has_body, hooks_param=hooks_param
        )
        if diagnostic is not None:
            reporter.report(diagnostic)

        # recorded after the push so depth and module name describe the new scope
        _record(result, DeclarationKind.MODULE, declaration.name, location, scopes)
        for hook in declaration.hooks:
            _record(result, DeclarationKind.HOOK, hook.name, hook.location, scopes)
        return declaration.has_body


def _record(
    result: AnalysisResult,
    kind: DeclarationKind,
    name: str | None,
    location: SourceLocation,
    scopes: ScopeStack,
) -> None:
    result.declarations.append(
        DeclarationRecord(
            kind=kind,
            name=name,
            line=location.line,
            column=location.column,
            depth=scopes.depth,
            module=scopes.module_name,
        )
    )
