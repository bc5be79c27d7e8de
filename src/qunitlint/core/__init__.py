"""Core modules for qunitlint."""

from qunitlint.core.analyzer import SuiteAnalyzer
from qunitlint.core.call_classifier import CallClassifier
from qunitlint.core.comment_scanner import CommentTestScanner
from qunitlint.core.scope_stack import ScopeStack

__all__ = [
    "CallClassifier",
    "CommentTestScanner",
    "ScopeStack",
    "SuiteAnalyzer",
]
