"""Comment Scanner - Finds commented-out test declarations in comments."""

import re

from qunitlint.config import CommentsConfig
from qunitlint.core.position import resolve_position
from qunitlint.models import CommentKind, CommentToken, MatchRecord


class CommentTestScanner:
    """Scans comment text for fragments that look like disabled tests."""

    # Identifiers that look like a test declaration when followed by "(".
    # Qualified forms come first so "QUnit.test" is matched whole.
    COMMENTED_TEST_PATTERNS: list[str] = [
        r"QUnit\.test",
        r"QUnit\.asyncTest",
        r"QUnit\.skip",
        r"test",
        r"asyncTest",
    ]

    def __init__(self, config: CommentsConfig | None = None):
        """Initialize with optional comment configuration.

        Args:
            config: Comment config providing the TODO exemption marker
        """
        self._config = config or CommentsConfig()
        alternatives = "|".join(self.COMMENTED_TEST_PATTERNS)
        self._pattern = re.compile(rf"\b({alternatives})\s*\(")
        self._todo = re.compile(rf"\s*{re.escape(self._config.todo_marker)}\b")

    def is_exempt(self, comment: CommentToken) -> bool:
        """Check whether a comment is never scanned (TODO notes, shebangs)."""
        if comment.kind == CommentKind.SHEBANG or comment.text.startswith("#!"):
            return True
        return self._todo.match(comment.value) is not None

    def scan(self, comment: CommentToken) -> list[MatchRecord]:
        """Find every test-like call fragment in a comment.

        Args:
            comment: The comment token, including its delimiters

        Returns:
            Matches in left-to-right order, each with its absolute position
        """
        if self.is_exempt(comment):
            return []

        matches: list[MatchRecord] = []
        for match in self._pattern.finditer(comment.text):
            line, column = resolve_position(
                comment.start_line, comment.start_column, comment.text, match.start(1)
            )
            matches.append(MatchRecord(matched_text=match.group(1), line=line, column=column))
        return matches
