"""Data models for qunitlint."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class CommentKind(Enum):
    """Kinds of comment tokens produced by the traversal."""

    LINE = "line"
    BLOCK = "block"
    SHEBANG = "shebang"


class LineTerminatorStyle(Enum):
    """Line terminator used inside a comment body."""

    NONE = "none"
    LF = "lf"
    CR = "cr"
    CRLF = "crlf"
    MIXED = "mixed"

    @classmethod
    def detect(cls, text: str) -> "LineTerminatorStyle":
        """Detect the terminator style used in text."""
        crlf = text.count("\r\n")
        cr = text.count("\r") - crlf
        lf = text.count("\n") - crlf
        present = [style for style, n in ((cls.CRLF, crlf), (cls.CR, cr), (cls.LF, lf)) if n]
        if not present:
            return cls.NONE
        if len(present) > 1:
            return cls.MIXED
        return present[0]


@dataclass(frozen=True)
class SourceLocation:
    """A 1-based line/column position in a source file."""

    line: int
    column: int


@dataclass(frozen=True)
class CommentToken:
    """Raw comment text with its start position."""

    text: str
    start_line: int
    start_column: int
    kind: CommentKind = CommentKind.LINE

    @property
    def line_terminator_style(self) -> LineTerminatorStyle:
        return LineTerminatorStyle.detect(self.text)

    @property
    def value(self) -> str:
        """Comment body without its delimiters."""
        if self.kind == CommentKind.BLOCK:
            body = self.text[2:]
            return body[:-2] if body.endswith("*/") else body
        if self.kind == CommentKind.SHEBANG:
            return self.text[2:]
        return self.text[2:] if self.text.startswith("//") else self.text


@dataclass(frozen=True)
class MatchRecord:
    """A suspicious test-like pattern found inside a comment."""

    matched_text: str
    line: int
    column: int


# Callee shapes --------------------------------------------------------------


@dataclass(frozen=True)
class Identifier:
    """Bare identifier callee, e.g. ``test(...)``."""

    name: str


@dataclass(frozen=True)
class QualifiedMember:
    """Single-level member callee, e.g. ``QUnit.test(...)``."""

    object: str
    property: str


Callee = Identifier | QualifiedMember


class ArgumentKind(Enum):
    """Classification of a call argument."""

    STRING = "string"
    FUNCTION = "function"
    OBJECT = "object"
    OTHER = "other"


@dataclass(frozen=True)
class PropertyKey:
    """A key of an object-literal argument."""

    name: str
    location: SourceLocation


@dataclass(frozen=True)
class Argument:
    """A call argument as seen by the classifier."""

    kind: ArgumentKind
    location: SourceLocation
    value: str | None = None  # decoded value for STRING
    first_param: str | None = None  # first parameter name for FUNCTION
    keys: tuple[PropertyKey, ...] = ()  # property keys for OBJECT


@dataclass(frozen=True)
class CallNode:
    """Read-only view over a call expression."""

    callee: Callee | None
    args: tuple[Argument, ...]
    location: SourceLocation


# Classifier output ----------------------------------------------------------


class DeclarationKind(Enum):
    """Kinds of declarations recognised in a test file."""

    MODULE = "module"
    TEST = "test"
    HOOK = "hook"


@dataclass(frozen=True)
class HookProperty:
    """A lifecycle hook, either an options-object key or a ``hooks.x()`` call."""

    name: str
    location: SourceLocation
    owner: str | None = None


@dataclass(frozen=True)
class Declaration:
    """A module or test declaration extracted from a call."""

    kind: DeclarationKind
    callee: Callee
    location: SourceLocation
    name: str | None = None
    name_location: SourceLocation | None = None
    body: Argument | None = None
    hooks: tuple[HookProperty, ...] = ()

    @property
    def has_body(self) -> bool:
        return self.body is not None


@dataclass
class DeclarationRecord:
    """Outline entry for a declaration found during analysis."""

    kind: DeclarationKind
    name: str | None
    line: int
    column: int
    depth: int
    module: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "name": self.name,
            "line": self.line,
            "column": self.column,
            "depth": self.depth,
            "module": self.module,
        }


# Diagnostics ----------------------------------------------------------------


class MessageId(Enum):
    """Identifiers of the messages a rule can report."""

    NO_COMMENTED_TEST = "noCommentedTest"
    DUPLICATE_TEST = "duplicateTest"
    DUPLICATE_MODULE = "duplicateModule"


MESSAGE_TEMPLATES: dict[MessageId, str] = {
    MessageId.NO_COMMENTED_TEST: (
        'Unexpected "{matched_text}" in comment. Use QUnit.skip outside of a comment.'
    ),
    MessageId.DUPLICATE_TEST: (
        'Test name "{name}" is used multiple times in the same module, '
        "first declared on line {line}."
    ),
    MessageId.DUPLICATE_MODULE: (
        'Module name "{name}" is used multiple times in the same module, '
        "first declared on line {line}."
    ),
}

RULE_FOR_MESSAGE: dict[MessageId, str] = {
    MessageId.NO_COMMENTED_TEST: "no-commented-tests",
    MessageId.DUPLICATE_TEST: "no-identical-names",
    MessageId.DUPLICATE_MODULE: "no-identical-names",
}


@dataclass(frozen=True)
class Diagnostic:
    """A single finding reported against a source file."""

    message_id: MessageId
    line: int
    column: int
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def rule(self) -> str:
        return RULE_FOR_MESSAGE[self.message_id]

    @property
    def message(self) -> str:
        """Render the human-readable message."""
        return MESSAGE_TEMPLATES[self.message_id].format(**self.data)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "rule": self.rule,
            "message_id": self.message_id.value,
            "message": self.message,
            "line": self.line,
            "column": self.column,
            "data": dict(self.data),
        }


@dataclass
class AnalysisResult:
    """Result of analyzing one test file."""

    path: str | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)
    declarations: list[DeclarationRecord] = field(default_factory=list)
    parse_errors: int = 0

    @property
    def passed(self) -> bool:
        return not self.diagnostics

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "path": self.path,
            "passed": self.passed,
            "parse_errors": self.parse_errors,
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "declarations": [d.to_dict() for d in self.declarations],
        }
