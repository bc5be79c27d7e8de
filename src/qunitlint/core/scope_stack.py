"""Scope Stack - Tracks nested naming scopes to detect duplicate names."""

from dataclasses import dataclass, field
from enum import Enum

from qunitlint.models import Diagnostic, MessageId, SourceLocation


class ScopeStackError(RuntimeError):
    """Raised when a frame is popped that was never pushed."""


class FrameKind(Enum):
    """Kinds of naming scopes."""

    GLOBAL = "global"
    MODULE = "module"


@dataclass
class ScopeFrame:
    """A naming context holding independent test and module registries."""

    kind: FrameKind
    name: str | None = None
    implicit: bool = False  # body-less module acting as a section divider
    hooks_param: str | None = None
    test_names: dict[str, int] = field(default_factory=dict)
    module_names: dict[str, int] = field(default_factory=dict)
    parent: "ScopeFrame | None" = None


class ScopeStack:
    """Nested naming scopes for one source file.

    The Global frame is created up front and never popped. A module with a
    body pushes a frame that is popped when the body ends. A module without
    a body pushes an implicit frame which stays current until the next
    module call at the same nesting level, or until the enclosing body ends.
    """

    def __init__(self) -> None:
        self._frames: list[ScopeFrame] = [ScopeFrame(kind=FrameKind.GLOBAL)]

    @property
    def current(self) -> ScopeFrame:
        return self._frames[-1]

    @property
    def depth(self) -> int:
        """Number of open module frames."""
        return len(self._frames) - 1

    @property
    def module_name(self) -> str | None:
        """Name of the innermost module, if any."""
        for frame in reversed(self._frames):
            if frame.kind == FrameKind.MODULE:
                return frame.name
        return None

    @property
    def hooks_param(self) -> str | None:
        """Hooks parameter name of the innermost module body, if any."""
        for frame in reversed(self._frames):
            if frame.kind == FrameKind.MODULE and not frame.implicit:
                return frame.hooks_param
        return None

    def register_module(
        self,
        name: str | None,
        location: SourceLocation,
        has_body: bool = False,
        hooks_param: str | None = None,
    ) -> Diagnostic | None:
        """Register a module declaration and open its scope.

        Args:
            name: Literal module name, or None when not a plain string
            location: Where the name appears
            has_body: Whether the declaration supplies a body callback
            hooks_param: First parameter name of the body callback

        Returns:
            A duplicateModule diagnostic if the name repeats in this scope
        """
        self._close_implicit()
        level = self.current

        diagnostic = None
        if name is not None:
            diagnostic = _register(
                level.module_names, name, location, MessageId.DUPLICATE_MODULE
            )

        self._frames.append(
            ScopeFrame(
                kind=FrameKind.MODULE,
                name=name,
                implicit=not has_body,
                hooks_param=hooks_param if has_body else None,
                parent=level,
            )
        )
        return diagnostic

    def exit_module_body(self) -> None:
        """Close the scope opened by a module declaration with a body."""
        self._close_implicit()
        frame = self.current
        if frame.kind != FrameKind.MODULE:
            raise ScopeStackError("No module body is open")
        self._frames.pop()

    def register_test(self, name: str | None, location: SourceLocation) -> Diagnostic | None:
        """Register a test name in the active scope.

        Returns:
            A duplicateTest diagnostic if the name repeats in this scope
        """
        if name is None:
            return None
        return _register(self.current.test_names, name, location, MessageId.DUPLICATE_TEST)

    def _close_implicit(self) -> None:
        if self.current.implicit:
            self._frames.pop()


def _register(
    table: dict[str, int],
    name: str,
    location: SourceLocation,
    message_id: MessageId,
) -> Diagnostic | None:
    first_line = table.get(name)
    if first_line is None:
        table[name] = location.line
        return None
    return Diagnostic(
        message_id=message_id,
        line=location.line,
        column=location.column,
        data={"name": name, "line": first_line},
    )
