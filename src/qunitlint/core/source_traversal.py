"""Source Traversal - Walks a tree-sitter JavaScript tree in file order."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

import tree_sitter
import tree_sitter_javascript

from qunitlint.core.position import SourceIndex
from qunitlint.models import (
    Argument,
    ArgumentKind,
    CallNode,
    Callee,
    CommentKind,
    CommentToken,
    Identifier,
    PropertyKey,
    QualifiedMember,
)

logger = logging.getLogger(__name__)

JS_LANGUAGE = tree_sitter.Language(tree_sitter_javascript.language())

_FUNCTION_TYPES = frozenset({"function_expression", "function", "arrow_function"})
_SIMPLE_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}


class EventKind(Enum):
    """Traversal events, emitted in source order."""

    COMMENT = "comment"
    CALL_ENTER = "call_enter"
    CALL_EXIT = "call_exit"


@dataclass(frozen=True)
class TraversalEvent:
    """A comment or a call boundary encountered during traversal."""

    kind: EventKind
    comment: CommentToken | None = None
    call: CallNode | None = None


@dataclass
class ParsedSource:
    """A parsed JavaScript file."""

    tree: Any  # tree-sitter Tree
    index: SourceIndex
    error_count: int


class SourceTraversal:
    """Parses JavaScript with tree-sitter and yields traversal events."""

    def __init__(self) -> None:
        self._parser = tree_sitter.Parser(JS_LANGUAGE)

    def parse(self, source: str | bytes) -> ParsedSource:
        """Parse source text. Syntax errors never raise; they are counted."""
        if isinstance(source, str):
            source = source.encode("utf-8")

        tree = self._parser.parse(source)
        error_count = 0
        stack = [tree.root_node]
        while stack:
            node = stack.pop()
            if node.type == "ERROR" or node.is_missing:
                error_count += 1
            stack.extend(node.children)

        if error_count:
            logger.debug("Parsed source with %d syntax errors", error_count)
        return ParsedSource(tree=tree, index=SourceIndex(source), error_count=error_count)

    def walk(self, parsed: ParsedSource) -> Iterator[TraversalEvent]:
        """Yield comment and call events in pre-order.

        Every CALL_ENTER is matched by a CALL_EXIT once the call's
        arguments (and any body callback) have been walked.
        """
        index = parsed.index
        # (node, call) pairs; a non-None call marks a pending exit
        stack: list[tuple[Any, CallNode | None]] = [(parsed.tree.root_node, None)]
        while stack:
            node, pending_exit = stack.pop()
            if pending_exit is not None:
                yield TraversalEvent(kind=EventKind.CALL_EXIT, call=pending_exit)
                continue

            if node.type == "comment":
                yield TraversalEvent(kind=EventKind.COMMENT, comment=_comment_token(node, index))
                continue
            if node.type == "hash_bang_line":
                yield TraversalEvent(
                    kind=EventKind.COMMENT,
                    comment=_comment_token(node, index, CommentKind.SHEBANG),
                )
                continue

            if node.type == "call_expression":
                call = _call_node(node, index)
                yield TraversalEvent(kind=EventKind.CALL_ENTER, call=call)
                stack.append((node, call))

            stack.extend((child, None) for child in reversed(node.children))


def _text(node: Any) -> str:
    return node.text.decode("utf-8", errors="replace")


def _comment_token(
    node: Any, index: SourceIndex, kind: CommentKind | None = None
) -> CommentToken:
    text = _text(node)
    if kind is None:
        kind = CommentKind.BLOCK if text.startswith("/*") else CommentKind.LINE
    location = index.location(node.start_byte)
    return CommentToken(
        text=text, start_line=location.line, start_column=location.column, kind=kind
    )


def _callee(node: Any) -> Callee | None:
    if node is None:
        return None
    if node.type == "identifier":
        return Identifier(name=_text(node))
    if node.type == "member_expression":
        obj = node.child_by_field_name("object")
        prop = node.child_by_field_name("property")
        if obj is not None and prop is not None and obj.type == "identifier":
            if prop.type == "property_identifier":
                return QualifiedMember(object=_text(obj), property=_text(prop))
    return None


def _call_node(node: Any, index: SourceIndex) -> CallNode:
    arguments = node.child_by_field_name("arguments")
    args: tuple[Argument, ...] = ()
    if arguments is not None and arguments.type == "arguments":
        args = tuple(
            _argument(child, index) for child in arguments.named_children if child.type != "comment"
        )
    return CallNode(
        callee=_callee(node.child_by_field_name("function")),
        args=args,
        location=index.location(node.start_byte),
    )


def _argument(node: Any, index: SourceIndex) -> Argument:
    location = index.location(node.start_byte)
    if node.type == "string":
        return Argument(kind=ArgumentKind.STRING, location=location, value=string_value(node))
    if node.type in _FUNCTION_TYPES:
        return Argument(kind=ArgumentKind.FUNCTION, location=location, first_param=_first_param(node))
    if node.type == "object":
        return Argument(kind=ArgumentKind.OBJECT, location=location, keys=_object_keys(node, index))
    return Argument(kind=ArgumentKind.OTHER, location=location)


def string_value(node: Any) -> str:
    """Decode the value of a tree-sitter ``string`` node."""
    parts: list[str] = []
    for child in node.named_children:
        if child.type == "string_fragment":
            parts.append(_text(child))
        elif child.type == "escape_sequence":
            escaped = _text(child)[1:]
            if escaped.startswith(("u", "x")) and len(escaped) > 1:
                digits = escaped[1:].strip("{}")
                try:
                    parts.append(chr(int(digits, 16)))
                except ValueError:
                    parts.append(escaped)
            elif escaped.startswith(("\r", "\n", "\u2028", "\u2029")):
                continue  # line continuation
            else:
                parts.append(_SIMPLE_ESCAPES.get(escaped, escaped))
    return "".join(parts)


def _first_param(node: Any) -> str | None:
    param = node.child_by_field_name("parameter")  # `hooks => ...`
    if param is None:
        params = node.child_by_field_name("parameters")
        if params is None or not params.named_children:
            return None
        param = params.named_children[0]
    return _text(param) if param.type == "identifier" else None


def _object_keys(node: Any, index: SourceIndex) -> tuple[PropertyKey, ...]:
    keys: list[PropertyKey] = []
    for member in node.named_children:
        if member.type in ("pair", "method_definition"):
            key = member.child_by_field_name("key" if member.type == "pair" else "name")
        elif member.type == "shorthand_property_identifier":
            key = member
        else:
            continue
        if key is None:
            continue
        name = string_value(key) if key.type == "string" else _text(key)
        keys.append(PropertyKey(name=name, location=index.location(key.start_byte)))
    return tuple(keys)
