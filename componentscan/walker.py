"""Depth-first syntax tree walk with explicit visit control."""

from __future__ import annotations

from typing import Any

from tree_sitter import Node

from componentscan.models import VisitResult


def node_text(node: Node) -> str:
    """Get the source text of a node."""
    return node.text.decode("utf-8", errors="replace") if node.text else ""


def node_line(node: Node) -> int:
    """1-based line of the node's first character."""
    return node.start_point[0] + 1


def node_column(node: Node, source: bytes) -> int:
    """0-based column of the node's first character, in UTF-16 code units.

    tree-sitter columns count bytes; editors and JS tooling count UTF-16
    code units, so ``"é"`` earlier on the line counts once, not twice.
    """
    line_start = node.start_byte - node.start_point[1]
    prefix = source[line_start : node.start_byte].decode("utf-8", errors="replace")
    return len(prefix.encode("utf-16-le")) // 2


def named_children(node: Node) -> list[Node]:
    """Named children without comments."""
    return [child for child in node.named_children if child.type != "comment"]


class Visitor:
    """Dispatches ``visit_<node type>`` methods.

    A handler returns a VisitResult; node types without a handler (or a
    handler returning None) continue into their children.
    """

    def visit(self, node: Node) -> VisitResult:
        handler = getattr(self, f"visit_{node.type}", None)
        if handler is None:
            return VisitResult.CONTINUE
        result: Any = handler(node)
        return VisitResult.CONTINUE if result is None else result


def walk(root: Node, visitor: Visitor) -> VisitResult:
    """Visit ``root`` and its descendants in document (pre-)order.

    Returns STOP if the visitor stopped the walk, CONTINUE otherwise.
    """
    stack = [root]

    while stack:
        node = stack.pop()
        result = visitor.visit(node)

        if result is VisitResult.STOP:
            return VisitResult.STOP
        if result is VisitResult.SKIP_SUBTREE:
            continue

        # Reversed so children are popped in document order
        stack.extend(reversed(node.named_children))

    return VisitResult.CONTINUE
