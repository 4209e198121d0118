"""Tests for the pre-order syntax tree walk."""

from __future__ import annotations

import pytest

ts = pytest.importorskip("tree_sitter", reason="tree-sitter not installed")

from componentscan.models import VisitResult  # noqa: E402
from componentscan.parser import get_parser  # noqa: E402
from componentscan.walker import Visitor, node_column, node_text, walk  # noqa: E402

CODE = "foo(bar);\nbaz;\n"


class Recorder(Visitor):
    """Records identifiers by name and other nodes by type."""

    def __init__(self) -> None:
        self.seen: list[str] = []

    def visit(self, node):
        self.seen.append(node_text(node) if node.type == "identifier" else node.type)
        return super().visit(node)


def walk_code(visitor: Visitor, code: str = CODE) -> VisitResult:
    return walk(get_parser().parse(code, "test.js").root_node, visitor)


class TestWalk:
    def test_document_order(self) -> None:
        visitor = Recorder()

        result = walk_code(visitor)

        assert result is VisitResult.CONTINUE
        assert visitor.seen == [
            "program",
            "expression_statement",
            "call_expression",
            "foo",
            "arguments",
            "bar",
            "expression_statement",
            "baz",
        ]

    def test_skip_subtree_prunes_descendants_only(self) -> None:
        class SkipCalls(Recorder):
            def visit_call_expression(self, node):
                return VisitResult.SKIP_SUBTREE

        visitor = SkipCalls()

        assert walk_code(visitor) is VisitResult.CONTINUE
        assert visitor.seen == [
            "program",
            "expression_statement",
            "call_expression",
            "expression_statement",
            "baz",
        ]

    def test_stop_ends_walk(self) -> None:
        class StopAtArguments(Recorder):
            def visit_arguments(self, node):
                return VisitResult.STOP

        visitor = StopAtArguments()

        assert walk_code(visitor) is VisitResult.STOP
        assert visitor.seen[-1] == "arguments"
        assert "bar" not in visitor.seen
        assert "baz" not in visitor.seen

    def test_handler_returning_none_continues(self) -> None:
        class Quiet(Recorder):
            def visit_call_expression(self, node):
                return None

        visitor = Quiet()

        walk_code(visitor)

        assert "foo" in visitor.seen
        assert "bar" in visitor.seen


class TestNodeColumn:
    def test_counts_utf16_units(self) -> None:
        code = 'x = "é😀"; y;\n'
        root = get_parser().parse(code, "test.js").root_node
        statement = root.named_children[1]

        assert statement.start_point[1] == 14
        assert node_column(statement, code.encode("utf-8")) == 11
