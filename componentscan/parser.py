"""Tree-sitter parser adapter for JavaScript/TypeScript sources.

Every file is parsed with JSX enabled. Plain JavaScript extensions try the
JavaScript grammar first and fall back to the TSX grammar, which also
accepts JSX the JavaScript grammar rejects (``<this.props.icon />``).
Everything else uses the TSX grammar directly.
"""

from __future__ import annotations

import logging
from pathlib import Path

import tree_sitter_javascript as ts_js
import tree_sitter_typescript as ts_ts
from tree_sitter import Language, Node, Parser, Tree

from componentscan.models import ParseError

logger = logging.getLogger(__name__)

JAVASCRIPT_EXTENSIONS = frozenset({".js", ".jsx", ".mjs", ".cjs"})


class SourceParser:
    """Parses source text into tree-sitter trees, one parser per grammar."""

    def __init__(self) -> None:
        self._js_parser = Parser(Language(ts_js.language()))
        self._tsx_parser = Parser(Language(ts_ts.language_tsx()))

    def _get_parsers(self, file_path: str) -> list[Parser]:
        """Get the parsers to try for the file extension, in order."""
        if Path(file_path).suffix.lower() in JAVASCRIPT_EXTENSIONS:
            return [self._js_parser, self._tsx_parser]
        return [self._tsx_parser]

    def parse(self, code: str | bytes, file_path: str) -> Tree:
        """Parse ``code`` or raise ParseError if no grammar accepts it."""
        source = code.encode("utf-8") if isinstance(code, str) else code
        parsers = self._get_parsers(file_path)

        for parser in parsers:
            tree = parser.parse(source)
            if not tree.root_node.has_error:
                if parser is not parsers[0]:
                    logger.debug("Parsed %s with the TSX grammar", file_path)
                return tree

        # Report the error position from the last grammar tried
        error_node = _first_error(tree.root_node)
        line = error_node.start_point[0] + 1 if error_node is not None else None
        raise ParseError(file_path, line)


def _first_error(root: Node) -> Node | None:
    """Find the first ERROR or MISSING node in document order."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        if node.has_error:
            stack.extend(reversed(node.children))
    return None


_default_parser: SourceParser | None = None


def get_parser() -> SourceParser:
    """Get or create the shared SourceParser."""
    global _default_parser
    if _default_parser is None:
        _default_parser = SourceParser()
    return _default_parser
