"""Per-file component usage scanning.

Walks one file's syntax tree in a single pre-order pass:

1. ``import`` statements extend the file's import map as they are met,
   so an import placed after a usage does not apply to it
2. ``var``/``let``/``const`` declarations are checked for styled
   definitions
3. JSX opening and self-closing tags are recorded as instances

Every candidate is resolved to its canonical dotted path, passed through
the InclusionFilter and appended to the caller's Report. A filtered-out
candidate also skips its subtree: for a tag that is its attributes, for
a styled definition the whole declaration.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Collection
from dataclasses import dataclass
from pathlib import Path

from tree_sitter import Node

from componentscan.filters import InclusionFilter
from componentscan.imports import ImportMap, collect_import_records, register_imports
from componentscan.models import (
    InstanceRecord,
    ParseError,
    Report,
    SourceLocation,
    VisitResult,
)
from componentscan.names import (
    AliasResolver,
    canonical_segments,
    default_resolve_alias,
    name_segments,
)
from componentscan.parser import get_parser
from componentscan.props import PropExtractor, extract_props
from componentscan.styled import detect_styled_definition
from componentscan.walker import Visitor, node_column, walk

logger = logging.getLogger(__name__)


@dataclass
class ScanOptions:
    """Caller-supplied scan settings.

    Attributes:
        components: Allow-list of component names (top-level or dotted).
        include_sub_components: Record dotted references like ``Foo.Bar``.
        imported_from: Required import source, string or compiled regex.
        resolve_alias: Maps an ImportRecord to the canonical leading name.
        extract_prop: Custom prop value policy, see PropContext.
    """

    components: Collection[str] | None = None
    include_sub_components: bool = False
    imported_from: str | re.Pattern[str] | None = None
    resolve_alias: AliasResolver = default_resolve_alias
    extract_prop: PropExtractor | None = None

    def make_filter(self) -> InclusionFilter:
        return InclusionFilter(
            components=self.components,
            include_sub_components=self.include_sub_components,
            imported_from=self.imported_from,
        )


class ComponentVisitor(Visitor):
    """Collects component instances of one file into a Report."""

    def __init__(
        self, file_path: str, source: bytes, report: Report, options: ScanOptions
    ) -> None:
        self.file_path = file_path
        self.source = source
        self.report = report
        self.options = options
        self.imports: ImportMap = {}
        self.recorded = 0
        self._filter = options.make_filter()

    # === Imports ===

    def visit_import_statement(self, node: Node) -> VisitResult:
        register_imports(self.imports, collect_import_records(node, self.file_path))
        return VisitResult.SKIP_SUBTREE

    # === Styled definitions ===

    def visit_lexical_declaration(self, node: Node) -> VisitResult:
        """Handle: const Name = styled(Component)`...`"""
        return self._handle_declaration(node)

    def visit_variable_declaration(self, node: Node) -> VisitResult:
        """Handle: var Name = styled(Component)`...`"""
        return self._handle_declaration(node)

    def _handle_declaration(self, node: Node) -> VisitResult:
        definition = detect_styled_definition(node, self.file_path)
        if definition is None:
            return VisitResult.CONTINUE

        resolved = self._resolve(definition.name.split("."))
        if resolved is None:
            return VisitResult.SKIP_SUBTREE

        written_first = definition.name.split(".")[0]
        self._record(
            resolved,
            InstanceRecord(
                location=SourceLocation(
                    file=self.file_path,
                    line=node.start_point[0] + 1,
                    column=node_column(node, self.source),
                ),
                import_info=self.imports.get(written_first),
                styled=definition.style,
            ),
        )
        return VisitResult.CONTINUE

    # === JSX ===

    def visit_jsx_opening_element(self, node: Node) -> VisitResult:
        """Handle: <Component ...>"""
        return self._handle_element(node)

    def visit_jsx_self_closing_element(self, node: Node) -> VisitResult:
        """Handle: <Component ... />"""
        return self._handle_element(node)

    def _handle_element(self, node: Node) -> VisitResult:
        name_node = node.child_by_field_name("name")
        if name_node is None:
            # Fragment: <>...</>
            return VisitResult.CONTINUE

        written = name_segments(name_node, self.file_path)
        resolved = self._resolve(written)
        if resolved is None:
            return VisitResult.SKIP_SUBTREE

        props, props_spread = extract_props(
            node,
            component_name=".".join(resolved),
            file_path=self.file_path,
            extract_prop=self.options.extract_prop,
        )
        self._record(
            resolved,
            InstanceRecord(
                location=SourceLocation(
                    file=self.file_path,
                    line=name_node.start_point[0] + 1,
                    column=node_column(name_node, self.source),
                ),
                import_info=self.imports.get(written[0]),
                props=props,
                props_spread=props_spread,
            ),
        )
        return VisitResult.CONTINUE

    # === Shared ===

    def _resolve(self, written: list[str]) -> list[str] | None:
        """Canonical path of a reference, or None if filtered out."""
        resolved = canonical_segments(written, self.imports, self.options.resolve_alias)
        # The alias of the leading segment may itself be dotted
        resolved_first = ".".join(resolved[: len(resolved) - len(written) + 1])

        if not self._filter.allows(written, resolved, resolved_first, self.imports):
            return None
        return resolved

    def _record(self, path: list[str], record: InstanceRecord) -> None:
        self.report.get_or_create(path).append(record)
        self.recorded += 1


def scan(
    code: str | bytes,
    file_path: str,
    report: Report,
    options: ScanOptions | None = None,
) -> bool:
    """Scan one file's source into ``report``.

    Returns:
        True if the file was scanned, False if it could not be parsed (the
        report is left untouched and a warning is logged).

    Raises:
        UnexpectedNodeError: If the syntax tree has a shape the scanner
            does not handle. This aborts the scan instead of skipping the
            file.
    """
    options = options or ScanOptions()
    source = code.encode("utf-8") if isinstance(code, str) else code

    try:
        tree = get_parser().parse(source, file_path)
    except ParseError as e:
        logger.warning("%s", e)
        return False

    visitor = ComponentVisitor(file_path, source, report, options)
    walk(tree.root_node, visitor)

    logger.debug("Scanned %s: %d instances", file_path, visitor.recorded)
    return True


def scan_file(
    path: str | Path,
    report: Report,
    options: ScanOptions | None = None,
) -> bool:
    """Read ``path`` and scan it. See scan()."""
    path = Path(path)
    return scan(path.read_bytes(), str(path), report, options)
