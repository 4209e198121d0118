"""Component name resolution: name nodes -> canonical dotted paths."""

from __future__ import annotations

from collections.abc import Callable

from tree_sitter import Node

from componentscan.imports import ImportMap
from componentscan.models import ImportKind, ImportRecord, UnknownNameNodeError
from componentscan.walker import named_children, node_line, node_text

AliasResolver = Callable[[ImportRecord], str]

_IDENTIFIER_TYPES = frozenset(
    {"identifier", "property_identifier", "jsx_identifier", "type_identifier", "this"}
)
# nested_identifier is what older grammars produce for <Foo.Bar>
_MEMBER_TYPES = frozenset({"member_expression", "nested_identifier"})


def default_resolve_alias(record: ImportRecord) -> str:
    """Canonical name for an imported binding.

    Default and namespace imports keep the local name; named imports use
    the exported name (``import { Button as Btn }`` -> ``Button``), except
    ``import { default as Foo }`` which keeps ``Foo``.
    """
    if record.kind is ImportKind.NAMED and record.imported and record.imported != "default":
        return record.imported
    return record.local


def name_segments(node: Node, file_path: str) -> list[str]:
    """Turn an identifier or member chain (``A.B.C``) into its segments.

    Raises:
        UnknownNameNodeError: For namespaced names (``svg:rect``) or any
            other node shape.
    """
    if node.type in _IDENTIFIER_TYPES:
        return [node_text(node)]

    if node.type in _MEMBER_TYPES:
        obj = node.child_by_field_name("object")
        prop = node.child_by_field_name("property")
        if obj is None or prop is None:
            parts = named_children(node)
            if len(parts) < 2:
                raise UnknownNameNodeError(node.type, file_path, node_line(node))
            obj, prop = parts[0], parts[-1]
        return name_segments(obj, file_path) + name_segments(prop, file_path)

    raise UnknownNameNodeError(node.type, file_path, node_line(node))


def resolve_leading(
    first: str,
    imports: ImportMap,
    resolve_alias: AliasResolver = default_resolve_alias,
) -> str:
    """Canonical name of a leading segment; unchanged if not imported."""
    record = imports.get(first)
    if record is None:
        return first
    return resolve_alias(record)


def canonical_segments(
    segments: list[str],
    imports: ImportMap,
    resolve_alias: AliasResolver = default_resolve_alias,
) -> list[str]:
    """Apply alias resolution to the leading segment only.

    An alias that resolves to a dotted name contributes several segments.
    """
    first, *rest = segments
    return resolve_leading(first, imports, resolve_alias).split(".") + rest
