"""Import declaration handling: local binding -> import provenance."""

from __future__ import annotations

from tree_sitter import Node

from componentscan.models import ImportKind, ImportRecord, UnknownImportSpecifierError
from componentscan.walker import named_children, node_line, node_text

# local_name -> ImportRecord, built per file in document order
ImportMap = dict[str, ImportRecord]


def _unquote(node: Node) -> str:
    return node_text(node)[1:-1]


def _export_name(node: Node) -> str:
    # import { "kebab-name" as Foo } uses a string as the exported name
    if node.type == "string":
        return _unquote(node)
    return node_text(node)


def collect_import_records(node: Node, file_path: str) -> list[ImportRecord]:
    """Build one ImportRecord per local binding of an import statement.

    Handles:
        import Foo from "lib"               -> DEFAULT
        import { Foo, Bar as Baz } from ... -> NAMED
        import * as lib from "lib"          -> NAMESPACE
        import Foo, { Bar } from "lib"      -> DEFAULT + NAMED

    Side-effect imports (``import "lib"``) and TypeScript
    ``import x = require("lib")`` produce no records.

    Raises:
        UnknownImportSpecifierError: For any other clause shape.
    """
    source_node = node.child_by_field_name("source")
    if source_node is None:
        return []

    module_name = _unquote(source_node)
    records: list[ImportRecord] = []

    for clause in named_children(node):
        if clause.type != "import_clause":
            continue

        for spec in named_children(clause):
            if spec.type == "identifier":
                records.append(
                    ImportRecord(
                        local=node_text(spec),
                        module_name=module_name,
                        kind=ImportKind.DEFAULT,
                    )
                )
            elif spec.type == "namespace_import":
                for part in named_children(spec):
                    if part.type == "identifier":
                        records.append(
                            ImportRecord(
                                local=node_text(part),
                                module_name=module_name,
                                kind=ImportKind.NAMESPACE,
                            )
                        )
            elif spec.type == "named_imports":
                records.extend(
                    _named_import_records(spec, module_name, file_path)
                )
            else:
                raise UnknownImportSpecifierError(
                    spec.type, file_path, node_line(spec)
                )

    return records


def _named_import_records(
    node: Node, module_name: str, file_path: str
) -> list[ImportRecord]:
    records = []
    for spec in named_children(node):
        if spec.type != "import_specifier":
            raise UnknownImportSpecifierError(spec.type, file_path, node_line(spec))

        name_node = spec.child_by_field_name("name")
        alias_node = spec.child_by_field_name("alias")
        if name_node is None:
            raise UnknownImportSpecifierError(spec.type, file_path, node_line(spec))

        imported = _export_name(name_node)
        local = node_text(alias_node) if alias_node is not None else imported
        records.append(
            ImportRecord(
                local=local,
                module_name=module_name,
                kind=ImportKind.NAMED,
                imported=imported,
            )
        )
    return records


def register_imports(imports: ImportMap, records: list[ImportRecord]) -> None:
    """Add records to the map; a later binding of the same name wins."""
    for record in records:
        imports[record.local] = record
