"""Data models for componentscan usage reports."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class ImportKind(Enum):
    """How a local binding was introduced by an import declaration."""

    DEFAULT = "ImportDefaultSpecifier"  # import Foo from "lib"
    NAMED = "ImportSpecifier"  # import { Foo as Bar } from "lib"
    NAMESPACE = "ImportNamespaceSpecifier"  # import * as lib from "lib"


class VisitResult(Enum):
    """Control signal returned by every visit call."""

    CONTINUE = "continue"
    SKIP_SUBTREE = "skip_subtree"
    STOP = "stop"


class Placeholder(str):
    """Stand-in for a prop whose value is an unevaluated expression.

    Compares equal to its text, e.g. ``"(CallExpression)"``, so reports
    serialize as plain JSON strings.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Placeholder({str.__repr__(self)})"


# A literal scalar, a Placeholder, or None for a valueless attribute.
PropValue = Union[str, int, float, bool, None]


@dataclass(frozen=True)
class ImportRecord:
    """Provenance of one local binding created by an import."""

    local: str
    module_name: str
    kind: ImportKind
    imported: str | None = None  # Exported name, only for NAMED imports

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.imported is not None:
            data["imported"] = self.imported
        data["local"] = self.local
        data["moduleName"] = self.module_name
        data["importType"] = self.kind.value
        return data


@dataclass(frozen=True)
class SourceLocation:
    """Position of a reference: 1-based line, 0-based column."""

    file: str
    line: int
    column: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "start": {"line": self.line, "column": self.column},
        }


@dataclass
class InstanceRecord:
    """One usage (or styled definition) of a component."""

    location: SourceLocation
    import_info: ImportRecord | None = None
    props: dict[str, PropValue] = field(default_factory=dict)
    props_spread: bool = False
    styled: str | None = None  # Style text, only for styled definitions

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.import_info is not None:
            data["importInfo"] = self.import_info.to_dict()
        data["props"] = dict(self.props)
        data["propsSpread"] = self.props_spread
        data["location"] = self.location.to_dict()
        if self.styled is not None:
            data["styled"] = self.styled
        return data


@dataclass
class ComponentNode:
    """A node of the report tree: instances at this path plus children."""

    instances: list[InstanceRecord] = field(default_factory=list)
    components: dict[str, ComponentNode] = field(default_factory=dict)

    def append(self, record: InstanceRecord) -> None:
        self.instances.append(record)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.instances:
            data["instances"] = [i.to_dict() for i in self.instances]
        if self.components:
            data["components"] = {
                name: child.to_dict() for name, child in self.components.items()
            }
        return data


class Report:
    """Hierarchical usage report keyed by canonical component path.

    Owned by the caller and shared across sequential ``scan`` calls, so
    several files aggregate into one tree. The scanner only mutates it
    through ``get_or_create`` and ``ComponentNode.append``.
    """

    def __init__(self) -> None:
        self.components: dict[str, ComponentNode] = {}

    def get_or_create(self, path: Sequence[str]) -> ComponentNode:
        """Return the node at ``path``, creating missing segments."""
        if not path:
            raise ValueError("Component path must have at least one segment")

        children = self.components
        node: ComponentNode | None = None
        for segment in path:
            node = children.get(segment)
            if node is None:
                node = ComponentNode()
                children[segment] = node
            children = node.components
        assert node is not None
        return node

    def get(self, path: str | Sequence[str]) -> ComponentNode | None:
        """Look up a node by dotted name or segment list without creating it."""
        segments = path.split(".") if isinstance(path, str) else path
        children = self.components
        node: ComponentNode | None = None
        for segment in segments:
            node = children.get(segment)
            if node is None:
                return None
            children = node.components
        return node

    def iter_components(self) -> Iterator[tuple[str, ComponentNode]]:
        """Yield ``(dotted_name, node)`` depth-first in insertion order."""
        stack: list[tuple[str, ComponentNode]] = [
            (name, node) for name, node in reversed(self.components.items())
        ]
        while stack:
            name, node = stack.pop()
            yield name, node
            stack.extend(
                (f"{name}.{child_name}", child)
                for child_name, child in reversed(node.components.items())
            )

    def instance_count(self) -> int:
        return sum(len(node.instances) for _, node in self.iter_components())

    def to_dict(self) -> dict[str, Any]:
        return {name: node.to_dict() for name, node in self.components.items()}


# === Errors ===


class ScanError(Exception):
    """Base exception for componentscan errors."""


class ConfigError(ScanError):
    """Raised when a scanner configuration is missing or invalid."""


class ParseError(ScanError):
    """Raised when source text cannot be parsed into a syntax tree."""

    def __init__(self, file_path: str, line: int | None = None) -> None:
        self.file_path = file_path
        self.line = line
        where = f"{file_path}:{line}" if line is not None else file_path
        super().__init__(f"Failed to parse: {where}")


class UnexpectedNodeError(ScanError):
    """Raised when the syntax tree has a shape the scanner does not handle.

    Not recovered per file: it propagates out of the whole scan.
    """

    category = "node"

    def __init__(self, node_type: str, file_path: str, line: int) -> None:
        self.node_type = node_type
        self.file_path = file_path
        self.line = line
        super().__init__(
            f"Unknown {self.category} type: {node_type} ({file_path}:{line})"
        )


class UnknownImportSpecifierError(UnexpectedNodeError):
    category = "import specifier"


class UnknownNameNodeError(UnexpectedNodeError):
    category = "name"


class UnknownAttributeValueError(UnexpectedNodeError):
    category = "attribute value"


class UnrecognizedStyledShapeError(UnexpectedNodeError):
    category = "styled definition"
