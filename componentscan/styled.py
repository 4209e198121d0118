"""Detection of styled-component style definitions.

Recognizes declarations such as::

    const Primary = styled(Button)`color: red;`
    const Title = styled(Typography.Title)`margin: 0;`
    const Input = styled(TextField).attrs({ size: "small" })`width: 100%;`

and reports them as instances of the wrapped component.
"""

from __future__ import annotations

from dataclasses import dataclass

from tree_sitter import Node

from componentscan.models import UnrecognizedStyledShapeError
from componentscan.walker import named_children, node_line, node_text


@dataclass(frozen=True)
class StyledDefinition:
    """A wrapped component name (as written) and its style text."""

    name: str
    style: str


def _call_arguments(call: Node) -> list[Node] | None:
    """Arguments of a plain call, or None for a tagged template."""
    arguments = call.child_by_field_name("arguments")
    if arguments is None or arguments.type != "arguments":
        return None
    return named_children(arguments)


def template_segments(template: Node) -> list[str]:
    """Raw text segments of a template literal, split at ``${...}``."""
    raw = template.text or b""
    base = template.start_byte
    cursor = 1  # skip opening backtick
    segments = []

    for child in template.named_children:
        if child.type == "template_substitution":
            segments.append(raw[cursor : child.start_byte - base].decode("utf-8", errors="replace"))
            cursor = child.end_byte - base

    segments.append(raw[cursor:-1].decode("utf-8", errors="replace"))
    return segments


def detect_styled_definition(declaration: Node, file_path: str) -> StyledDefinition | None:
    """Inspect the first declarator of a var/let/const declaration.

    Two tag shapes are recognized; when both apply the second wins:
        (a) ``styled(Button).attrs(...)``: member call on a call whose
            first argument is an identifier
        (b) ``styled(Button)`` or ``styled(Foo.Bar)``: call whose first
            argument is an identifier or a one-level member expression

    Only the first two raw template segments make up the style text;
    later interpolations and segments are ignored.

    Raises:
        UnrecognizedStyledShapeError: If the tag is a call with no
            arguments (``css()`...```).
    """
    declarator = next(
        (c for c in named_children(declaration) if c.type == "variable_declarator"),
        None,
    )
    if declarator is None:
        return None

    value = declarator.child_by_field_name("value")
    if value is None or value.type != "call_expression":
        return None

    template = value.child_by_field_name("arguments")
    tag = value.child_by_field_name("function")
    if template is None or template.type != "template_string":
        return None
    if tag is None or tag.type != "call_expression":
        return None

    tag_arguments = _call_arguments(tag)
    if tag_arguments is None:
        return None

    name = None

    callee = tag.child_by_field_name("function")
    if callee is not None and callee.type == "member_expression":
        inner = callee.child_by_field_name("object")
        if inner is not None and inner.type == "call_expression":
            inner_arguments = _call_arguments(inner)
            if inner_arguments and inner_arguments[0].type == "identifier":
                name = node_text(inner_arguments[0])

    if not tag_arguments:
        raise UnrecognizedStyledShapeError(tag.type, file_path, node_line(tag))

    first = tag_arguments[0]
    if first.type == "identifier":
        name = node_text(first)
    elif first.type == "member_expression":
        obj = first.child_by_field_name("object")
        prop = first.child_by_field_name("property")
        if obj is not None and prop is not None and obj.type == "identifier":
            name = f"{node_text(obj)}.{node_text(prop)}"

    if not name:
        return None

    return StyledDefinition(name=name, style="".join(template_segments(template)[:2]))
