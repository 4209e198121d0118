"""Prop extraction from JSX attributes.

Literal values are recorded as-is. Any other expression is recorded as a
Placeholder naming its ESTree category, e.g. ``<Foo x={compute()} />``
gives ``{"x": "(CallExpression)"}``.
"""

from __future__ import annotations

import functools
import html
import math
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from tree_sitter import Node

from componentscan.models import Placeholder, PropValue, UnknownAttributeValueError
from componentscan.walker import named_children, node_line, node_text

# tree-sitter node type -> ESTree node type, for placeholder text
ESTREE_CATEGORIES: dict[str, str] = {
    "identifier": "Identifier",
    "undefined": "Identifier",
    "this": "ThisExpression",
    "super": "Super",
    "call_expression": "CallExpression",
    "new_expression": "NewExpression",
    "member_expression": "MemberExpression",
    "subscript_expression": "MemberExpression",
    "arrow_function": "ArrowFunctionExpression",
    "function_expression": "FunctionExpression",
    "function": "FunctionExpression",
    "generator_function": "FunctionExpression",
    "class": "ClassExpression",
    "object": "ObjectExpression",
    "array": "ArrayExpression",
    "template_string": "TemplateLiteral",
    "ternary_expression": "ConditionalExpression",
    "unary_expression": "UnaryExpression",
    "update_expression": "UpdateExpression",
    "assignment_expression": "AssignmentExpression",
    "augmented_assignment_expression": "AssignmentExpression",
    "sequence_expression": "SequenceExpression",
    "await_expression": "AwaitExpression",
    "yield_expression": "YieldExpression",
    "spread_element": "SpreadElement",
    "jsx_element": "JSXElement",
    "jsx_self_closing_element": "JSXElement",
    "jsx_fragment": "JSXFragment",
    "as_expression": "TSAsExpression",
    "satisfies_expression": "TSSatisfiesExpression",
    "non_null_expression": "TSNonNullExpression",
    "type_assertion": "TSTypeAssertion",
}

_LOGICAL_OPERATORS = frozenset({"&&", "||", "??"})

_CHAIN_LINKS = {
    "member_expression": "object",
    "subscript_expression": "object",
    "call_expression": "function",
}

# JSX decodes only terminated entities: &name; &#N; &#xN;
_ENTITY_RE = re.compile(r"&(?:#[0-9]+|#[xX][0-9a-fA-F]+|[A-Za-z][A-Za-z0-9]*);")

_SIMPLE_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
    "\n": "",
    "\r\n": "",
}
_ESCAPE_RE = re.compile(r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|\r\n|[\s\S])")


@dataclass(frozen=True)
class PropContext:
    """Arguments passed to a custom prop extractor."""

    value_node: Node | None  # None for valueless attributes (<Foo disabled />)
    prop_name: str
    component_name: str  # Canonical dotted name
    default_extractor: Callable[[Node | None], PropValue]


PropExtractor = Callable[[PropContext], PropValue]


def _is_optional_chain(node: Node) -> bool:
    """Whether ``node`` is part of an ``a?.b`` / ``f?.()`` chain.

    ESTree wraps such chains in a ChainExpression. A parenthesized link
    ends the chain.
    """
    while node.type in _CHAIN_LINKS:
        if any(child.type == "optional_chain" for child in node.children):
            return True
        inner = node.child_by_field_name(_CHAIN_LINKS[node.type])
        if inner is None:
            return False
        node = inner
    return False


def decode_jsx_entities(text: str) -> str:
    """Decode HTML entities the way JSX string attributes do."""
    return _ENTITY_RE.sub(lambda match: html.unescape(match.group(0)), text)


def estree_category(node: Node) -> str:
    """ESTree-style node type name for a tree-sitter expression node."""
    if node.type == "binary_expression":
        operator = node.child_by_field_name("operator")
        if operator is not None and node_text(operator) in _LOGICAL_OPERATORS:
            return "LogicalExpression"
        return "BinaryExpression"
    if node.type in _CHAIN_LINKS and _is_optional_chain(node):
        return "ChainExpression"
    if node.type == "jsx_element":
        open_tag = node.child_by_field_name("open_tag")
        if open_tag is not None and open_tag.child_by_field_name("name") is None:
            return "JSXFragment"
    category = ESTREE_CATEGORIES.get(node.type)
    if category is not None:
        return category
    return "".join(part.capitalize() for part in node.type.split("_"))


def _unescape_js(match: re.Match[str]) -> str:
    escape = match.group(1)
    if escape in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[escape]
    if escape.startswith("u{"):
        return chr(int(escape[2:-1], 16))
    if escape[0] in "ux" and len(escape) > 1:
        return chr(int(escape[1:], 16))
    return escape


def js_string_value(node: Node) -> str:
    """Value of a JavaScript string literal, escapes decoded."""
    return _ESCAPE_RE.sub(_unescape_js, node_text(node)[1:-1])


def js_number_value(text: str) -> int | float | str:
    """Value of a JavaScript numeric literal.

    Integral values come back as int (JS ``2.0`` is ``2``); BigInt
    literals lose their ``n`` suffix. Unparseable text is returned as-is.
    """
    cleaned = text.replace("_", "")
    try:
        if cleaned.endswith("n"):
            return int(cleaned[:-1], 0)
        if cleaned[:2].lower() in ("0x", "0o", "0b"):
            return int(cleaned, 0)
        value = float(cleaned)
    except ValueError:
        return text
    if math.isfinite(value) and value.is_integer():
        return int(value)
    return value


def literal_value(node: Node) -> tuple[bool, Any]:
    """Return ``(True, value)`` if ``node`` is a literal, else ``(False, None)``."""
    if node.type == "string":
        return True, js_string_value(node)
    if node.type == "number":
        return True, js_number_value(node_text(node))
    if node.type == "true":
        return True, True
    if node.type == "false":
        return True, False
    if node.type == "null":
        return True, None
    if node.type == "regex":
        return True, node_text(node)
    return False, None


def default_extract_prop(value_node: Node | None, file_path: str = "<unknown>") -> PropValue:
    """Default prop value policy.

    - no value (``<Foo disabled />``) -> None
    - string value (``bar="x"``) -> the string, HTML entities decoded
    - ``{literal}`` -> the literal's value
    - ``{expression}`` -> Placeholder such as ``"(Identifier)"``

    Raises:
        UnknownAttributeValueError: For any other value node, e.g. an
            element used directly as the value (``icon=<Icon />``).
    """
    if value_node is None:
        return None

    if value_node.type == "string":
        return decode_jsx_entities(node_text(value_node)[1:-1])

    if value_node.type == "jsx_expression":
        children = named_children(value_node)
        if not children:
            return Placeholder("(JSXEmptyExpression)")

        expression = children[0]
        while expression.type == "parenthesized_expression":
            inner = named_children(expression)
            if not inner:
                break
            expression = inner[0]

        is_literal, value = literal_value(expression)
        if is_literal:
            return value
        return Placeholder(f"({estree_category(expression)})")

    raise UnknownAttributeValueError(value_node.type, file_path, node_line(value_node))


def extract_props(
    element: Node,
    component_name: str,
    file_path: str,
    extract_prop: PropExtractor | None = None,
) -> tuple[dict[str, PropValue], bool]:
    """Collect props of an opening or self-closing JSX element.

    Returns:
        Tuple of (props, props_spread). A repeated attribute name keeps the
        last value.
    """
    props: dict[str, PropValue] = {}
    props_spread = False
    default = functools.partial(default_extract_prop, file_path=file_path)

    for attribute in named_children(element):
        if attribute.type == "jsx_expression":
            # {...rest} is the only expression allowed in attribute position
            props_spread = True
        elif attribute.type == "jsx_attribute":
            parts = named_children(attribute)
            prop_name = node_text(parts[0])
            value_node = parts[1] if len(parts) > 1 else None

            if extract_prop is not None:
                props[prop_name] = extract_prop(
                    PropContext(
                        value_node=value_node,
                        prop_name=prop_name,
                        component_name=component_name,
                        default_extractor=default,
                    )
                )
            else:
                props[prop_name] = default(value_node)

    return props, props_spread
