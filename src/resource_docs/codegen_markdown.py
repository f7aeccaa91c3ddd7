"""Markdown rendering of resource schemas."""

from __future__ import annotations

from typing import Iterable

from markdown_it import MarkdownIt

from .schema import ENUM_KEY, EnumList, Node, Scalar, Schema, SchemaNode

INDENT = "  "


def schema_to_table(schema: Schema | None) -> str:
    """Render *schema* as its description followed by a nested Markdown list.

    A missing description or missing properties contribute nothing, so an
    empty schema renders as a single blank paragraph.
    """
    if schema is None:
        return ""
    text = (schema.description or "") + "\n\n"
    if schema.properties is not None:
        text += render_properties(schema.properties, 0)
    return text


def schema_to_html(schema: Schema | None) -> str:
    """Render *schema* as an HTML fragment."""
    return MarkdownIt("commonmark").render(schema_to_table(schema))


def render_properties(node: SchemaNode | None, indent_level: int = 0) -> str:
    """Render the entries of *node* as a nested Markdown list.

    Parameters
    ----------
    node:
        Property tree to render. Scalars and ``None`` render as ``""``.
    indent_level:
        Number of two-space indentation units in front of every bullet.
        Nested mappings are rendered two units deeper than their parent.
    """
    if not isinstance(node, (Node, EnumList)):
        return ""

    pad = INDENT * indent_level
    parts: list[str] = []
    for key, value in _entries(node):
        if _is_absent(value):
            continue
        if isinstance(value, Scalar):
            parts.append(f"{pad}- {key} : *{value.text}*\n\n")
            continue

        parts.append(f"{pad}- **{key}**\n\n")
        if key == ENUM_KEY and isinstance(value, EnumList):
            # flat, so long value lists stay on a single line
            parts.append(f"{pad}{INDENT}- enum : *{format_enum(value)}*\n\n")
            continue

        for sub_key, sub_value in _entries(value):
            if _is_absent(sub_value):
                continue
            if isinstance(sub_value, Scalar):
                parts.append(f"{pad}{INDENT}- **{sub_key}** : {sub_value.text}\n\n")
            else:
                parts.append(f"{pad}{INDENT}- **{sub_key}**\n\n")
                parts.append(render_properties(sub_value, indent_level + 2))
    return "".join(parts)


def format_enum(values: EnumList) -> str:
    """Return ``["a", "b"]`` style text for an enum value list."""
    quoted = ", ".join(f'"{value}"' for value in values.values)
    return f"[{quoted}]"


def _entries(node: SchemaNode) -> Iterable[tuple[str, SchemaNode]]:
    if isinstance(node, Node):
        return node.entries
    if isinstance(node, EnumList):
        return [(str(index), Scalar(value)) for index, value in enumerate(node.values)]
    return ()


def _is_absent(node: SchemaNode) -> bool:
    return isinstance(node, Scalar) and node.value is None
