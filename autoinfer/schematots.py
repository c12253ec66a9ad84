# pylint: disable=line-too-long

"""Renders an inferred schema tree as a TypeScript type declaration."""

import json
import logging
import re
from typing import List

from autoinfer.common import is_identifier, process_template, type_name
from autoinfer.schema_node import (
    FORMAT_DATE_TIME,
    AnyNode,
    ArrayNode,
    BooleanNode,
    IntegerNode,
    NullNode,
    NumberNode,
    ObjectNode,
    SchemaNode,
    StringNode,
    UnionNode,
    canonical_form,
)

logger = logging.getLogger(__name__)

DEFAULT_INTERFACE_NAME = 'GeneratedInterface'

_STRING_LITERAL = re.compile(r'"(?:[^"\\]|\\.)*"')


class SchemaToTypeScript:
    """Converts a schema tree into TypeScript type expressions."""

    def __init__(self, infer_optional: bool = True) -> None:
        self.infer_optional = infer_optional
        self.INDENT = ' ' * 2

    def convert_schema_to_typescript(self, node: SchemaNode | None, depth: int = 0) -> str:
        """Convert a schema node to a TypeScript type expression."""
        if node is None or isinstance(node, AnyNode):
            return 'any'
        if isinstance(node, NullNode):
            return 'null'
        if isinstance(node, BooleanNode):
            return 'boolean'
        if isinstance(node, (IntegerNode, NumberNode)):
            return 'number'
        if isinstance(node, StringNode):
            return 'Date' if node.format == FORMAT_DATE_TIME else 'string'
        if isinstance(node, ArrayNode):
            item_type = self.convert_schema_to_typescript(node.element, depth + 1)
            if isinstance(node.element, UnionNode) and len(node.element.variants) > 1:
                return f'({item_type})[]'
            return f'{item_type}[]'
        if isinstance(node, ObjectNode):
            return self.generate_object(node, depth)
        if isinstance(node, UnionNode):
            if not node.variants:
                return 'any'
            variants = sorted(node.variants, key=lambda v: json.dumps(canonical_form(v), sort_keys=True))
            return ' | '.join(self.convert_schema_to_typescript(variant, depth) for variant in variants)
        raise ValueError(f"Schema contains unexpected node {node!r}")

    def generate_object(self, node: ObjectNode, depth: int) -> str:
        """Generate an inline object type with one field per line."""
        if not node.fields:
            return '{}'
        output = '{\n'
        indent = self.INDENT * (depth + 1)
        for name, child in node.fields.items():
            optional_marker = '?' if self.infer_optional and not node.is_required(name) else ''
            output += f'{indent}{self.property_name(name)}{optional_marker}: {self.convert_schema_to_typescript(child, depth + 1)};\n'
        output += self.INDENT * depth + '}'
        return output

    @staticmethod
    def property_name(name: str) -> str:
        """Quote field names that are not valid identifiers."""
        return name if is_identifier(name) else json.dumps(name)

    def generate_declaration(self, root: SchemaNode | None, interface_name: str) -> str:
        """Wrap the root type in a named declaration."""
        return process_template(
            "schematots/interface.ts.jinja",
            is_interface=isinstance(root, ObjectNode),
            type_name=type_name(interface_name, DEFAULT_INTERFACE_NAME),
            body=self.convert_schema_to_typescript(root),
        )


def format_typescript(text: str, indent: str = '  ') -> str:
    """Re-indents TypeScript declarations by brace depth.

    Blank lines are dropped and the result ends with a single newline.

    Raises:
        ValueError: if the braces of the text do not balance.
    """
    lines: List[str] = []
    depth = 0
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        code = _STRING_LITERAL.sub('""', stripped)
        line_depth = depth - 1 if code.startswith('}') else depth
        depth += code.count('{') - code.count('}')
        if line_depth < 0 or depth < 0:
            raise ValueError(f"Unbalanced closing brace in line '{stripped}'")
        lines.append(indent * line_depth + stripped)
    if depth != 0:
        raise ValueError(f"{depth} unclosed brace(s) at end of declaration")
    return '\n'.join(lines) + '\n'


def render_interface(root: SchemaNode | None, interface_name: str | None = None, infer_optional: bool = True, prettify: bool = True) -> str:
    """Renders a schema tree as a named TypeScript declaration.

    Object roots become an ``interface``, any other root a ``type`` alias.
    Prettify failures are logged and the unformatted text is returned.

    Args:
        root: Root of the inferred schema tree
        interface_name: Name of the declaration (default GeneratedInterface)
        infer_optional: Mark fields that are not present in every sample as optional
        prettify: Normalize indentation

    Returns:
        The declaration text
    """
    converter = SchemaToTypeScript(infer_optional=infer_optional)
    output = converter.generate_declaration(root, interface_name or DEFAULT_INTERFACE_NAME)
    if prettify:
        try:
            output = format_typescript(output)
        except ValueError as e:
            logger.warning("Failed to prettify output: %s", e)
    return output
