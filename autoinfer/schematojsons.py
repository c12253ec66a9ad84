"""Renders an inferred schema tree as a JSON-Schema draft-07 document."""

import json
from typing import Any, Dict

from autoinfer.schema_node import (
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
)

JSON_SCHEMA_DRAFT_07 = 'http://json-schema.org/draft-07/schema#'
DEFAULT_SCHEMA_TITLE = 'GeneratedSchema'


class SchemaToJsonSchemaConverter:

    def __init__(self, infer_optional: bool = True) -> None:
        self.infer_optional = infer_optional

    def convert_node(self, node: SchemaNode | None) -> Dict[str, Any]:
        """
        Convert a schema node into a JSON-Schema fragment.
        """
        if node is None:
            return {'type': 'null'}
        if isinstance(node, AnyNode):
            return {}
        if isinstance(node, NullNode):
            return {'type': 'null'}
        if isinstance(node, StringNode):
            json_type: Dict[str, Any] = {'type': 'string'}
            if node.format:
                json_type['format'] = node.format
            return json_type
        if isinstance(node, NumberNode):
            return {'type': 'number'}
        if isinstance(node, IntegerNode):
            return {'type': 'integer'}
        if isinstance(node, BooleanNode):
            return {'type': 'boolean'}
        if isinstance(node, ArrayNode):
            return self.convert_array(node)
        if isinstance(node, ObjectNode):
            return self.convert_object(node)
        if isinstance(node, UnionNode):
            return self.convert_union(node)
        return {'description': f"Represents type: {getattr(node, 'kind', type(node).__name__)}"}

    def convert_array(self, node: ArrayNode) -> Dict[str, Any]:
        items = self.convert_node(node.element) if node.element is not None else {}
        return {'type': 'array', 'items': items}

    def convert_object(self, node: ObjectNode) -> Dict[str, Any]:
        """
        Convert an object node. Without optional inference every field is required.
        """
        json_object: Dict[str, Any] = {
            'type': 'object',
            'properties': {name: self.convert_node(child) for name, child in node.fields.items()},
        }
        if self.infer_optional:
            required = [name for name in node.fields if node.is_required(name)]
        else:
            required = list(node.fields)
        if required:
            json_object['required'] = required
        return json_object

    def convert_union(self, node: UnionNode) -> Dict[str, Any]:
        if not node.variants:
            return {'description': "Union type with no specific variants, effectively 'any'."}
        json_union: Dict[str, Any] = {}
        any_of = [self.convert_node(variant) for variant in node.variants if variant is not None]
        if any_of:
            json_union['anyOf'] = any_of
        return json_union

    def convert(self, root: SchemaNode | None, title: str | None = None) -> Dict[str, Any]:
        """
        Convert the root node into a complete draft-07 document.
        """
        document: Dict[str, Any] = {
            '$schema': JSON_SCHEMA_DRAFT_07,
            'title': title or DEFAULT_SCHEMA_TITLE,
        }
        document.update(self.convert_node(root))
        return document


def build_json_schema(root: SchemaNode | None, title: str | None = None, infer_optional: bool = True) -> Dict[str, Any]:
    """Builds the JSON-Schema document for a schema tree as a dictionary."""
    return SchemaToJsonSchemaConverter(infer_optional=infer_optional).convert(root, title)


def render_json_schema(root: SchemaNode | None, title: str | None = None, infer_optional: bool = True, prettify: bool = True) -> str:
    """Renders a schema tree as JSON-Schema text, indented by two when prettified."""
    document = build_json_schema(root, title, infer_optional)
    return dump_json(document, prettify)


def dump_json(document: Any, prettify: bool) -> str:
    """Serializes a document, two-space indented or compact."""
    if prettify:
        return json.dumps(document, indent=2, ensure_ascii=False)
    return json.dumps(document, separators=(',', ':'), ensure_ascii=False)
