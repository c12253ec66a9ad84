"""Generates TypeScript or JSON-Schema output from sample data.

Each input source is turned into a schema tree by its collaborator module,
then rendered and passed through the union deduplication post-pass.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping

from autoinfer.schema_inference import SchemaInferrer, SchemaMerger
from autoinfer.schema_node import ArrayNode, ObjectNode, SchemaNode, node_from_dict
from autoinfer.schematojsons import render_json_schema
from autoinfer.schematots import render_interface
from autoinfer.union_dedupe import dedupe_unions

logger = logging.getLogger(__name__)


class SchemaGenerationError(Exception):
    """
    Exception raised when sample data cannot be turned into a schema.

    Attributes:
        message: Human-readable error description
        source: The input source that failed
    """

    def __init__(self, message: str, source: str | None = None):
        self.message = message
        self.source = source
        super().__init__(message)


class OutputType(str, Enum):
    TYPESCRIPT = 'typescript'
    JSON_SCHEMA = 'jsonschema'


@dataclass
class GenerateOptions:
    """Rendering options; the only knobs that affect output."""
    interface_name: str | None = None
    infer_optional: bool = True
    prettify: bool = True


CUSTOM_FIELD_TYPES = ['string', 'number', 'boolean', 'object',
                      'array_string', 'array_number', 'array_boolean', 'array_object']


def _custom_field_node(field_type: str) -> SchemaNode:
    if field_type not in CUSTOM_FIELD_TYPES:
        raise ValueError(f"Unsupported custom field type '{field_type}', expected one of {', '.join(CUSTOM_FIELD_TYPES)}")
    if field_type.startswith('array_'):
        return ArrayNode(_custom_field_node(field_type.split('_', 1)[1]))
    if field_type == 'object':
        return ObjectNode()
    return node_from_dict({'type': field_type})


def add_custom_fields(node: SchemaNode, custom_fields: Iterable[Mapping[str, str]]) -> SchemaNode:
    """Adds user-declared fields to an object schema.

    Custom fields are never marked required. Roots that are not objects are
    returned unchanged.

    Args:
        node: Root of the inferred schema
        custom_fields: Records with ``name`` and ``type`` keys

    Returns:
        The schema with the additional fields
    """
    custom_fields = list(custom_fields)
    if not custom_fields:
        return node
    if not isinstance(node, ObjectNode):
        logger.warning("Custom fields can only be added to an object-based schema, ignoring %d custom field(s)", len(custom_fields))
        return node
    fields: Dict[str, SchemaNode] = dict(node.fields)
    for custom_field in custom_fields:
        fields[custom_field['name']] = _custom_field_node(custom_field['type'])
    return ObjectNode(fields, node.required)


def generate_output(node: SchemaNode, output_type: OutputType | str, options: GenerateOptions | None = None, dedupe: bool = True) -> str:
    """Renders a schema tree and runs the union deduplication post-pass.

    Args:
        node: Root of the inferred schema
        output_type: 'typescript' or 'jsonschema'
        options: Rendering options
        dedupe: Run the union deduplication post-pass

    Returns:
        The rendered text
    """
    options = options or GenerateOptions()
    output_type = OutputType(output_type)
    if output_type == OutputType.TYPESCRIPT:
        output = render_interface(node, options.interface_name, options.infer_optional, options.prettify)
    else:
        output = render_json_schema(node, options.interface_name, options.infer_optional, options.prettify)
    if dedupe:
        output = dedupe_unions(output, output_type.value, options.prettify)
    return output


def infer_from_source(source: str, input_data: Any, fold_records: bool = True) -> SchemaNode:
    """Turns the raw input of a source into a schema tree.

    Sources:
        json: JSON document or JSON Lines text
        csv: CSV text with a header row
        samples: list of materialized sample values (repeated API responses, documents)
        columns: list of SQL column metadata records

    Raises:
        SchemaGenerationError: if the source is unknown or its input is invalid
    """
    # deferred imports, pandas is only needed for CSV input
    from autoinfer.csvtoschema import infer_schema_from_csv
    from autoinfer.jsontoschema import infer_schema_from_json
    from autoinfer.sqltoschema import columns_to_schema

    try:
        if source == 'json':
            return infer_schema_from_json(input_data, fold_records=fold_records)
        if source == 'csv':
            return infer_schema_from_csv(input_data, fold_records=fold_records)
        if source == 'samples':
            if not isinstance(input_data, (list, tuple)):
                raise ValueError(f"Samples must be a list of values, got {type(input_data).__name__}")
            samples: List[Any] = list(input_data)
            if not samples:
                raise ValueError("At least one sample is required")
            return SchemaInferrer(SchemaMerger(fold_records)).infer_from_values(samples)
        if source == 'columns':
            return columns_to_schema(input_data)
    except ValueError as e:
        raise SchemaGenerationError(f"Failed to process {source} data: {e}", source) from e
    raise SchemaGenerationError(f"Unsupported data source: {source}", source)


def generate_schema(
    source: str,
    input_data: Any,
    output_type: OutputType | str = OutputType.TYPESCRIPT,
    options: GenerateOptions | None = None,
    custom_fields: Iterable[Mapping[str, str]] | None = None,
    fold_records: bool = True
) -> str:
    """Generates TypeScript or JSON-Schema output from raw source input.

    Args:
        source: Input source, see infer_from_source
        input_data: Raw input of the source
        output_type: 'typescript' or 'jsonschema'
        options: Rendering options
        custom_fields: Additional fields to add to an object root
        fold_records: Fold differently shaped records into one object with optional fields

    Returns:
        The rendered and deduplicated text
    """
    node = infer_from_source(source, input_data, fold_records)
    if custom_fields:
        node = add_custom_fields(node, custom_fields)
    return generate_output(node, output_type, options)
