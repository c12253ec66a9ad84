"""Infers schema from JSON text and files and renders it.

This module provides:
- infer_schema_from_json: Infer a schema tree from JSON or JSON Lines text
- convert_json_to_typescript: Infer from JSON files, write a TypeScript declaration
- convert_json_to_json_schema: Infer from JSON files, write a JSON-Schema document
"""

import json
import os
from typing import Any, List

from autoinfer.generator import GenerateOptions, OutputType, generate_output
from autoinfer.schema_inference import SchemaInferrer, SchemaMerger
from autoinfer.schema_node import SchemaNode


def load_json_values(content: str) -> List[Any]:
    """Loads the samples contained in JSON text.

    A single JSON document is one sample, including a root-level array.
    Otherwise every non-empty line is parsed as one JSON Lines sample.

    Raises:
        ValueError: if the text is neither a JSON document nor JSON Lines
    """
    if not isinstance(content, str):
        raise ValueError(f"JSON data must be text, got {type(content).__name__}")
    content = content.strip()
    if not content:
        return []

    try:
        return [json.loads(content)]
    except json.JSONDecodeError as e:
        if '\n' not in content:
            raise ValueError(f"Invalid JSON format: {e}") from e

    values: List[Any] = []
    for line_number, line in enumerate(content.split('\n'), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            values.append(json.loads(line))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON format in line {line_number}: {e}") from e
    return values


def infer_schema_from_json(content: str, fold_records: bool = True) -> SchemaNode:
    """Infers a schema tree from JSON or JSON Lines text.

    Raises:
        ValueError: if the text holds no JSON data or does not parse
    """
    values = load_json_values(content or '')
    if not values:
        raise ValueError("JSON data is required")
    return SchemaInferrer(SchemaMerger(fold_records)).infer_from_values(values)


def _load_json_files(input_files: List[str], sample_size: int) -> List[Any]:
    """Loads samples from files, at most sample_size of them (0 = all)."""
    values: List[Any] = []

    for file_path in input_files:
        if sample_size > 0 and len(values) >= sample_size:
            break

        with open(file_path, 'r', encoding='utf-8') as f:
            content = f.read()

        values.extend(load_json_values(content))

    if sample_size > 0:
        values = values[:sample_size]
    return values


def _convert_json_files(input_files: List[str], output_file: str, output_type: OutputType, options: GenerateOptions, sample_size: int) -> None:
    if not input_files:
        raise ValueError("At least one input file is required")

    values = _load_json_files(input_files, sample_size)

    if not values:
        raise ValueError("No valid JSON data found in input files")

    schema = SchemaInferrer().infer_from_values(values)
    output = generate_output(schema, output_type, options)

    # Ensure output directory exists
    output_dir = os.path.dirname(output_file)
    if output_dir and not os.path.exists(output_dir):
        os.makedirs(output_dir)

    with open(output_file, 'w', encoding='utf-8') as f:
        f.write(output)


def convert_json_to_typescript(
    input_files: List[str],
    typescript_file: str,
    interface_name: str = 'GeneratedInterface',
    infer_optional: bool = True,
    prettify: bool = True,
    sample_size: int = 0
) -> None:
    """Infers a TypeScript declaration from JSON files.

    Multiple files, and the lines of JSON Lines files, are analyzed together
    as repeated samples of the same document.

    Args:
        input_files: List of JSON file paths to analyze
        typescript_file: Output path for the declaration
        interface_name: Name of the generated interface
        infer_optional: Mark fields that are not present in every sample as optional
        prettify: Normalize indentation of the output
        sample_size: Maximum number of samples to analyze (0 = all)
    """
    options = GenerateOptions(interface_name=interface_name, infer_optional=infer_optional, prettify=prettify)
    _convert_json_files(input_files, typescript_file, OutputType.TYPESCRIPT, options, sample_size)


def convert_json_to_json_schema(
    input_files: List[str],
    json_schema_file: str,
    title: str = 'GeneratedSchema',
    infer_optional: bool = True,
    prettify: bool = True,
    sample_size: int = 0
) -> None:
    """Infers a JSON-Schema draft-07 document from JSON files.

    Args:
        input_files: List of JSON file paths to analyze
        json_schema_file: Output path for the JSON-Schema document
        title: Title of the generated schema
        infer_optional: Only list fields present in every sample as required
        prettify: Indent the document
        sample_size: Maximum number of samples to analyze (0 = all)
    """
    options = GenerateOptions(interface_name=title, infer_optional=infer_optional, prettify=prettify)
    _convert_json_files(input_files, json_schema_file, OutputType.JSON_SCHEMA, options, sample_size)
