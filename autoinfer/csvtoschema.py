# coding: utf-8
"""
Module to infer a schema from CSV rows.
"""

import io
import os
import re
from typing import Any, Dict, List

import pandas as pd

from autoinfer.generator import GenerateOptions, generate_output
from autoinfer.schema_inference import SchemaInferrer, SchemaMerger
from autoinfer.schema_node import SchemaNode

_INTEGER_PATTERN = re.compile(r'^[+-]?\d+$')
_NUMBER_PATTERN = re.compile(r'^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$')


def coerce_csv_value(value: Any) -> Any:
    """
    Convert CSV cell text to a typed value.
    Numeric text becomes a number, 'true'/'false' in any case a boolean,
    everything else stays text. Missing cells are empty text.
    :param value: Cell content.
    :return: Typed value.
    """
    if not isinstance(value, str):
        return ''
    text = value.strip()
    if _INTEGER_PATTERN.match(text):
        return int(text)
    if _NUMBER_PATTERN.match(text):
        return float(text)
    if text.lower() == 'true':
        return True
    if text.lower() == 'false':
        return False
    return text


class CSVToSchemaConverter:
    """
    Class to infer a schema tree from CSV content.
    """

    def __init__(self, csv_source, fold_records: bool = True):
        """
        Initialize the converter.

        :param csv_source: Path to the CSV file or a file-like object.
        :param fold_records: Fold rows into one object schema.
        """
        self.csv_source = csv_source
        self.fold_records = fold_records

    def read_records(self) -> List[Dict[str, Any]]:
        """
        Read all data rows with every cell coerced to a typed value.
        :return: List of row records keyed by header name.
        """
        try:
            df = pd.read_csv(self.csv_source, dtype=str, keep_default_na=False, skipinitialspace=True)
        except pd.errors.EmptyDataError as e:
            raise ValueError("CSV data is required") from e
        if df.empty:
            raise ValueError("CSV must have at least a header row and one data row")
        df.columns = [str(column).strip() for column in df.columns]
        return [
            {column: coerce_csv_value(value) for column, value in row.items()}
            for row in df.to_dict(orient='records')
        ]

    def infer_schema(self) -> SchemaNode:
        """
        Infer the schema of the rows, an array of records.
        :return: Schema node.
        """
        records = self.read_records()
        return SchemaInferrer(SchemaMerger(self.fold_records)).infer(records)


def infer_schema_from_csv(csv_text: str, fold_records: bool = True) -> SchemaNode:
    """
    Infer a schema tree from CSV text with a header row.

    :param csv_text: CSV content.
    :param fold_records: Fold rows into one object schema.
    """
    if not csv_text:
        raise ValueError("CSV data is required")
    if not isinstance(csv_text, str):
        raise ValueError(f"CSV data must be text, got {type(csv_text).__name__}")
    if not csv_text.strip():
        raise ValueError("CSV data is required")
    return CSVToSchemaConverter(io.StringIO(csv_text.strip()), fold_records).infer_schema()


def convert_csv_to_schema(csv_file_path, output_file_path, output_type: str = 'typescript', interface_name: str | None = None,
                          infer_optional: bool = True, prettify: bool = True):
    """
    Infer a schema from a CSV file and write it as TypeScript or JSON Schema.

    :param csv_file_path: Path to the CSV file.
    :param output_file_path: Path to save the rendered schema.
    :param output_type: 'typescript' or 'jsonschema'.
    :param interface_name: Name of the interface or title of the schema.
    :param infer_optional: Mark fields that are not present in every row as optional.
    :param prettify: Format the output.
    """
    if not os.path.exists(csv_file_path):
        raise FileNotFoundError(f"CSV file not found at: {csv_file_path}")

    schema = CSVToSchemaConverter(csv_file_path).infer_schema()
    options = GenerateOptions(interface_name=interface_name, infer_optional=infer_optional, prettify=prettify)
    with open(output_file_path, 'w', encoding='utf-8') as file:
        file.write(generate_output(schema, output_type, options))
