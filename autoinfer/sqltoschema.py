"""Builds a schema tree from SQL column metadata.

Column records are the rows of ``information_schema.columns`` as returned by
the database driver (PostgreSQL or MySQL): ``column_name``, ``data_type``,
``is_nullable`` and, where the dialect has them, ``udt_name`` and
``column_type``. Fetching them is up to the caller.
"""

from typing import Any, Dict, Iterable, List, Mapping

from autoinfer.schema_inference import SchemaInferrer
from autoinfer.schema_node import (
    FORMAT_BINARY,
    FORMAT_DATE_TIME,
    FORMAT_UUID,
    ArrayNode,
    BooleanNode,
    IntegerNode,
    NumberNode,
    ObjectNode,
    SchemaNode,
    StringNode,
)


def map_sql_type(data_type: str, udt_name: str | None = None, column_type: str | None = None) -> SchemaNode:
    """Maps a SQL column type to a schema node.

    Args:
        data_type: Declared type of the column
        udt_name: PostgreSQL underlying type name; a leading underscore marks an array
        column_type: MySQL full column type, e.g. ``tinyint(1)``

    Returns:
        Schema node for values of the column
    """
    sql_type = (udt_name or data_type or '').lower()

    # MySQL stores booleans as tinyint(1)
    if column_type and column_type.lower() == 'tinyint(1)':
        return BooleanNode()

    if udt_name and udt_name.startswith('_'):
        element_type = udt_name[1:]
        return ArrayNode(map_sql_type(element_type, element_type))

    if 'char' in sql_type or 'text' in sql_type or 'clob' in sql_type:
        return StringNode()
    if 'int' in sql_type or 'serial' in sql_type or 'long' in sql_type:
        return IntegerNode()
    if any(t in sql_type for t in ('float', 'double', 'num', 'decimal', 'real')):
        return NumberNode()
    if 'bool' in sql_type:
        return BooleanNode()
    if 'date' in sql_type or 'time' in sql_type:
        return StringNode(FORMAT_DATE_TIME)
    if 'uuid' in sql_type:
        return StringNode(FORMAT_UUID)
    if 'json' in sql_type:
        return ObjectNode()
    if 'bytea' in sql_type or 'blob' in sql_type:
        return StringNode(FORMAT_BINARY)
    return StringNode()


def columns_to_schema(
    columns: Iterable[Mapping[str, Any]],
    json_samples: Mapping[str, List[Any]] | None = None,
    inferrer: SchemaInferrer | None = None
) -> ObjectNode:
    """Builds the object schema of a table from its column metadata.

    Columns declared NOT NULL are required. JSON columns for which sample
    values are supplied get their shape inferred from those samples.

    Args:
        columns: Column metadata records
        json_samples: Sample values per JSON column name
        inferrer: Inferrer for JSON column samples

    Returns:
        Object schema with one field per column

    Raises:
        ValueError: if no columns are given or a column record is malformed
    """
    if isinstance(columns, (str, bytes, Mapping)) or not isinstance(columns, Iterable):
        raise ValueError("Column metadata must be a list of column records")
    fields: Dict[str, SchemaNode] = {}
    required = set()
    json_samples = json_samples or {}
    inferrer = inferrer or SchemaInferrer()

    for column in columns:
        if not isinstance(column, Mapping):
            raise ValueError(f"Column record must be a mapping, got {type(column).__name__}")
        # MySQL returns information_schema column names in upper case
        column = {str(key).lower(): value for key, value in column.items()}
        if 'column_name' not in column:
            raise ValueError("Column record without column_name")
        column_name = column['column_name']
        node = map_sql_type(column.get('data_type') or '', column.get('udt_name'), column.get('column_type'))
        samples = json_samples.get(column_name)
        if isinstance(node, ObjectNode) and samples:
            node = inferrer.infer_from_values(samples)
        fields[column_name] = node
        if str(column.get('is_nullable', 'YES')).upper() == 'NO':
            required.add(column_name)

    if not fields:
        raise ValueError("Table not found or no columns defined")
    return ObjectNode(fields, frozenset(required))
