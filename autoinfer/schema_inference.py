"""Schema inference from sample values.

This module provides the core logic used by every input source:
- classify: map one scalar to a leaf node, detecting string formats
- SchemaInferrer.infer: walk a JSON-compatible value into a schema tree
- SchemaMerger.merge: reconcile the nodes of repeated samples of one slot

Inference is total: every JSON-compatible value, including empty collections,
produces a node. Nothing here raises on data.
"""

import datetime
import logging
import math
import re
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from autoinfer.schema_node import (
    FORMAT_BINARY,
    FORMAT_DATE_TIME,
    FORMAT_EMAIL,
    FORMAT_UUID,
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
    canonical_key,
    nodes_equal,
)

logger = logging.getLogger(__name__)


class _Missing:
    """Marks a record key that is declared but carries no value."""

    def __repr__(self) -> str:
        return 'MISSING'


MISSING = _Missing()

# Regex patterns for string formats, tested in this order
_DATETIME_PATTERN = re.compile(r'^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?(Z|[+-]\d{2}:\d{2})$')
_EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
_UUID_PATTERN = re.compile(r'^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$')

_STRING_FORMAT_PATTERNS = [
    (_DATETIME_PATTERN, FORMAT_DATE_TIME),
    (_EMAIL_PATTERN, FORMAT_EMAIL),
    (_UUID_PATTERN, FORMAT_UUID),
]


def classify_string(value: str) -> StringNode:
    """Classifies a string, refining it with the first matching format."""
    for pattern, string_format in _STRING_FORMAT_PATTERNS:
        if pattern.match(value):
            return StringNode(string_format)
    return StringNode()


def _is_whole_number(value: float | Decimal) -> bool:
    if isinstance(value, Decimal):
        return value.is_finite() and value == value.to_integral_value()
    return math.isfinite(value) and value.is_integer()


def classify(value: Any) -> SchemaNode:
    """Classifies a single scalar value into a leaf node.

    Integers and whole floats are ``integer``, other numbers ``number``.
    Values outside the JSON scalar space (bytes, dates from database
    drivers) map to refined strings; anything else is a plain string.

    Args:
        value: Scalar value to classify

    Returns:
        Leaf schema node
    """
    if value is None or value is MISSING:
        return NullNode()
    # bool is a subclass of int
    if isinstance(value, bool):
        return BooleanNode()
    if isinstance(value, int):
        return IntegerNode()
    if isinstance(value, (float, Decimal)):
        return IntegerNode() if _is_whole_number(value) else NumberNode()
    if isinstance(value, str):
        return classify_string(value)
    if isinstance(value, (bytes, bytearray)):
        return StringNode(FORMAT_BINARY)
    if isinstance(value, (datetime.datetime, datetime.date)):
        return StringNode(FORMAT_DATE_TIME)
    return StringNode()


class SchemaMerger:
    """Reconciles the schema nodes of repeated samples of one logical slot."""

    def __init__(self, fold_records: bool = True):
        """Initialize the schema merger.

        Args:
            fold_records: Fold object nodes into one object whose fields are the
                union of all field sets and whose required fields are the
                intersection. Arrays of objects fold their element records
                the same way. When False, objects with different shapes stay
                distinct union variants.
        """
        self.fold_records = fold_records

    def merge(self, nodes: Sequence[SchemaNode]) -> SchemaNode:
        """Merges a list of nodes into a single node.

        Identical nodes collapse to one; remaining distinct shapes become a
        union whose variants are pairwise structurally distinct.

        Args:
            nodes: Nodes describing the same logical slot

        Returns:
            The merged node; ``AnyNode`` when no node was given
        """
        if not nodes:
            return AnyNode()
        if len(nodes) == 1:
            return nodes[0]
        first = nodes[0]
        if all(nodes_equal(first, node) for node in nodes[1:]):
            return first

        logger.debug("Merging %d divergent schema nodes", len(nodes))
        candidates = self._flatten_unions(nodes)
        if self.fold_records:
            candidates = self._fold_object_nodes(candidates)

        unique_nodes = self._unique(candidates)
        if len(unique_nodes) == 1:
            return unique_nodes[0]
        return UnionNode(tuple(unique_nodes))

    def fold_object_types(self, base_record: ObjectNode, new_record: ObjectNode) -> ObjectNode:
        """Folds two object nodes into one.

        Fields present in only one of the records are kept but are no longer
        required. Fields present in both have their children merged.
        """
        fields: Dict[str, List[SchemaNode]] = {}
        for record in (base_record, new_record):
            for name, child in record.fields.items():
                fields.setdefault(name, []).append(child)
        merged_fields = {name: self.merge(children) for name, children in fields.items()}
        return ObjectNode(merged_fields, base_record.required & new_record.required)

    @staticmethod
    def _flatten_unions(nodes: Iterable[SchemaNode]) -> List[SchemaNode]:
        flattened: List[SchemaNode] = []
        for node in nodes:
            if isinstance(node, UnionNode):
                flattened.extend(node.variants)
            else:
                flattened.append(node)
        return flattened

    @staticmethod
    def _record_slot(node: SchemaNode) -> str | None:
        if isinstance(node, ObjectNode):
            return 'record'
        if isinstance(node, ArrayNode) and isinstance(node.element, ObjectNode):
            return 'record_array'
        return None

    def _fold_object_nodes(self, nodes: List[SchemaNode]) -> List[SchemaNode]:
        # Records fold into one record, arrays of records into one array
        folded: List[SchemaNode] = []
        slot_index: Dict[str, int] = {}
        for node in nodes:
            slot = self._record_slot(node)
            if slot is None:
                folded.append(node)
            elif slot not in slot_index:
                slot_index[slot] = len(folded)
                folded.append(node)
            else:
                index = slot_index[slot]
                folded_node = folded[index]
                if isinstance(folded_node, ArrayNode):
                    folded[index] = ArrayNode(self.fold_object_types(folded_node.element, node.element))
                else:
                    folded[index] = self.fold_object_types(folded_node, node)
        return folded

    @staticmethod
    def _unique(nodes: Iterable[SchemaNode]) -> List[SchemaNode]:
        # Eliminate duplicates by structural hash, first occurrence wins
        seen: Dict[bytes, SchemaNode] = {}
        for node in nodes:
            key = canonical_key(node)
            if key not in seen:
                seen[key] = node
        return list(seen.values())


class SchemaInferrer:
    """Infers schema trees from JSON-compatible values."""

    def __init__(self, merger: SchemaMerger | None = None):
        self.merger = merger or SchemaMerger()

    def infer(self, value: Any) -> SchemaNode:
        """Infers the schema of a single value.

        Args:
            value: A scalar, a sequence or a keyed record, arbitrarily nested

        Returns:
            Schema node describing the value
        """
        if value is None or value is MISSING:
            return NullNode()
        if isinstance(value, Mapping):
            return self._infer_record(value)
        if isinstance(value, (list, tuple)):
            if len(value) == 0:
                return ArrayNode(AnyNode())
            return ArrayNode(self.merger.merge([self.infer(item) for item in value]))
        return classify(value)

    def infer_from_values(self, values: Iterable[Any]) -> SchemaNode:
        """Infers one schema from repeated samples of the same slot.

        Used for JSON Lines, repeated API responses and multiple input files,
        where each value is a whole sample rather than an array element.
        """
        return self.merger.merge([self.infer(value) for value in values])

    def _infer_record(self, record: Mapping[Any, Any]) -> ObjectNode:
        fields: Dict[str, SchemaNode] = {}
        required = set()
        for key, value in record.items():
            name = str(key)
            fields[name] = self.infer(value)
            if value is not MISSING:
                required.add(name)
        return ObjectNode(fields, frozenset(required))


def infer_schema(value: Any, fold_records: bool = True) -> SchemaNode:
    """Infers the schema of a single JSON-compatible value."""
    return SchemaInferrer(SchemaMerger(fold_records)).infer(value)


def infer_schema_from_values(values: Iterable[Any], fold_records: bool = True) -> SchemaNode:
    """Infers one schema from a list of repeated samples."""
    return SchemaInferrer(SchemaMerger(fold_records)).infer_from_values(values)


def merge_schemas(nodes: Sequence[SchemaNode], fold_records: bool = True) -> SchemaNode:
    """Merges nodes describing the same logical slot into one node."""
    return SchemaMerger(fold_records).merge(nodes)
