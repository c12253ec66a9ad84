"""Schema tree produced by inference and consumed by the renderers.

Every node kind is its own immutable class. Consumers dispatch on the class
(or on ``node.kind``) and must handle every kind in ``SchemaKind``:

- ``NullNode``, ``BooleanNode``, ``IntegerNode``, ``NumberNode``: leaves
- ``StringNode``: leaf with an optional format refinement
- ``ObjectNode``: named fields plus the set of fields seen in every sample
- ``ArrayNode``: the merged shape of all observed elements
- ``UnionNode``: two or more structurally distinct alternatives
- ``AnyNode``: permissive placeholder (empty array, empty merge input)

Nodes compare and hash by structure, never by identity.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, Dict, FrozenSet, List, Mapping, Tuple

from autoinfer.common import get_tree_hash


class SchemaKind(str, Enum):
    """Kind tag of a schema node."""
    NULL = 'null'
    STRING = 'string'
    NUMBER = 'number'
    INTEGER = 'integer'
    BOOLEAN = 'boolean'
    OBJECT = 'object'
    ARRAY = 'array'
    UNION = 'union'
    ANY = 'any'


FORMAT_DATE_TIME = 'date-time'
FORMAT_EMAIL = 'email'
FORMAT_UUID = 'uuid'
FORMAT_BINARY = 'binary'
STRING_FORMATS = (FORMAT_DATE_TIME, FORMAT_EMAIL, FORMAT_UUID, FORMAT_BINARY)


class SchemaNode:
    """Base class of all schema nodes."""
    kind: ClassVar[SchemaKind]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SchemaNode):
            return NotImplemented
        return nodes_equal(self, other)

    def __hash__(self) -> int:
        return hash(canonical_key(self))


@dataclass(frozen=True, eq=False)
class AnyNode(SchemaNode):
    kind: ClassVar[SchemaKind] = SchemaKind.ANY


@dataclass(frozen=True, eq=False)
class NullNode(SchemaNode):
    kind: ClassVar[SchemaKind] = SchemaKind.NULL


@dataclass(frozen=True, eq=False)
class BooleanNode(SchemaNode):
    kind: ClassVar[SchemaKind] = SchemaKind.BOOLEAN


@dataclass(frozen=True, eq=False)
class IntegerNode(SchemaNode):
    kind: ClassVar[SchemaKind] = SchemaKind.INTEGER


@dataclass(frozen=True, eq=False)
class NumberNode(SchemaNode):
    kind: ClassVar[SchemaKind] = SchemaKind.NUMBER


@dataclass(frozen=True, eq=False)
class StringNode(SchemaNode):
    format: str | None = None
    kind: ClassVar[SchemaKind] = SchemaKind.STRING


@dataclass(frozen=True, eq=False)
class ObjectNode(SchemaNode):
    """A keyed record.

    ``required`` only ever names keys of ``fields``; a field that was missing
    from at least one merged sample stays in ``fields`` but not in ``required``.
    """
    fields: Mapping[str, SchemaNode] = field(default_factory=dict)
    required: FrozenSet[str] = frozenset()
    kind: ClassVar[SchemaKind] = SchemaKind.OBJECT

    def __post_init__(self):
        fields = dict(self.fields)
        object.__setattr__(self, 'fields', MappingProxyType(fields))
        object.__setattr__(self, 'required', frozenset(name for name in self.required if name in fields))

    def is_required(self, name: str) -> bool:
        return name in self.required


@dataclass(frozen=True, eq=False)
class ArrayNode(SchemaNode):
    element: SchemaNode = field(default_factory=AnyNode)
    kind: ClassVar[SchemaKind] = SchemaKind.ARRAY


@dataclass(frozen=True, eq=False)
class UnionNode(SchemaNode):
    variants: Tuple[SchemaNode, ...] = ()
    kind: ClassVar[SchemaKind] = SchemaKind.UNION

    def __post_init__(self):
        object.__setattr__(self, 'variants', tuple(self.variants))


_LEAF_NODES: Dict[str, SchemaNode] = {
    SchemaKind.NULL.value: NullNode(),
    SchemaKind.BOOLEAN.value: BooleanNode(),
    SchemaKind.INTEGER.value: IntegerNode(),
    SchemaKind.NUMBER.value: NumberNode(),
    SchemaKind.ANY.value: AnyNode(),
}


def nodes_equal(a: SchemaNode, b: SchemaNode) -> bool:
    """Deep structural equality of two schema nodes.

    Union variants are compared as an unordered collection, object fields as
    a set of names with pairwise equal children.
    """
    if a is b:
        return True
    if a.kind != b.kind:
        return False
    if isinstance(a, StringNode) and isinstance(b, StringNode):
        return a.format == b.format
    if isinstance(a, ObjectNode) and isinstance(b, ObjectNode):
        if a.required != b.required or a.fields.keys() != b.fields.keys():
            return False
        return all(nodes_equal(child, b.fields[name]) for name, child in a.fields.items())
    if isinstance(a, ArrayNode) and isinstance(b, ArrayNode):
        return nodes_equal(a.element, b.element)
    if isinstance(a, UnionNode) and isinstance(b, UnionNode):
        if len(a.variants) != len(b.variants):
            return False
        remaining = list(b.variants)
        for variant in a.variants:
            match = next((i for i, other in enumerate(remaining) if nodes_equal(variant, other)), None)
            if match is None:
                return False
            del remaining[match]
        return True
    return True


def canonical_form(node: SchemaNode) -> Dict[str, Any]:
    """Order-independent JSON form of a node, used for hashing and sorting."""
    form: Dict[str, Any] = {'type': node.kind.value}
    if isinstance(node, StringNode):
        if node.format:
            form['format'] = node.format
    elif isinstance(node, ObjectNode):
        form['properties'] = {name: canonical_form(child) for name, child in node.fields.items()}
        form['required'] = sorted(node.required)
    elif isinstance(node, ArrayNode):
        form['items'] = canonical_form(node.element)
    elif isinstance(node, UnionNode):
        variants = [canonical_form(variant) for variant in node.variants]
        form['variants'] = sorted(variants, key=lambda v: json.dumps(v, sort_keys=True))
    return form


def canonical_key(node: SchemaNode) -> bytes:
    """Structural identity of a node; equal nodes produce equal keys."""
    return get_tree_hash(canonical_form(node)).hash_value


def node_to_dict(node: SchemaNode) -> Dict[str, Any]:
    """Converts a node into the plain dictionary shape exchanged with collaborators."""
    result: Dict[str, Any] = {'type': node.kind.value}
    if isinstance(node, StringNode):
        if node.format:
            result['format'] = node.format
    elif isinstance(node, ObjectNode):
        result['properties'] = {name: node_to_dict(child) for name, child in node.fields.items()}
        required = [name for name in node.fields if name in node.required]
        if required:
            result['required'] = required
    elif isinstance(node, ArrayNode):
        result['items'] = node_to_dict(node.element)
    elif isinstance(node, UnionNode):
        result['variants'] = [node_to_dict(variant) for variant in node.variants]
    return result


def node_from_dict(data: Mapping[str, Any] | None) -> SchemaNode:
    """Builds a node from its dictionary shape. A missing node is ``AnyNode``.

    Raises:
        ValueError: if the dictionary carries an unknown ``type``.
    """
    if data is None:
        return AnyNode()
    kind = data.get('type')
    if kind in _LEAF_NODES:
        return _LEAF_NODES[kind]
    if kind == SchemaKind.STRING.value:
        return StringNode(data.get('format'))
    if kind == SchemaKind.OBJECT.value:
        properties: Mapping[str, Any] = data.get('properties') or {}
        fields = {name: node_from_dict(child) for name, child in properties.items()}
        return ObjectNode(fields, frozenset(data.get('required') or []))
    if kind == SchemaKind.ARRAY.value:
        return ArrayNode(node_from_dict(data.get('items')))
    if kind == SchemaKind.UNION.value:
        variants: List[Any] = data.get('variants', data.get('enum')) or []
        return UnionNode(tuple(node_from_dict(variant) for variant in variants))
    raise ValueError(f"Schema contains unexpected type {kind}")
