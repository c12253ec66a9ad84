"""Union deduplication post-pass over rendered output.

Rendering is done node by node, so equivalent members can survive in the
text: ``integer`` and ``number`` both render as ``number`` in TypeScript, and
two JSON-Schema ``anyOf`` members can become equal once optional markers are
applied. This pass normalizes unions in the finished text.
"""

import json
import logging
import re
from typing import Any, Dict, List

from autoinfer.schematojsons import dump_json

logger = logging.getLogger(__name__)

TYPESCRIPT = 'typescript'
JSON_SCHEMA = 'jsonschema'

_MEMBER = r'\w+(?:\[\])*'
_UNION_CHAIN = re.compile(rf'(?<![\w\]"\'.$]){_MEMBER}(?:\s*\|\s*{_MEMBER})+(?![\w\[<(])')
_FIELD_LINE = re.compile(r'^(\s*(?:"(?:[^"\\]|\\.)*"|[\w$]+)\??:\s*)(.*)$')
_GROUPED_MEMBER = re.compile(rf'\(({_MEMBER})\)(?=\[\])')
_EMPTY_UNION_DESCRIPTION = 'Empty union after deduplication'


def _normalize_chain(match: re.Match) -> str:
    members: List[str] = []
    for member in match.group(0).split('|'):
        member = member.strip()
        if member not in members:
            members.append(member)
    return ' | '.join(sorted(members, key=lambda m: (m.casefold(), m)))


def _normalize_types(text: str) -> str:
    text = _UNION_CHAIN.sub(_normalize_chain, text)
    # (number)[] -> number[] once a grouped union is down to one member
    return _GROUPED_MEMBER.sub(r'\1', text)


def _normalize_line(line: str) -> str:
    field_match = _FIELD_LINE.match(line)
    if field_match:
        return field_match.group(1) + _normalize_types(field_match.group(2))
    return _normalize_types(line)


def dedupe_typescript_unions(text: str) -> str:
    """Collapses repeated union members and sorts them, until stable.

    Only chains of simple members (``name`` or ``name[]``) are rewritten;
    object literals and quoted field names are left as they are. Grouping
    parentheses around a single remaining array element are dropped.
    """
    deduped_text = text
    previous_text = None
    while previous_text != deduped_text:
        previous_text = deduped_text
        deduped_text = '\n'.join(_normalize_line(line) for line in deduped_text.split('\n'))
    return deduped_text


def _dedupe_any_of(node: Dict[str, Any]) -> None:
    while isinstance(node.get('anyOf'), list):
        members = sorted(node['anyOf'], key=lambda m: json.dumps(m, sort_keys=True))
        unique_members: List[Any] = []
        seen = set()
        for member in members:
            key = json.dumps(member, sort_keys=True)
            if key not in seen:
                seen.add(key)
                unique_members.append(member)
        if len(unique_members) == 1 and isinstance(unique_members[0], dict):
            del node['anyOf']
            node.update(unique_members[0])
        elif not unique_members:
            del node['anyOf']
            node.setdefault('description', _EMPTY_UNION_DESCRIPTION)
        else:
            node['anyOf'] = unique_members
            return


def _walk(node: Any) -> None:
    if isinstance(node, dict):
        _dedupe_any_of(node)
        for value in node.values():
            _walk(value)
    elif isinstance(node, list):
        for item in node:
            _walk(item)


def dedupe_json_schema_unions(text: str, prettify: bool) -> str:
    """Sorts and deduplicates every ``anyOf`` in a JSON-Schema document.

    A single surviving member replaces its ``anyOf``; an empty one is replaced
    by a description. Text that does not parse is returned unchanged.
    """
    try:
        document = json.loads(text)
    except ValueError as e:
        logger.warning("Could not deduplicate JSON schema unions due to a parsing error: %s", e)
        return text
    _walk(document)
    return dump_json(document, prettify)


def dedupe_unions(text: str, output_type: str, prettify: bool) -> str:
    """Runs the deduplication pass matching the output type."""
    if output_type == TYPESCRIPT:
        return dedupe_typescript_unions(text)
    return dedupe_json_schema_unions(text, prettify)
