"""
Common utility functions for autoinfer.
"""

# pylint: disable=line-too-long

import os
import re
import hashlib
import json
from typing import Any
import jinja2


TYPESCRIPT_RESERVED_WORDS = [
    'break', 'case', 'catch', 'class', 'const', 'continue', 'debugger',
    'default', 'delete', 'do', 'else', 'export', 'extends', 'finally',
    'for', 'function', 'if', 'import', 'in', 'instanceof', 'new', 'return',
    'super', 'switch', 'this', 'throw', 'try', 'typeof', 'var', 'void',
    'while', 'with', 'yield', 'enum', 'string', 'number', 'boolean', 'symbol',
    'type', 'namespace', 'module', 'declare', 'abstract', 'readonly', 'interface',
]

_IDENTIFIER_PATTERN = re.compile(r'^[A-Za-z_$][A-Za-z0-9_$]*$')


def is_identifier(name: str) -> bool:
    """Check whether a name can be used unquoted as a TypeScript property name."""
    return bool(_IDENTIFIER_PATTERN.match(name))


def type_name(name: str, default: str) -> str:
    """Convert a name into a TypeScript type name."""
    if not name:
        return default
    val = re.sub(r'[^a-zA-Z0-9_$]', '_', name)
    if re.match(r'^[0-9]', val):
        val = '_' + val
    if val in TYPESCRIPT_RESERVED_WORDS:
        val = val + '_'
    return val


class NodeHash:
    """ A hash value and count for a JSON object. """
    def __init__(self: 'NodeHash', hash_value: bytes, count: int):
        self.hash_value: bytes = hash_value
        self.count: int = count


def get_tree_hash(json_obj: Any) -> NodeHash:
    """
    Generate a hash from a JSON-compatible value.

    Args:
        json_obj (Any): The JSON value to hash. Dictionary keys are sorted first.

    Returns:
        NodeHash: The hash value and the length of the hashed text.
    """
    s = json.dumps(json_obj, sort_keys=True).encode('utf-8')
    return NodeHash(hashlib.sha256(s).digest(), len(s))


def process_template(file_path: str, **kvargs) -> str:
    """
    Process a file as a Jinja2 template with the given object as input.

    Args:
        file_path (str): The path to the template, relative to the package directory.
        **kvargs: The keyword arguments to pass to the template.

    Returns:
        str: The processed template as a string.
    """
    file_dir = os.path.dirname(__file__)
    template_loader = jinja2.FileSystemLoader(searchpath=file_dir)
    template_env = jinja2.Environment(loader=template_loader)
    template = template_env.get_template(file_path)
    return template.render(**kvargs)
