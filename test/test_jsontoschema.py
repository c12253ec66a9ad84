"""Tests for schema inference from JSON text and files."""

import json
import os
import sys
import tempfile
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from autoinfer.jsontoschema import (
    convert_json_to_json_schema,
    convert_json_to_typescript,
    infer_schema_from_json,
    load_json_values,
)
from autoinfer.schema_node import ArrayNode, IntegerNode, ObjectNode, StringNode


class TestLoadJsonValues(unittest.TestCase):

    def test_single_document(self):
        self.assertEqual(load_json_values('{"a": 1}'), [{"a": 1}])

    def test_root_array_is_one_sample(self):
        self.assertEqual(load_json_values('[1, 2]'), [[1, 2]])

    def test_pretty_printed_document(self):
        self.assertEqual(load_json_values('{\n  "a": 1\n}\n'), [{"a": 1}])

    def test_json_lines(self):
        self.assertEqual(load_json_values('{"a": 1}\n\n{"b": 2}\n'), [{"a": 1}, {"b": 2}])

    def test_empty(self):
        self.assertEqual(load_json_values('  \n '), [])

    def test_invalid_document(self):
        with self.assertRaises(ValueError) as ctx:
            load_json_values('{"a": ')
        self.assertIn('Invalid JSON format', str(ctx.exception))

    def test_requires_text(self):
        with self.assertRaises(ValueError) as ctx:
            load_json_values({"a": 1})
        self.assertIn('must be text', str(ctx.exception))

    def test_invalid_line(self):
        with self.assertRaises(ValueError) as ctx:
            load_json_values('{"a": 1}\n{"b": ')
        self.assertIn('line 2', str(ctx.exception))


class TestInferSchemaFromJson(unittest.TestCase):

    def test_document(self):
        node = infer_schema_from_json('{"a": 1, "b": ["x"]}')
        self.assertEqual(node, ObjectNode({"a": IntegerNode(), "b": ArrayNode(StringNode())}, frozenset({"a", "b"})))

    def test_json_lines_are_merged(self):
        node = infer_schema_from_json('{"a": 1}\n{"a": 2, "b": "x"}')
        self.assertEqual(node, ObjectNode({"a": IntegerNode(), "b": StringNode()}, frozenset({"a"})))

    def test_required(self):
        with self.assertRaises(ValueError):
            infer_schema_from_json('')
        with self.assertRaises(ValueError):
            infer_schema_from_json(None)


class TestConvertJsonFiles(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.first = self._write('first.json', '{"a": 1, "b": "x"}')
        self.second = self._write('second.json', '{"a": 2}')

    def _write(self, name, content):
        path = os.path.join(self.tmpdir.name, name)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        return path

    def test_convert_to_typescript(self):
        output_file = os.path.join(self.tmpdir.name, 'out', 'item.ts')
        convert_json_to_typescript([self.first, self.second], output_file, 'Item')
        with open(output_file, 'r', encoding='utf-8') as f:
            self.assertEqual(f.read(), "interface Item {\n  a: number;\n  b?: string;\n}\n")

    def test_sample_size(self):
        output_file = os.path.join(self.tmpdir.name, 'item.ts')
        convert_json_to_typescript([self.first, self.second], output_file, 'Item', sample_size=1)
        with open(output_file, 'r', encoding='utf-8') as f:
            self.assertEqual(f.read(), "interface Item {\n  a: number;\n  b: string;\n}\n")

    def test_json_lines_file(self):
        lines = self._write('items.jsonl', '{"a": 1}\n{"a": 2.5, "c": null}\n')
        output_file = os.path.join(self.tmpdir.name, 'item.schema.json')
        convert_json_to_json_schema([lines], output_file, 'Item', prettify=False)
        with open(output_file, 'r', encoding='utf-8') as f:
            document = json.load(f)
        self.assertEqual(document['title'], 'Item')
        self.assertEqual(document['required'], ['a'])
        self.assertEqual(document['properties']['a'], {"anyOf": [{"type": "integer"}, {"type": "number"}]})
        self.assertEqual(document['properties']['c'], {"type": "null"})

    def test_no_input(self):
        output_file = os.path.join(self.tmpdir.name, 'item.ts')
        with self.assertRaises(ValueError):
            convert_json_to_typescript([], output_file)
        empty = self._write('empty.json', '\n')
        with self.assertRaises(ValueError):
            convert_json_to_typescript([empty], output_file)
        self.assertFalse(os.path.exists(output_file))


if __name__ == '__main__':
    unittest.main()
