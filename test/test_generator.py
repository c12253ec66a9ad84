"""Tests for output generation across input sources."""

import json
import os
import sys
import unittest

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from autoinfer.generator import (
    GenerateOptions,
    OutputType,
    SchemaGenerationError,
    add_custom_fields,
    generate_output,
    generate_schema,
    infer_from_source,
)
from autoinfer.schema_inference import infer_schema, merge_schemas
from autoinfer.schema_node import ArrayNode, IntegerNode, NumberNode, ObjectNode, StringNode, UnionNode


class TestGenerateOutput(unittest.TestCase):

    def test_typescript_union_is_deduplicated_and_sorted(self):
        node = merge_schemas([StringNode(), IntegerNode()])
        output = generate_output(node, OutputType.TYPESCRIPT, GenerateOptions(interface_name='X'))
        self.assertEqual(output, "type X = number | string;\n")

    def test_integer_and_number_collapse(self):
        node = infer_schema({"v": [1, 2.5]})
        output = generate_output(node, 'typescript', GenerateOptions(interface_name='X'))
        self.assertEqual(output, "interface X {\n  v: number[];\n}\n")

    def test_without_post_pass(self):
        node = infer_schema({"v": [1, 2.5]})
        output = generate_output(node, 'typescript', GenerateOptions(interface_name='X'), dedupe=False)
        self.assertEqual(output, "interface X {\n  v: (number | number)[];\n}\n")

    def test_json_schema_default_title(self):
        output = generate_output(infer_schema({"a": 1}), OutputType.JSON_SCHEMA)
        document = json.loads(output)
        self.assertEqual(document['title'], 'GeneratedSchema')
        self.assertEqual(document['required'], ['a'])

    def test_json_schema_union_post_pass(self):
        node = UnionNode((ArrayNode(IntegerNode()), ArrayNode(NumberNode()), StringNode()))
        output = generate_output(node, 'jsonschema', GenerateOptions(prettify=False))
        document = json.loads(output)
        self.assertEqual(document['anyOf'], [
            {"type": "array", "items": {"type": "integer"}},
            {"type": "array", "items": {"type": "number"}},
            {"type": "string"},
        ])
        self.assertNotIn('\n', output)

    def test_unknown_output_type(self):
        with self.assertRaises(ValueError):
            generate_output(infer_schema({"a": 1}), 'graphql')


class TestCustomFields(unittest.TestCase):

    def test_adds_optional_fields(self):
        node = add_custom_fields(infer_schema({"id": 1}), [
            {"name": "note", "type": "string"},
            {"name": "scores", "type": "array_number"},
            {"name": "meta", "type": "object"},
            {"name": "children", "type": "array_object"},
        ])
        self.assertEqual(node.fields["note"], StringNode())
        self.assertEqual(node.fields["scores"], ArrayNode(NumberNode()))
        self.assertEqual(node.fields["meta"], ObjectNode())
        self.assertEqual(node.fields["children"], ArrayNode(ObjectNode()))
        self.assertEqual(node.required, frozenset({"id"}))
        output = generate_output(node, 'typescript', GenerateOptions(interface_name='X'))
        self.assertIn("  note?: string;", output)
        self.assertIn("  meta?: {};", output)
        self.assertIn("  children?: {}[];", output)

    def test_non_object_root(self):
        node = infer_schema([1, 2])
        with self.assertLogs('autoinfer.generator', level='WARNING'):
            self.assertIs(add_custom_fields(node, [{"name": "x", "type": "string"}]), node)

    def test_unknown_type(self):
        with self.assertRaises(ValueError):
            add_custom_fields(infer_schema({"a": 1}), [{"name": "x", "type": "date"}])


class TestGenerateSchema(unittest.TestCase):

    def test_json_source(self):
        output = generate_schema('json', '{"a": 1, "b": "x"}', 'typescript', GenerateOptions(interface_name='X'))
        self.assertEqual(output, "interface X {\n  a: number;\n  b: string;\n}\n")

    def test_json_lines_source(self):
        text = '{"a": 1}\n{"a": 1, "b": "x"}\n'
        output = generate_schema('json', text, 'typescript', GenerateOptions(interface_name='X', infer_optional=True))
        self.assertEqual(output, "interface X {\n  a: number;\n  b?: string;\n}\n")

    def test_csv_source(self):
        output = generate_schema('csv', "id,name,active\n42,hello,true\n7,world,false\n", 'jsonschema')
        document = json.loads(output)
        self.assertEqual(document['type'], 'array')
        self.assertEqual(document['items']['properties'], {
            "id": {"type": "integer"},
            "name": {"type": "string"},
            "active": {"type": "boolean"},
        })

    def test_samples_source(self):
        output = generate_schema('samples', [{"a": 1}, {"b": True}], 'jsonschema',
                                 GenerateOptions(infer_optional=False))
        document = json.loads(output)
        self.assertEqual(document['required'], ['a', 'b'])

    def test_samples_source_without_folding(self):
        output = generate_schema('samples', [{"a": 1}, {"b": True}], 'jsonschema', fold_records=False)
        self.assertEqual(len(json.loads(output)['anyOf']), 2)

    def test_columns_source(self):
        columns = [
            {"column_name": "id", "data_type": "integer", "udt_name": "int4", "is_nullable": "NO"},
            {"column_name": "email", "data_type": "character varying", "udt_name": "varchar", "is_nullable": "YES"},
        ]
        output = generate_schema('columns', columns, 'typescript', GenerateOptions(interface_name='Users'))
        self.assertEqual(output, "interface Users {\n  id: number;\n  email?: string;\n}\n")

    def test_custom_fields(self):
        output = generate_schema('json', '{"a": 1}', 'typescript', GenerateOptions(interface_name='X'),
                                 custom_fields=[{"name": "extra", "type": "boolean"}])
        self.assertEqual(output, "interface X {\n  a: number;\n  extra?: boolean;\n}\n")

    def test_invalid_json(self):
        with self.assertRaises(SchemaGenerationError) as ctx:
            generate_schema('json', '{"a": ', 'typescript')
        self.assertEqual(ctx.exception.source, 'json')
        self.assertIn('Invalid JSON format', ctx.exception.message)

    def test_missing_input(self):
        with self.assertRaises(SchemaGenerationError):
            infer_from_source('json', '')
        with self.assertRaises(SchemaGenerationError):
            infer_from_source('samples', [])
        with self.assertRaises(SchemaGenerationError):
            infer_from_source('csv', 'id,name\n')

    def test_json_source_requires_text(self):
        with self.assertRaises(SchemaGenerationError) as ctx:
            generate_schema('json', {"a": 1})
        self.assertEqual(ctx.exception.source, 'json')
        self.assertIn('must be text', ctx.exception.message)

    def test_csv_source_requires_text(self):
        with self.assertRaises(SchemaGenerationError) as ctx:
            generate_schema('csv', [["id"], ["1"]])
        self.assertIn('must be text', ctx.exception.message)

    def test_samples_source_requires_list(self):
        with self.assertRaises(SchemaGenerationError) as ctx:
            generate_schema('samples', 5)
        self.assertEqual(ctx.exception.source, 'samples')
        self.assertIn('must be a list', ctx.exception.message)

    def test_columns_source_requires_column_name(self):
        with self.assertRaises(SchemaGenerationError) as ctx:
            generate_schema('columns', [{"data_type": "int"}])
        self.assertIn('without column_name', ctx.exception.message)
        with self.assertRaises(SchemaGenerationError):
            generate_schema('columns', 5)
        with self.assertRaises(SchemaGenerationError):
            generate_schema('columns', ["id"])

    def test_unknown_source(self):
        with self.assertRaises(SchemaGenerationError) as ctx:
            infer_from_source('ftp', None)
        self.assertIn('Unsupported data source', str(ctx.exception))


if __name__ == '__main__':
    unittest.main()
