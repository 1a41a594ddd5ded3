from pathlib import Path

import pytest
from pydantic import ValidationError

from tests import unittest
from wirebind.exception import SchemaLoadError, UnresolvedReferenceError
from wirebind.registry import build_registry
from wirebind.schema import SchemaDocument, load_schema, load_schema_dict, parse_type_expr
from wirebind.schema.models import FieldModel, VariantModel
from wirebind.type_info import (
    BYTES,
    I128,
    STRING,
    U8,
    ArrayType,
    ObjectType,
    OptionalType,
)

FIXTURES = Path(__file__).parent / 'fixtures'


@pytest.mark.parametrize(['text', 'expected'], [
    ('u8', U8),
    ('i128', I128),
    ('str', STRING),
    ('string', STRING),
    ('bytes', BYTES),
    ('Pair', ObjectType('Pair')),
    ('[u8]', ArrayType(U8)),
    ('Vec<u8>', ArrayType(U8)),
    ('Option<u8>', OptionalType(U8)),
    ('u8?', OptionalType(U8)),
    ('u8??', OptionalType(OptionalType(U8))),
    ('[Pair?]', ArrayType(OptionalType(ObjectType('Pair')))),
    ('Vec<Option<[str]>>', ArrayType(OptionalType(ArrayType(STRING)))),
    (' Vec < u8 > ', ArrayType(U8)),
    ('Vec', ObjectType('Vec')),
])
def test_parse_type_expr(text: str, expected) -> None:
    assert parse_type_expr(text) == expected


@pytest.mark.parametrize('text', ['', '[u8', 'u8]', 'Vec<u8', 'Option<>', '1abc', 'u8 u16', '?', 'a-b', '<u8>'])
def test_parse_invalid_type_expr(text: str) -> None:
    with pytest.raises(ValueError):
        parse_type_expr(text)


def test_field_model_rejects_invalid_type() -> None:
    with pytest.raises(ValidationError):
        FieldModel(name='a', type='[u8')


def test_variant_with_items_and_fields() -> None:
    with pytest.raises(ValidationError):
        VariantModel(name='A', items=['u8'], fields=[{'name': 'a', 'type': 'u8'}])


def test_load_schema_matches_registry() -> None:
    loaded = load_schema(FIXTURES / 'example_schema.yml')
    expected = unittest.build_example_registry()
    assert loaded.containers == expected.containers


def test_load_schema_dict_default_path() -> None:
    registry = load_schema_dict({'containers': [{'name': 'Marker', 'kind': 'unit_struct'}]})
    assert registry['Marker'].path == 'Marker'


def test_schema_document_is_bindings() -> None:
    document = SchemaDocument.model_validate({'containers': [{'name': 'Marker', 'kind': 'unit_struct'}]})
    assert [c.name for c in build_registry(document)] == ['Marker']


def test_unresolved_reference() -> None:
    with pytest.raises(UnresolvedReferenceError):
        load_schema(FIXTURES / 'unresolved_schema.yml')


@pytest.mark.parametrize('filename', ['bad_kind_schema.yml', 'not_a_dict_schema.yml', 'missing_schema.yml'])
def test_invalid_schema_files(filename: str) -> None:
    with pytest.raises(SchemaLoadError):
        load_schema(FIXTURES / filename)


@pytest.mark.parametrize('data', [
    {},
    {'containers': [{'name': 'X', 'kind': 'struct', 'fields': [{'name': 'a'}]}]},
    {'containers': [{'name': 'X', 'kind': 'struct', 'unknown': 1}]},
    {'containers': [{'name': 'X', 'kind': 'tuple_struct', 'items': ['Vec<']}]},
])
def test_invalid_schema_dicts(data: dict) -> None:
    with pytest.raises(SchemaLoadError):
        load_schema_dict(data)


class SchemaGenerateTest(unittest.TestCase):
    def test_generate_from_schema(self) -> None:
        module = self.load(load_schema(FIXTURES / 'example_schema.yml'))
        self.assertEqual(module.serialize('Pair', {'a': 5, 'b': 300}), bytes.fromhex('05ac02'))
        self.assertEqual(module.serialize('Choice', {'tag': 'B', 'value': [7]}), b'\x01\x07')

    def test_same_output_as_registry(self) -> None:
        self.assertEqual(
            self.generate(load_schema(FIXTURES / 'example_schema.yml')),
            self.generate(unittest.build_example_registry()),
        )
