# Copyright 2025 Hathor Labs
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#    http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Models for schema documents, a declarative (YAML or plain dict) way of describing containers:

    containers:
      - name: Pair
        kind: struct
        fields:
          - {name: a, type: u8}
          - {name: b, type: u16}
      - name: Point
        kind: tuple_struct
        items: [i32, i32]
      - name: Choice
        kind: enum
        variants:
          - name: A
          - name: B
            items: [u8]
          - name: C
            fields:
              - {name: text, type: 'Option<str>'}

Field types are written as type expressions:

>>> parse_type_expr('u8')
NumberMeta(byte_size=1, signed=False)
>>> parse_type_expr('[Option<str>]').type_name()
'[Option<str>]'
>>> parse_type_expr('Vec<Pair?>').type_name()
'[Option<Pair>]'
"""

import re
from typing import Annotated, Literal, Optional, Union

from pydantic import AfterValidator, Field, model_validator
from typing_extensions import Self

from wirebind.type_info import (
    BYTES,
    NUMBER_TYPES,
    STRING,
    ArrayType,
    ObjectType,
    OptionalType,
    ValueType,
)
from wirebind.utils import pydantic

_TOKEN_RE = re.compile(r'\s*(?:([A-Za-z_][A-Za-z0-9_]*)|([\[\]<>?]))', re.ASCII)

_PRIMITIVE_TYPES: dict[str, ValueType] = {
    **NUMBER_TYPES,
    'str': STRING,
    'string': STRING,
    'bytes': BYTES,
}

# generic wrappers, written as `Name<T>`
_ARRAY_WRAPPER = 'Vec'
_OPTIONAL_WRAPPER = 'Option'


def _tokenize(text: str) -> list[str]:
    tokens: list[str] = []
    pos = 0
    text = text.rstrip()
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise ValueError(f'unexpected character in type expression {text!r} at position {pos}')
        tokens.append(match.group(1) or match.group(2))
        pos = match.end()
    return tokens


class _TypeExprParser:
    """ Recursive descent parser for:

        expr := base '?'*
        base := '[' expr ']' | 'Vec' '<' expr '>' | 'Option' '<' expr '>' | name
    """

    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = _tokenize(text)
        self.pos = 0

    def _error(self, message: str) -> ValueError:
        return ValueError(f'invalid type expression {self.text!r}: {message}')

    def _peek(self) -> Optional[str]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def _next(self) -> str:
        token = self._peek()
        if token is None:
            raise self._error('unexpected end')
        self.pos += 1
        return token

    def _expect(self, expected: str) -> None:
        token = self._next()
        if token != expected:
            raise self._error(f'expected {expected!r}, got {token!r}')

    def parse(self) -> ValueType:
        value_type = self._parse_expr()
        if self._peek() is not None:
            raise self._error(f'unexpected {self._peek()!r}')
        return value_type

    def _parse_expr(self) -> ValueType:
        token = self._next()
        value_type: ValueType
        if token == '[':
            value_type = ArrayType(self._parse_expr())
            self._expect(']')
        elif token == _ARRAY_WRAPPER and self._peek() == '<':
            self._expect('<')
            value_type = ArrayType(self._parse_expr())
            self._expect('>')
        elif token == _OPTIONAL_WRAPPER and self._peek() == '<':
            self._expect('<')
            value_type = OptionalType(self._parse_expr())
            self._expect('>')
        elif token in _PRIMITIVE_TYPES:
            value_type = _PRIMITIVE_TYPES[token]
        elif token[0].isalpha() or token[0] == '_':
            value_type = ObjectType(token)
        else:
            raise self._error(f'unexpected {token!r}')
        while self._peek() == '?':
            self._next()
            value_type = OptionalType(value_type)
        return value_type


def parse_type_expr(text: str) -> ValueType:
    """Parse a type expression, any name that is not a primitive is a reference to another container."""
    return _TypeExprParser(text).parse()


def _check_type_expr(text: str) -> str:
    parse_type_expr(text)
    return text


TypeExpr = Annotated[str, AfterValidator(_check_type_expr)]


class FieldModel(pydantic.BaseModel):
    name: str
    type: TypeExpr

    def value_type(self) -> ValueType:
        return parse_type_expr(self.type)


class VariantModel(pydantic.BaseModel):
    """An enum variant, it is a unit variant unless it has either `items` or `fields`."""
    name: str
    items: Optional[list[TypeExpr]] = None
    fields: Optional[list[FieldModel]] = None

    @model_validator(mode='after')
    def _check_payload(self) -> Self:
        if self.items is not None and self.fields is not None:
            raise ValueError(f'variant {self.name} cannot have both items and fields')
        return self


class _ContainerModel(pydantic.BaseModel):
    name: str
    # defaults to the name
    path: Optional[str] = None

    def get_path(self) -> str:
        return self.path if self.path is not None else self.name


class StructModel(_ContainerModel):
    kind: Literal['struct']
    fields: list[FieldModel] = Field(default_factory=list)


class TupleStructModel(_ContainerModel):
    kind: Literal['tuple_struct']
    items: list[TypeExpr] = Field(default_factory=list)


class UnitStructModel(_ContainerModel):
    kind: Literal['unit_struct']


class EnumModel(_ContainerModel):
    kind: Literal['enum']
    variants: list[VariantModel] = Field(default_factory=list)


ContainerModel = Annotated[
    Union[StructModel, TupleStructModel, UnitStructModel, EnumModel],
    Field(discriminator='kind'),
]
