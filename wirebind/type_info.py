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
This module holds the closed set of value types a container field can have, and the identifier derivation shared by
every code generator.

A value type is one of:

- `NumberMeta`: an integer with a known byte-width and signedness, always varint encoded on the wire
- `StringType`: UTF-8 text with a length prefix
- `BytesType`: raw bytes with a length prefix
- `ArrayType`: a length-prefixed sequence of items of a single value type
- `ObjectType`: a reference, by name, to a container registered in the same registry
- `OptionalType`: a presence flag followed by the inner value when present

>>> U16.bits, U16.signed
(16, False)
>>> I8.lower_bound(), I8.upper_bound()
(-128, 127)
>>> ArrayType(OptionalType(STRING)).func_name
'array'
>>> to_obj_identifier('HTTPRequestHeader')
'HTTP_REQUEST_HEADER'
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import ClassVar, TypeAlias, Union

NUMBER_BYTE_SIZES: tuple[int, ...] = (1, 2, 4, 8, 16)

_IDENTIFIER_RE = re.compile(r'[A-Za-z_][A-Za-z0-9_]*', re.ASCII)
_ACRONYM_BOUNDARY_RE = re.compile(r'([A-Z]+)([A-Z][a-z])', re.ASCII)
_WORD_BOUNDARY_RE = re.compile(r'([a-z0-9])([A-Z])', re.ASCII)


@dataclass(frozen=True, slots=True)
class NumberMeta:
    """ An integer with a fixed byte-width and signedness.

    The width never reaches the wire, it only bounds the values that can be encoded and how long a varint may be.
    """

    func_name: ClassVar[str] = 'number'

    byte_size: int
    signed: bool

    def __post_init__(self) -> None:
        if self.byte_size not in NUMBER_BYTE_SIZES:
            raise ValueError(f'unsupported number byte size: {self.byte_size}')

    @property
    def bits(self) -> int:
        return self.byte_size * 8

    def upper_bound(self) -> int:
        if self.signed:
            return 2**(self.bits - 1) - 1
        return 2**self.bits - 1

    def lower_bound(self) -> int:
        if self.signed:
            return -(2**(self.bits - 1))
        return 0

    def max_varint_bytes(self) -> int:
        """Longest varint needed to hold any value of this width (7 payload bits per byte)."""
        return -(-self.bits // 7)

    def type_name(self) -> str:
        return f'{"i" if self.signed else "u"}{self.bits}'


@dataclass(frozen=True, slots=True)
class StringType:
    func_name: ClassVar[str] = 'string'

    def type_name(self) -> str:
        return 'str'


@dataclass(frozen=True, slots=True)
class BytesType:
    func_name: ClassVar[str] = 'bytes'

    def type_name(self) -> str:
        return 'bytes'


@dataclass(frozen=True, slots=True)
class ArrayType:
    func_name: ClassVar[str] = 'array'

    items_type: ValueType

    def type_name(self) -> str:
        return f'[{self.items_type.type_name()}]'


@dataclass(frozen=True, slots=True)
class ObjectType:
    """ A reference to a container, resolved by name when the registry is frozen.
    """

    func_name: ClassVar[str] = 'object'

    name: str

    def type_name(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class OptionalType:
    func_name: ClassVar[str] = 'optional'

    inner: ValueType

    def type_name(self) -> str:
        return f'Option<{self.inner.type_name()}>'


ValueType: TypeAlias = Union[NumberMeta, StringType, BytesType, ArrayType, ObjectType, OptionalType]

U8 = NumberMeta(1, False)
U16 = NumberMeta(2, False)
U32 = NumberMeta(4, False)
U64 = NumberMeta(8, False)
U128 = NumberMeta(16, False)
I8 = NumberMeta(1, True)
I16 = NumberMeta(2, True)
I32 = NumberMeta(4, True)
I64 = NumberMeta(8, True)
I128 = NumberMeta(16, True)
STRING = StringType()
BYTES = BytesType()

NUMBER_TYPES: dict[str, NumberMeta] = {
    number.type_name(): number for number in (U8, U16, U32, U64, U128, I8, I16, I32, I64, I128)
}


def is_identifier(name: str) -> bool:
    """ Whether `name` can be used as-is for a container, field or variant name.

    Only ASCII identifiers are accepted so that identifier derivation does not depend on the locale.
    """
    return isinstance(name, str) and _IDENTIFIER_RE.fullmatch(name) is not None


def to_snake_case(name: str) -> str:
    """ Convert a CamelCase (or already snake_case) name to snake_case.

    >>> to_snake_case('MyStruct')
    'my_struct'
    >>> to_snake_case('Vec3D')
    'vec3_d'
    >>> to_snake_case('already_snake')
    'already_snake'
    """
    name = _ACRONYM_BOUNDARY_RE.sub(r'\1_\2', name)
    name = _WORD_BOUNDARY_RE.sub(r'\1_\2', name)
    return name.lower()


def to_obj_identifier(name: str) -> str:
    """ Derive the identifier suffix used for every generated function of a container.

    The same suffix is used by `serialize_X`, `deserialize_X` and `is_X`, so all three generators address the same
    symbols for the same container.

    >>> to_obj_identifier('Pair')
    'PAIR'
    >>> to_obj_identifier('SomeEnum')
    'SOME_ENUM'
    """
    return to_snake_case(name).upper()
