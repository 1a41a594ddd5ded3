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

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from wirebind.type_info import NumberMeta

INDENT = '    '

# keys of the dict that represents an enum value in generated code
ENUM_VARIANT_KEY = 'tag'
ENUM_VARIANT_VALUE = 'value'

# name of the value being processed in every generated function and lambda
VALUE_VARIABLE = 'v'


class InnerTypeAccess(Enum):
    """ Whether a value has to be unwrapped from an enum payload before the field can be reached.
    """
    DIRECT = ''
    ENUM_INNER = f'[{ENUM_VARIANT_VALUE!r}]'


@dataclass(frozen=True, slots=True)
class FieldAccessor:
    """ How to reach a value from the value that contains it: by field name, by position or not at all.
    """

    key: str | int | None = None

    @classmethod
    def object(cls, name: str) -> FieldAccessor:
        return cls(name)

    @classmethod
    def array(cls, index: int) -> FieldAccessor:
        return cls(index)

    @classmethod
    def direct(cls) -> FieldAccessor:
        return cls(None)

    def format(self) -> str:
        if self.key is None:
            return ''
        return f'[{self.key!r}]'


def value_expr(field_access: InnerTypeAccess, field_accessor: FieldAccessor) -> str:
    """ Expression that reaches a value from the current `v`.

    >>> value_expr(InnerTypeAccess.ENUM_INNER, FieldAccessor.array(0))
    "v['value'][0]"
    >>> value_expr(InnerTypeAccess.DIRECT, FieldAccessor.object('a'))
    "v['a']"
    """
    return f'{VALUE_VARIABLE}{field_access.value}{field_accessor.format()}'


def byte_size_const(number: NumberMeta) -> str:
    """Name of the runtime constant that holds the byte width of `number`."""
    return f'U{number.bits}_BYTES'


def indent(lines: Iterable[str], level: int = 1) -> list[str]:
    prefix = INDENT * level
    return [f'{prefix}{line}' if line else line for line in lines]


def and_chain(conditions: list[str]) -> list[str]:
    """ Lines of a `return` statement that is true only when every condition holds.
    """
    if not conditions:
        return ['return True']
    if len(conditions) == 1:
        return [f'return {conditions[0]}']
    lines = ['return (', f'{INDENT}{conditions[0]}']
    lines.extend(f'{INDENT}and {condition}' for condition in conditions[1:])
    lines.append(')')
    return lines


def literal_lines(open_: str, close: str, entries: list[list[str]]) -> list[str]:
    """ Lines of a multi-line literal with one (possibly multi-line) entry per item, each followed by a comma.
    """
    if not entries:
        return [f'{open_}{close}']
    lines = [open_]
    for entry in entries:
        *head, last = entry
        lines.extend(indent(head))
        lines.append(f'{INDENT}{last},')
    lines.append(close)
    return lines


def join_functions(functions: Iterable[str]) -> str:
    return '\n\n\n'.join(functions)
