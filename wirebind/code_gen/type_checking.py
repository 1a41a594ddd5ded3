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
Generates the shape validators (`is_<IDENT>(v) -> bool`) used to guard `serialize` when type checks are enabled.

Decoding never needs them, a decoder either produces a value of the declared shape or raises.
"""

from __future__ import annotations

from wirebind.code_gen.utils import (
    ENUM_VARIANT_KEY,
    ENUM_VARIANT_VALUE,
    FieldAccessor,
    InnerTypeAccess,
    and_chain,
    byte_size_const,
    indent,
    join_functions,
    value_expr,
)
from wirebind.registry import (
    Container,
    EmptyVariant,
    EnumType,
    EnumVariant,
    FrozenRegistry,
    NamedVariant,
    StructField,
    StructType,
    TupleStructType,
    TupleVariant,
    UnitStructType,
)
from wirebind.type_info import (
    ArrayType,
    BytesType,
    NumberMeta,
    ObjectType,
    OptionalType,
    StringType,
    ValueType,
    to_obj_identifier,
)


def gen_check(ty: ValueType, field_access: InnerTypeAccess, field_accessor: FieldAccessor) -> str:
    """ Expression that is true when the value reached from `v` as described conforms to `ty`.

    Numbers are also checked against the range of their width.
    """
    value = value_expr(field_access, field_accessor)
    match ty:
        case NumberMeta():
            return f'is_{ty.func_name}({value}, {byte_size_const(ty)}, {ty.signed})'
        case StringType() | BytesType():
            return f'is_{ty.func_name}({value})'
        case ArrayType(items_type=items_type):
            inner = gen_check(items_type, InnerTypeAccess.DIRECT, FieldAccessor.direct())
            return f'is_{ty.func_name}({value}, lambda v: {inner})'
        case OptionalType(inner=inner_type):
            inner = gen_check(inner_type, InnerTypeAccess.DIRECT, FieldAccessor.direct())
            return f'is_{ty.func_name}({value}, lambda v: {inner})'
        case ObjectType(name=name):
            return f'is_{to_obj_identifier(name)}({value})'
        case _:
            raise TypeError(f'unknown value type: {ty!r}')


def gen_checks_tuple(fields: tuple[ValueType, ...], field_access: InnerTypeAccess) -> list[str]:
    conditions = [f'is_sequence({value_expr(field_access, FieldAccessor.direct())}, {len(fields)})']
    conditions.extend(
        gen_check(field, field_access, FieldAccessor.array(index)) for index, field in enumerate(fields)
    )
    return conditions


def gen_checks_struct(fields: tuple[StructField, ...], field_access: InnerTypeAccess) -> list[str]:
    container_value = value_expr(field_access, FieldAccessor.direct())
    conditions = [f'isinstance({container_value}, dict)']
    for field in fields:
        conditions.append(f'{field.name!r} in {container_value}')
        conditions.append(gen_check(field.v_type, field_access, FieldAccessor.object(field.name)))
    return conditions


def _gen_variant_conditions(variant: EnumVariant) -> list[str]:
    match variant.inner_type:
        case EmptyVariant():
            return []
        case TupleVariant(fields=tuple_fields):
            return [f'{ENUM_VARIANT_VALUE!r} in v', *gen_checks_tuple(tuple_fields, InnerTypeAccess.ENUM_INNER)]
        case NamedVariant(fields=fields):
            return [f'{ENUM_VARIANT_VALUE!r} in v', *gen_checks_struct(fields, InnerTypeAccess.ENUM_INNER)]
        case _:
            raise TypeError(f'unknown variant type: {variant.inner_type!r}')


def _gen_enum_body(variants: tuple[EnumVariant, ...]) -> list[str]:
    lines = [
        'if not isinstance(v, dict):',
        '    return False',
        f'tag = v.get({ENUM_VARIANT_KEY!r})',
    ]
    for variant in variants:
        lines.append(f'if tag == {variant.name!r}:')
        lines.extend(indent(and_chain(_gen_variant_conditions(variant))))
    lines.append('return False')
    return lines


def gen_type_check_function(container: Container) -> str:
    """ Source of the `is_<IDENT>` predicate of a single container.
    """
    body: list[str]
    match container.type:
        case StructType(fields=fields):
            body = and_chain(gen_checks_struct(fields, InnerTypeAccess.DIRECT))
        case TupleStructType(fields=tuple_fields):
            body = and_chain(gen_checks_tuple(tuple_fields, InnerTypeAccess.DIRECT))
        case UnitStructType():
            body = ['return isinstance(v, dict)']
        case EnumType(variants=variants):
            body = _gen_enum_body(variants)
        case _:
            raise TypeError(f'unknown binding type: {container.type!r}')
    lines = [f'def is_{container.obj_identifier}(v):']
    lines.extend(indent(body))
    return '\n'.join(lines)


def gen_type_checkings(registry: FrozenRegistry) -> str:
    return join_functions(gen_type_check_function(container) for container in registry)
