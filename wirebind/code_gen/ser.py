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
Generates the encoding half of a bindings module.

Every container gets a `serialize_<IDENT>(s, v)` function that writes `v` into the serializer `s`. The body of each
function is a sequence of "accessors", one per field, each built by `gen_accessor` from the field type and a
description of how to reach the field from `v`:

    ty: [u8]                          (type to be serialized)
    field_access: DIRECT              (value is not wrapped in an enum payload)
    field_accessor: object('test')    (reached by key in the containing dict)

    -> s.serialize_array(lambda s, v: s.serialize_number(U8_BYTES, False, v), v['test'])
"""

from __future__ import annotations

from wirebind.code_gen.utils import (
    ENUM_VARIANT_KEY,
    FieldAccessor,
    InnerTypeAccess,
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


def gen_accessor(ty: ValueType, field_access: InnerTypeAccess, field_accessor: FieldAccessor) -> str:
    """ Expression that writes the value of type `ty`, reached from `v` as described, into `s`.
    """
    value = value_expr(field_access, field_accessor)
    match ty:
        case NumberMeta():
            return f's.serialize_{ty.func_name}({byte_size_const(ty)}, {ty.signed}, {value})'
        case StringType() | BytesType():
            return f's.serialize_{ty.func_name}({value})'
        case ArrayType(items_type=items_type):
            inner = gen_accessor(items_type, InnerTypeAccess.DIRECT, FieldAccessor.direct())
            return f's.serialize_{ty.func_name}(lambda s, v: {inner}, {value})'
        case OptionalType(inner=inner_type):
            inner = gen_accessor(inner_type, InnerTypeAccess.DIRECT, FieldAccessor.direct())
            return f's.serialize_{ty.func_name}(lambda s, v: {inner}, {value})'
        case ObjectType(name=name):
            return f'serialize_{to_obj_identifier(name)}(s, {value})'
        case _:
            raise TypeError(f'unknown value type: {ty!r}')


def gen_accessors_tuple(fields: tuple[ValueType, ...], field_access: InnerTypeAccess) -> list[str]:
    return [gen_accessor(field, field_access, FieldAccessor.array(index)) for index, field in enumerate(fields)]


def gen_accessors_struct(fields: tuple[StructField, ...], field_access: InnerTypeAccess) -> list[str]:
    return [gen_accessor(field.v_type, field_access, FieldAccessor.object(field.name)) for field in fields]


def _gen_variant_body(variant: EnumVariant) -> list[str]:
    lines = [f's.serialize_number(U32_BYTES, False, {variant.index})']
    match variant.inner_type:
        case EmptyVariant():
            pass
        case TupleVariant(fields=tuple_fields):
            lines.extend(gen_accessors_tuple(tuple_fields, InnerTypeAccess.ENUM_INNER))
        case NamedVariant(fields=fields):
            lines.extend(gen_accessors_struct(fields, InnerTypeAccess.ENUM_INNER))
        case _:
            raise TypeError(f'unknown variant type: {variant.inner_type!r}')
    return lines


def _gen_enum_body(container: Container, variants: tuple[EnumVariant, ...]) -> list[str]:
    lines = [f'tag = v[{ENUM_VARIANT_KEY!r}]']
    message = f'unknown {container.name} variant: '
    mismatch = f'raise ShapeMismatch({message!r} + repr(tag))'
    if not variants:
        lines.append(mismatch)
        return lines
    for variant in variants:
        keyword = 'if' if variant.index == 0 else 'elif'
        lines.append(f'{keyword} tag == {variant.name!r}:')
        lines.extend(indent(_gen_variant_body(variant)))
    lines.append('else:')
    lines.extend(indent([mismatch]))
    return lines


def gen_ser_function(container: Container) -> str:
    """ Source of the `serialize_<IDENT>` function of a single container.
    """
    body: list[str]
    match container.type:
        case StructType(fields=fields):
            body = gen_accessors_struct(fields, InnerTypeAccess.DIRECT)
        case TupleStructType(fields=tuple_fields):
            body = gen_accessors_tuple(tuple_fields, InnerTypeAccess.DIRECT)
        case UnitStructType():
            body = []
        case EnumType(variants=variants):
            body = _gen_enum_body(container, variants)
        case _:
            raise TypeError(f'unknown binding type: {container.type!r}')
    lines = [f'def serialize_{container.obj_identifier}(s, v):']
    lines.extend(indent(body or ['pass']))
    return '\n'.join(lines)


def gen_ser_functions(registry: FrozenRegistry) -> str:
    return join_functions(gen_ser_function(container) for container in registry)


def gen_serialize_func(registry: FrozenRegistry, type_checks: bool) -> str:
    """ Source of the public `serialize(type_name, value)` dispatch function and its lookup tables.
    """
    lines = ['SERIALIZERS = {']
    lines.extend(indent(f'{c.name!r}: serialize_{c.obj_identifier},' for c in registry))
    lines.append('}')
    if type_checks:
        lines.append('')
        lines.append('TYPE_CHECKS = {')
        lines.extend(indent(f'{c.name!r}: is_{c.obj_identifier},' for c in registry))
        lines.append('}')
    lines.extend([
        '',
        '',
        'def serialize(type_name, value):',
        '    """Encode `value` as the registered type `type_name` and return the bytes."""',
        '    if not isinstance(type_name, str):',
        "        raise MalformedTypeKey('type must be a string')",
        '    encoder = SERIALIZERS.get(type_name)',
        '    if encoder is None:',
        "        raise UnknownType(f'unknown type: {type_name}')",
    ])
    lines.extend([
        '    s = Serializer()',
        '    try:',
    ])
    if type_checks:
        lines.extend([
            '        if not TYPE_CHECKS[type_name](value):',
            "            raise ShapeMismatch(f'value has wrong format for {type_name}')",
        ])
    lines.extend([
        '        encoder(s, value)',
        '    except (KeyError, IndexError, TypeError, AttributeError, RecursionError) as e:',
        "        raise ShapeMismatch(f'value has wrong format for {type_name}') from e",
        '    return s.finish()',
    ])
    return '\n'.join(lines)
