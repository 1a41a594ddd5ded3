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
Generates the decoding half of a bindings module, the structural mirror of `wirebind.code_gen.ser`.

Every container gets a `deserialize_<IDENT>(d)` function that reads a value from the deserializer `d`. Fields are read
in exactly the order the encoder writes them; values are built with dict/list displays, which Python evaluates left to
right.
"""

from __future__ import annotations

from wirebind.code_gen.utils import (
    ENUM_VARIANT_KEY,
    ENUM_VARIANT_VALUE,
    byte_size_const,
    indent,
    join_functions,
    literal_lines,
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


def gen_decoder(ty: ValueType, registry: FrozenRegistry) -> str:
    """ Expression that reads a value of type `ty` from `d`.
    """
    match ty:
        case NumberMeta():
            return f'd.deserialize_{ty.func_name}({byte_size_const(ty)}, {ty.signed})'
        case StringType() | BytesType():
            return f'd.deserialize_{ty.func_name}()'
        case ArrayType(items_type=items_type):
            inner = gen_decoder(items_type, registry)
            min_item_size = registry.min_encoded_size(items_type)
            if min_item_size == 1:
                return f'd.deserialize_{ty.func_name}(lambda d: {inner})'
            return f'd.deserialize_{ty.func_name}(lambda d: {inner}, {min_item_size})'
        case OptionalType(inner=inner_type):
            inner = gen_decoder(inner_type, registry)
            return f'd.deserialize_{ty.func_name}(lambda d: {inner})'
        case ObjectType(name=name):
            return f'deserialize_{to_obj_identifier(name)}(d)'
        case _:
            raise TypeError(f'unknown value type: {ty!r}')


def gen_decoders_tuple(fields: tuple[ValueType, ...], registry: FrozenRegistry) -> list[str]:
    return literal_lines('[', ']', [[gen_decoder(field, registry)] for field in fields])


def gen_decoders_struct(fields: tuple[StructField, ...], registry: FrozenRegistry) -> list[str]:
    entries = [[f'{field.name!r}: {gen_decoder(field.v_type, registry)}'] for field in fields]
    return literal_lines('{', '}', entries)


def _gen_variant_value(variant: EnumVariant, registry: FrozenRegistry) -> list[str]:
    entries = [[f'{ENUM_VARIANT_KEY!r}: {variant.name!r}']]
    payload: list[str] | None
    match variant.inner_type:
        case EmptyVariant():
            payload = None
        case TupleVariant(fields=tuple_fields):
            payload = gen_decoders_tuple(tuple_fields, registry)
        case NamedVariant(fields=fields):
            payload = gen_decoders_struct(fields, registry)
        case _:
            raise TypeError(f'unknown variant type: {variant.inner_type!r}')
    if payload is not None:
        first, *rest = payload
        entries.append([f'{ENUM_VARIANT_VALUE!r}: {first}', *rest])
    return literal_lines('{', '}', entries)


def _gen_enum_body(container: Container, variants: tuple[EnumVariant, ...], registry: FrozenRegistry) -> list[str]:
    lines = ['index = d.deserialize_number(U32_BYTES, False)']
    for variant in variants:
        first, *rest = _gen_variant_value(variant, registry)
        lines.append(f'if index == {variant.index}:')
        lines.extend(indent([f'return {first}', *rest]))
    message = f'invalid {container.name} variant index: '
    lines.append(f'raise InvalidDiscriminant({message!r} + str(index))')
    return lines


def _return_lines(value: list[str]) -> list[str]:
    first, *rest = value
    return [f'return {first}', *rest]


def gen_des_function(container: Container, registry: FrozenRegistry) -> str:
    """ Source of the `deserialize_<IDENT>` function of a single container.
    """
    body: list[str]
    match container.type:
        case StructType(fields=fields):
            body = _return_lines(gen_decoders_struct(fields, registry))
        case TupleStructType(fields=tuple_fields):
            body = _return_lines(gen_decoders_tuple(tuple_fields, registry))
        case UnitStructType():
            body = ['return {}']
        case EnumType(variants=variants):
            body = _gen_enum_body(container, variants, registry)
        case _:
            raise TypeError(f'unknown binding type: {container.type!r}')
    lines = [f'def deserialize_{container.obj_identifier}(d):']
    lines.extend(indent(body))
    return '\n'.join(lines)


def gen_des_functions(registry: FrozenRegistry) -> str:
    return join_functions(gen_des_function(container, registry) for container in registry)


def gen_deserialize_func(registry: FrozenRegistry) -> str:
    """ Source of the public `deserialize(type_name, data)` dispatch function and its lookup table.

    Trailing bytes after the decoded value are tolerated unless `exact=True` is given. Nesting depth is bounded by the
    interpreter recursion limit, deeper values raise `NestingTooDeep`.
    """
    lines = ['DESERIALIZERS = {']
    lines.extend(indent(f'{c.name!r}: deserialize_{c.obj_identifier},' for c in registry))
    lines.append('}')
    lines.extend([
        '',
        '',
        'def deserialize(type_name, data, *, exact=False):',
        '    """Decode a value of the registered type `type_name` from `data`.',
        '',
        '    Bytes left after the value are ignored, unless `exact` is true in which case `TrailingData` is raised.',
        '    """',
        '    if not isinstance(type_name, str):',
        "        raise MalformedTypeKey('type must be a string')",
        '    decoder = DESERIALIZERS.get(type_name)',
        '    if decoder is None:',
        "        raise UnknownType(f'unknown type: {type_name}')",
        '    d = Deserializer(data)',
        '    try:',
        '        value = decoder(d)',
        '    except RecursionError as e:',
        "        raise NestingTooDeep(f'{type_name} value is nested too deep to decode') from e",
        '    if exact:',
        '        d.finalize()',
        '    return value',
    ])
    return '\n'.join(lines)
