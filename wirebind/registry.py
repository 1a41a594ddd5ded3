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
The registry is the ordered collection of containers (named struct, tuple-struct, unit-struct and enum definitions)
that code is generated from.

It is populated once, append-only, by whatever discovers the type definitions (anything implementing `Bindings`), and
then frozen into a `FrozenRegistry`. Freezing validates the whole registry, so that generators can assume a
well-formed input and never produce partial output.

Order matters in two places and nowhere else:

- the order of fields in a struct/tuple-struct is their order on the wire
- the order in which enum variants are registered defines their index on the wire
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Protocol, TypeAlias, Union

from structlog import get_logger
from typing_extensions import Self

from wirebind.exception import (
    DuplicateContainerError,
    DuplicateFieldError,
    DuplicateIdentifierError,
    InvalidNameError,
    UnresolvedReferenceError,
    VariantIndexError,
)
from wirebind.type_info import (
    ArrayType,
    BytesType,
    NumberMeta,
    ObjectType,
    OptionalType,
    StringType,
    ValueType,
    is_identifier,
    to_obj_identifier,
)

logger = get_logger()


@dataclass(frozen=True, slots=True)
class StructField:
    name: str
    v_type: ValueType


@dataclass(frozen=True, slots=True)
class EmptyVariant:
    pass


@dataclass(frozen=True, slots=True)
class TupleVariant:
    fields: tuple[ValueType, ...]


@dataclass(frozen=True, slots=True)
class NamedVariant:
    fields: tuple[StructField, ...]


EnumVariantType: TypeAlias = Union[EmptyVariant, TupleVariant, NamedVariant]


@dataclass(frozen=True, slots=True)
class EnumVariant:
    index: int
    name: str
    inner_type: EnumVariantType


@dataclass(frozen=True, slots=True)
class StructType:
    kind = 'struct'
    fields: tuple[StructField, ...]


@dataclass(frozen=True, slots=True)
class TupleStructType:
    kind = 'tuple_struct'
    fields: tuple[ValueType, ...]


@dataclass(frozen=True, slots=True)
class UnitStructType:
    kind = 'unit_struct'


@dataclass(frozen=True, slots=True)
class EnumType:
    # encoded as: | variant index | (inner)
    kind = 'enum'
    variants: tuple[EnumVariant, ...]


BindingType: TypeAlias = Union[StructType, TupleStructType, UnitStructType, EnumType]


@dataclass(frozen=True, slots=True)
class Container:
    path: str
    name: str
    type: BindingType

    @property
    def obj_identifier(self) -> str:
        return to_obj_identifier(self.name)


class StructFields:
    """ Incrementally collects the named fields of a struct or of a struct-like enum variant.
    """

    def __init__(self) -> None:
        self._fields: list[StructField] = []

    def register_field(self, name: str, v_type: ValueType) -> Self:
        self._fields.append(StructField(name, v_type))
        return self

    def build(self) -> tuple[StructField, ...]:
        return tuple(self._fields)


class TupleFields:
    """ Incrementally collects the anonymous fields of a tuple-struct or of a tuple enum variant.
    """

    def __init__(self) -> None:
        self._fields: list[ValueType] = []

    def register_field(self, v_type: ValueType) -> Self:
        self._fields.append(v_type)
        return self

    def build(self) -> tuple[ValueType, ...]:
        return tuple(self._fields)


class EnumVariants:
    """ Incrementally collects enum variants, the index of each variant is its registration order.
    """

    def __init__(self) -> None:
        self._variants: list[EnumVariant] = []

    def _push(self, name: str, inner_type: EnumVariantType) -> Self:
        self._variants.append(EnumVariant(index=len(self._variants), name=name, inner_type=inner_type))
        return self

    def register_variant(self, name: str) -> Self:
        return self._push(name, EmptyVariant())

    def register_variant_tuple(self, name: str, fields: TupleFields) -> Self:
        return self._push(name, TupleVariant(fields.build()))

    def register_unnamed_struct(self, name: str, fields: StructFields) -> Self:
        return self._push(name, NamedVariant(fields.build()))

    def build(self) -> tuple[EnumVariant, ...]:
        return tuple(self._variants)


class BindingsRegistry:
    """ Append-only collection of containers, freeze it to get something generators accept.
    """

    def __init__(self) -> None:
        self._entries: list[Container] = []

    def register(self, container: Container) -> None:
        self._entries.append(container)

    def register_struct_binding(self, name: str, path: str, value: StructFields) -> None:
        self.register(Container(path, name, StructType(value.build())))

    def register_tuple_struct_binding(self, name: str, path: str, value: TupleFields) -> None:
        self.register(Container(path, name, TupleStructType(value.build())))

    def register_unit_struct_binding(self, name: str, path: str) -> None:
        self.register(Container(path, name, UnitStructType()))

    def register_enum_binding(self, name: str, path: str, value: EnumVariants) -> None:
        self.register(Container(path, name, EnumType(value.build())))

    def entries(self) -> list[Container]:
        return list(self._entries)

    def freeze(self) -> FrozenRegistry:
        return FrozenRegistry(self._entries)


class Bindings(Protocol):
    """ Anything that knows how to describe one or more containers to a registry.
    """

    def create_bindings(self, registry: BindingsRegistry, /) -> None:
        ...


def build_registry(*bindings: Bindings) -> FrozenRegistry:
    """ Populate a new registry from each given `Bindings` (in order) and freeze it.
    """
    registry = BindingsRegistry()
    for binding in bindings:
        binding.create_bindings(registry)
    return registry.freeze()


class FrozenRegistry:
    """ Immutable, validated snapshot of a registry.

    Construction raises an `InvalidRegistryError` subclass if the containers are not well-formed.
    """

    __slots__ = ('_containers', '_by_name')

    _containers: tuple[Container, ...]
    _by_name: dict[str, Container]

    def __init__(self, containers: Iterable[Container]) -> None:
        log = logger.new()
        self._containers = tuple(containers)
        self._by_name = {}
        for container in self._containers:
            if container.name in self._by_name:
                raise DuplicateContainerError(f'container registered twice: {container.name}')
            self._by_name[container.name] = container
        _validate(self._containers, self._by_name)
        log.debug('registry frozen', containers=len(self._containers))

    def __iter__(self) -> Iterator[Container]:
        return iter(self._containers)

    def __len__(self) -> int:
        return len(self._containers)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __getitem__(self, name: str) -> Container:
        return self._by_name[name]

    @property
    def containers(self) -> tuple[Container, ...]:
        return self._containers

    def min_encoded_size(self, v_type: ValueType) -> int:
        """ The least amount of bytes any value of the given type takes on the wire.

        Used to reject length prefixes that cannot possibly be satisfied by the remaining bytes.
        """
        return self._min_encoded_size(v_type, frozenset())

    def _min_encoded_size(self, v_type: ValueType, visiting: frozenset[str]) -> int:
        match v_type:
            case NumberMeta() | StringType() | BytesType() | ArrayType() | OptionalType():
                # a varint, length prefix or presence flag is at least one byte
                return 1
            case ObjectType(name=name):
                if name in visiting:
                    return 0
                return self._container_min_size(self._by_name[name], visiting | {name})
            case _:
                raise TypeError(f'unknown value type: {v_type!r}')

    def _container_min_size(self, container: Container, visiting: frozenset[str]) -> int:
        match container.type:
            case StructType(fields=fields):
                return sum(self._min_encoded_size(field.v_type, visiting) for field in fields)
            case TupleStructType(fields=tuple_fields):
                return sum(self._min_encoded_size(field, visiting) for field in tuple_fields)
            case UnitStructType():
                return 0
            case EnumType():
                return 1
            case _:
                raise TypeError(f'unknown binding type: {container.type!r}')


def _iter_references(v_type: ValueType) -> Iterator[str]:
    match v_type:
        case ObjectType(name=name):
            yield name
        case ArrayType(items_type=inner) | OptionalType(inner=inner):
            yield from _iter_references(inner)
        case _:
            pass


def _container_value_types(container: Container) -> Iterator[ValueType]:
    match container.type:
        case StructType(fields=fields):
            yield from (field.v_type for field in fields)
        case TupleStructType(fields=tuple_fields):
            yield from tuple_fields
        case EnumType(variants=variants):
            for variant in variants:
                match variant.inner_type:
                    case TupleVariant(fields=tuple_fields):
                        yield from tuple_fields
                    case NamedVariant(fields=fields):
                        yield from (field.v_type for field in fields)
        case _:
            pass


def _check_unique_names(names: Iterable[str], what: str, container: Container) -> None:
    seen: set[str] = set()
    for name in names:
        if not is_identifier(name):
            raise InvalidNameError(f'{container.name}: invalid {what} name: {name!r}')
        if name in seen:
            raise DuplicateFieldError(f'{container.name}: {what} declared twice: {name}')
        seen.add(name)


def _validate(containers: tuple[Container, ...], by_name: dict[str, Container]) -> None:
    identifiers: dict[str, str] = {}
    for container in containers:
        if not is_identifier(container.name):
            raise InvalidNameError(f'invalid container name: {container.name!r}')
        obj_identifier = container.obj_identifier
        if obj_identifier in identifiers:
            other = identifiers[obj_identifier]
            raise DuplicateIdentifierError(f'{other} and {container.name} both derive the identifier {obj_identifier}')
        identifiers[obj_identifier] = container.name

        match container.type:
            case StructType(fields=fields):
                _check_unique_names((field.name for field in fields), 'field', container)
            case EnumType(variants=variants):
                _check_unique_names((variant.name for variant in variants), 'variant', container)
                for expected_index, variant in enumerate(variants):
                    if variant.index != expected_index:
                        raise VariantIndexError(
                            f'{container.name}: variant {variant.name} has index {variant.index}, '
                            f'expected {expected_index}'
                        )
                    if isinstance(variant.inner_type, NamedVariant):
                        _check_unique_names((field.name for field in variant.inner_type.fields), 'field', container)
            case _:
                pass

        for v_type in _container_value_types(container):
            for reference in _iter_references(v_type):
                if reference not in by_name:
                    raise UnresolvedReferenceError(f'{container.name}: unknown container referenced: {reference}')
