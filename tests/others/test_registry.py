import pytest

from tests.unittest import build_example_registry
from wirebind.exception import (
    DuplicateContainerError,
    DuplicateFieldError,
    DuplicateIdentifierError,
    InvalidNameError,
    InvalidRegistryError,
    UnresolvedReferenceError,
    VariantIndexError,
)
from wirebind.registry import (
    BindingsRegistry,
    Container,
    EmptyVariant,
    EnumType,
    EnumVariant,
    EnumVariants,
    NamedVariant,
    StructFields,
    StructType,
    TupleFields,
    TupleVariant,
    build_registry,
)
from wirebind.type_info import STRING, U8, U16, ArrayType, ObjectType, OptionalType


def test_registration_order_is_kept() -> None:
    registry = build_example_registry()
    assert [c.name for c in registry] == ['Pair', 'Choice', 'Point', 'Marker', 'Shape', 'Document']
    assert len(registry) == 6
    assert 'Pair' in registry
    assert 'Nope' not in registry
    assert registry['Pair'].path == 'demo::Pair'
    assert registry['Shape'].obj_identifier == 'SHAPE'


def test_field_order_is_registration_order() -> None:
    registry = build_example_registry()
    pair = registry['Pair'].type
    assert isinstance(pair, StructType)
    assert [field.name for field in pair.fields] == ['a', 'b']
    assert [field.v_type for field in pair.fields] == [U8, U16]


def test_variant_index_is_registration_order() -> None:
    variants = (
        EnumVariants()
        .register_variant('A')
        .register_variant_tuple('B', TupleFields().register_field(U8))
        .register_unnamed_struct('C', StructFields().register_field('x', STRING))
        .build()
    )
    assert [(v.index, v.name) for v in variants] == [(0, 'A'), (1, 'B'), (2, 'C')]
    assert variants[0].inner_type == EmptyVariant()
    assert variants[1].inner_type == TupleVariant((U8,))
    assert isinstance(variants[2].inner_type, NamedVariant)


def test_entries_is_a_copy() -> None:
    registry = BindingsRegistry()
    registry.register_unit_struct_binding('Marker', 'Marker')
    registry.entries().clear()
    assert len(registry.entries()) == 1


def test_build_registry_from_bindings() -> None:
    class PairBindings:
        def create_bindings(self, registry: BindingsRegistry) -> None:
            registry.register_struct_binding('Pair', 'Pair', StructFields().register_field('a', U8))

    class ListBindings:
        def create_bindings(self, registry: BindingsRegistry) -> None:
            registry.register_struct_binding(
                'PairList', 'PairList', StructFields().register_field('items', ArrayType(ObjectType('Pair')))
            )

    registry = build_registry(PairBindings(), ListBindings())
    assert [c.name for c in registry] == ['Pair', 'PairList']


def test_duplicate_container() -> None:
    registry = BindingsRegistry()
    registry.register_unit_struct_binding('Marker', 'a::Marker')
    registry.register_unit_struct_binding('Marker', 'b::Marker')
    with pytest.raises(DuplicateContainerError):
        registry.freeze()


def test_duplicate_identifier() -> None:
    registry = BindingsRegistry()
    registry.register_unit_struct_binding('MyType', 'MyType')
    registry.register_unit_struct_binding('My_Type', 'My_Type')
    with pytest.raises(DuplicateIdentifierError):
        registry.freeze()


def test_duplicate_struct_field() -> None:
    registry = BindingsRegistry()
    registry.register_struct_binding('Pair', 'Pair', StructFields().register_field('a', U8).register_field('a', U16))
    with pytest.raises(DuplicateFieldError):
        registry.freeze()


def test_duplicate_variant() -> None:
    registry = BindingsRegistry()
    registry.register_enum_binding('Choice', 'Choice', EnumVariants().register_variant('A').register_variant('A'))
    with pytest.raises(DuplicateFieldError):
        registry.freeze()


def test_duplicate_named_variant_field() -> None:
    registry = BindingsRegistry()
    fields = StructFields().register_field('x', U8).register_field('x', U8)
    registry.register_enum_binding('Choice', 'Choice', EnumVariants().register_unnamed_struct('A', fields))
    with pytest.raises(DuplicateFieldError):
        registry.freeze()


def test_non_contiguous_variant_indexes() -> None:
    variants = (EnumVariant(0, 'A', EmptyVariant()), EnumVariant(2, 'B', EmptyVariant()))
    registry = BindingsRegistry()
    registry.register(Container('Choice', 'Choice', EnumType(variants)))
    with pytest.raises(VariantIndexError):
        registry.freeze()


@pytest.mark.parametrize('v_type', [
    ObjectType('Missing'),
    ArrayType(ObjectType('Missing')),
    OptionalType(ArrayType(ObjectType('Missing'))),
])
def test_unresolved_reference(v_type) -> None:
    registry = BindingsRegistry()
    registry.register_struct_binding('Holder', 'Holder', StructFields().register_field('x', v_type))
    with pytest.raises(UnresolvedReferenceError):
        registry.freeze()


def test_unresolved_reference_in_variant() -> None:
    registry = BindingsRegistry()
    registry.register_enum_binding(
        'Choice', 'Choice', EnumVariants().register_variant_tuple('A', TupleFields().register_field(ObjectType('X')))
    )
    with pytest.raises(UnresolvedReferenceError):
        registry.freeze()


def test_self_reference_is_allowed() -> None:
    registry = BindingsRegistry()
    registry.register_struct_binding(
        'Node', 'Node',
        StructFields().register_field('value', U8).register_field('children', ArrayType(ObjectType('Node'))),
    )
    frozen = registry.freeze()
    assert frozen.min_encoded_size(ObjectType('Node')) == 2


@pytest.mark.parametrize('name', ['1Pair', 'Has Space', 'dash-ed', ''])
def test_invalid_container_name(name: str) -> None:
    registry = BindingsRegistry()
    registry.register_unit_struct_binding(name, name)
    with pytest.raises(InvalidNameError):
        registry.freeze()


def test_invalid_field_name() -> None:
    registry = BindingsRegistry()
    registry.register_struct_binding('Pair', 'Pair', StructFields().register_field('not valid', U8))
    with pytest.raises(InvalidNameError):
        registry.freeze()


def test_registry_errors_share_a_base() -> None:
    for error in (DuplicateContainerError, DuplicateFieldError, DuplicateIdentifierError, InvalidNameError,
                  UnresolvedReferenceError, VariantIndexError):
        assert issubclass(error, InvalidRegistryError)


def test_min_encoded_size() -> None:
    registry = build_example_registry()
    assert registry.min_encoded_size(U8) == 1
    assert registry.min_encoded_size(STRING) == 1
    assert registry.min_encoded_size(OptionalType(ObjectType('Pair'))) == 1
    assert registry.min_encoded_size(ObjectType('Pair')) == 2
    assert registry.min_encoded_size(ObjectType('Point')) == 2
    assert registry.min_encoded_size(ObjectType('Marker')) == 0
    assert registry.min_encoded_size(ObjectType('Choice')) == 1
    assert registry.min_encoded_size(ObjectType('Document')) == 4
