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

from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import ValidationError
from structlog import get_logger

from wirebind.exception import SchemaLoadError
from wirebind.registry import BindingsRegistry, EnumVariants, FrozenRegistry, StructFields, TupleFields, build_registry
from wirebind.schema.models import (
    ContainerModel,
    EnumModel,
    FieldModel,
    StructModel,
    TupleStructModel,
    UnitStructModel,
    parse_type_expr,
)
from wirebind.utils import pydantic
from wirebind.utils.yaml import dict_from_yaml

logger = get_logger()


def _struct_fields(fields: list[FieldModel]) -> StructFields:
    struct_fields = StructFields()
    for field in fields:
        struct_fields.register_field(field.name, field.value_type())
    return struct_fields


def _tuple_fields(items: list[str]) -> TupleFields:
    tuple_fields = TupleFields()
    for item in items:
        tuple_fields.register_field(parse_type_expr(item))
    return tuple_fields


def _enum_variants(model: EnumModel) -> EnumVariants:
    variants = EnumVariants()
    for variant in model.variants:
        if variant.items is not None:
            variants.register_variant_tuple(variant.name, _tuple_fields(variant.items))
        elif variant.fields is not None:
            variants.register_unnamed_struct(variant.name, _struct_fields(variant.fields))
        else:
            variants.register_variant(variant.name)
    return variants


class SchemaDocument(pydantic.BaseModel):
    """ A whole schema document, containers are registered in the order they are listed.
    """

    containers: list[ContainerModel]

    def create_bindings(self, registry: BindingsRegistry, /) -> None:
        for container in self.containers:
            match container:
                case StructModel():
                    registry.register_struct_binding(
                        container.name, container.get_path(), _struct_fields(container.fields)
                    )
                case TupleStructModel():
                    registry.register_tuple_struct_binding(
                        container.name, container.get_path(), _tuple_fields(container.items)
                    )
                case UnitStructModel():
                    registry.register_unit_struct_binding(container.name, container.get_path())
                case EnumModel():
                    registry.register_enum_binding(container.name, container.get_path(), _enum_variants(container))
                case _:
                    raise TypeError(f'unknown container model: {container!r}')


def load_schema_dict(data: dict[str, Any]) -> FrozenRegistry:
    """ Validate a schema document given as a dict and build a frozen registry from it.

    Raises `SchemaLoadError` if the document is malformed, or an `InvalidRegistryError` if it is well-formed but
    describes an invalid registry (duplicate names, unresolved references, ...).
    """
    try:
        document = SchemaDocument.model_validate(data)
    except ValidationError as e:
        raise SchemaLoadError(f'invalid schema document: {e}') from e
    return build_registry(document)


def load_schema(filepath: Union[Path, str]) -> FrozenRegistry:
    """Load a YAML schema document from `filepath`, see `load_schema_dict`."""
    log = logger.new(schema=str(filepath))
    try:
        data = dict_from_yaml(filepath=filepath)
    except (ValueError, yaml.YAMLError) as e:
        raise SchemaLoadError(f'cannot read schema: {e}') from e
    registry = load_schema_dict(data)
    log.debug('schema loaded', containers=len(registry))
    return registry
