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
wirebind generates self-contained Python modules that encode and decode values of a fixed set of types to and from a
compact binary wire format (varint numbers, length-prefixed strings, bytes and arrays, index-tagged enums).

Types are described to a `BindingsRegistry` (directly, through a `Bindings` implementation, or with a schema
document), the frozen registry is then handed to `generate_python`.
"""

from wirebind.code_gen import generate_python, load_module
from wirebind.conf import WirebindSettings
from wirebind.exception import InvalidRegistryError, SchemaLoadError, WirebindError
from wirebind.registry import (
    Bindings,
    BindingsRegistry,
    EnumVariants,
    FrozenRegistry,
    StructFields,
    TupleFields,
    build_registry,
)
from wirebind.version import __version__

__all__ = [
    'generate_python',
    'load_module',
    'WirebindSettings',
    'WirebindError',
    'InvalidRegistryError',
    'SchemaLoadError',
    'Bindings',
    'BindingsRegistry',
    'EnumVariants',
    'FrozenRegistry',
    'StructFields',
    'TupleFields',
    'build_registry',
    '__version__',
]
