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
Assembles a complete, self-contained Python module from a frozen registry.

The module is laid out in a fixed order, dispatch functions last since they reference every per-container function:

1. primitive read/write runtime (the contents of `wirebind.runtime`)
2. `serialize_<IDENT>` functions
3. `deserialize_<IDENT>` functions
4. `is_<IDENT>` validators (only with type checks enabled)
5. `serialize` dispatch
6. `deserialize` dispatch
"""

from __future__ import annotations

import ast
import inspect
from functools import cache
from types import ModuleType
from typing import Optional

from structlog import get_logger

from wirebind.code_gen.des import gen_des_functions, gen_deserialize_func
from wirebind.code_gen.ser import gen_ser_functions, gen_serialize_func
from wirebind.code_gen.type_checking import gen_type_checkings
from wirebind.conf.settings import WirebindSettings
from wirebind.registry import FrozenRegistry

logger = get_logger()

GENERATED_MODULE_NAME = 'wirebind_generated'

PUBLIC_NAMES: tuple[str, ...] = (
    'serialize',
    'deserialize',
    'Serializer',
    'Deserializer',
    'WireError',
    'SerializationError',
    'DeserializationError',
    'UnknownType',
    'MalformedTypeKey',
    'ShapeMismatch',
    'InvalidDiscriminant',
    'BufferUnderrun',
    'NumericOverflow',
    'InvalidString',
    'TrailingData',
    'NestingTooDeep',
)


@cache
def runtime_source() -> str:
    """ Source of `wirebind.runtime` without its license header and docstring.
    """
    from wirebind import runtime
    source = inspect.getsource(runtime)
    body = ast.parse(source).body
    if body and isinstance(body[0], ast.Expr) and isinstance(body[0].value, ast.Constant):
        body = body[1:]
    if not body:
        raise RuntimeError('wirebind.runtime has no code to embed')
    lines = source.splitlines(keepends=True)
    return ''.join(lines[body[0].lineno - 1:])


def gen_header(registry: FrozenRegistry) -> str:
    from wirebind.version import __version__
    lines = [
        f'# This module was generated by wirebind {__version__}, do not edit it by hand.',
        '#',
        '# Registered types:',
    ]
    lines.extend(f'#   {container.name} ({container.type.kind})' for container in registry)
    if not len(registry):
        lines.append('#   (none)')
    return '\n'.join(lines)


def gen_exports() -> str:
    lines = ['__all__ = [']
    lines.extend(f'    {name!r},' for name in PUBLIC_NAMES)
    lines.append(']')
    return '\n'.join(lines)


def generate_python(registry: FrozenRegistry, *, settings: Optional[WirebindSettings] = None) -> str:
    """ Generate the source of a module exposing `serialize(type_name, value)` and `deserialize(type_name, data)` for
    every container of the registry.

    The output only depends on the registry and settings, generating twice yields the same text.
    """
    if settings is None:
        from wirebind.conf.get_settings import get_global_settings
        settings = get_global_settings()
    log = logger.new(containers=len(registry), type_checks=settings.TYPE_CHECKS)
    log.debug('generating bindings')

    parts = [
        gen_header(registry),
        runtime_source(),
        gen_ser_functions(registry),
        gen_des_functions(registry),
    ]
    if settings.TYPE_CHECKS:
        parts.append(gen_type_checkings(registry))
    parts.append(gen_serialize_func(registry, settings.TYPE_CHECKS))
    parts.append(gen_deserialize_func(registry))
    parts.append(gen_exports())

    source = '\n\n\n'.join(part.strip('\n') for part in parts if part.strip('\n')) + '\n'
    log.info('bindings generated', size=len(source))
    return source


def load_module(source: str, name: str = GENERATED_MODULE_NAME) -> ModuleType:
    """ Execute generated source into a fresh module object, without touching `sys.modules`.
    """
    module = ModuleType(name)
    code = compile(source, f'<{name}>', 'exec')
    exec(code, module.__dict__)
    return module


__all__ = [
    'generate_python',
    'load_module',
    'runtime_source',
]
