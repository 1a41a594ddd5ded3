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

import sys
from argparse import ArgumentParser, Namespace
from typing import Optional

from structlog import get_logger

logger = get_logger()


def create_parser(prog: Optional[str] = None) -> ArgumentParser:
    from wirebind.cli.util import create_parser
    parser = create_parser()
    if prog is not None:
        parser.prog = prog
    parser.add_argument('schema', help='YAML schema document describing the containers')
    parser.add_argument('-o', '--out', default=None,
                        help='File where the generated module is written (default: stdout)')
    parser.add_argument('--config-yaml', default=None, help='Settings YAML file')
    parser.add_argument('--no-type-checks', action='store_true',
                        help='Do not generate shape validators, overrides the settings file')
    return parser


def execute(args: Namespace) -> int:
    from wirebind.code_gen import generate_python
    from wirebind.conf.get_settings import get_global_settings
    from wirebind.conf.settings import WirebindSettings
    from wirebind.schema import load_schema

    if args.config_yaml is not None:
        settings = WirebindSettings.from_yaml(filepath=args.config_yaml)
    else:
        settings = get_global_settings()
    if args.no_type_checks:
        settings = settings.model_copy(update={'TYPE_CHECKS': False})

    registry = load_schema(args.schema)
    source = generate_python(registry, settings=settings)

    if args.out is None:
        sys.stdout.write(source)
    else:
        with open(args.out, 'w', encoding='utf-8') as f:
            f.write(source)
        log = logger.new(out=args.out)
        log.info('bindings written', containers=len(registry))
    return 0


def main(argv: Optional[list[str]] = None, *, prog: Optional[str] = None) -> int:
    parser = create_parser(prog)
    args = parser.parse_args(argv)
    return execute(args)
