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
    return parser


def execute(args: Namespace) -> int:
    from wirebind.schema import load_schema

    registry = load_schema(args.schema)
    print(f'{args.schema}: {len(registry)} container(s) ok')
    for container in registry:
        print(f'    {container.name} ({container.type.kind}) -> {container.obj_identifier}')
    return 0


def main(argv: Optional[list[str]] = None, *, prog: Optional[str] = None) -> int:
    parser = create_parser(prog)
    args = parser.parse_args(argv)
    return execute(args)
