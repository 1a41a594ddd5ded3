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
from typing import Union

from wirebind.utils import pydantic
from wirebind.utils.yaml import dict_from_yaml


class WirebindSettings(pydantic.BaseModel):
    # Generate an `is_<IDENT>` shape validator per container and make `serialize` refuse values that don't conform to
    # the registered shape. Disabling it makes the generated module smaller and `serialize` faster, but a malformed
    # value is then only caught if encoding it happens to fail.
    TYPE_CHECKS: bool = True

    @classmethod
    def from_yaml(cls, *, filepath: Union[Path, str]) -> 'WirebindSettings':
        """Takes a filepath to a yaml file and returns a validated WirebindSettings instance."""
        settings_dict = dict_from_yaml(filepath=filepath)
        return cls.model_validate(settings_dict)
